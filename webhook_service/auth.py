import hmac
from webhook_service.errors import AuthError


def authenticate(presented_token: str | None, expected: str) -> bool:
    if not presented_token or not expected:
        return False
    return hmac.compare_digest(presented_token.encode("utf-8"), expected.encode("utf-8"))


def require_token(presented_token: str | None, expected: str) -> None:
    if not presented_token:
        raise AuthError("Webhook token header missing")
    if not authenticate(presented_token, expected):
        raise AuthError("Webhook token does not match")
