class WebhookError(Exception):
    """Base class for every failure the webhook pipeline turns into a response."""


class AuthError(WebhookError):
    pass


class DecodeError(WebhookError):
    def __init__(self, fields=None, reason: str = "invalid payload"):
        self.fields = list(fields or [])
        self.reason = reason
        if self.fields:
            message = f"{reason}: {', '.join(self.fields)}"
        else:
            message = reason
        super().__init__(message)


class PaymentNotFoundError(WebhookError):
    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Pending payment {transaction_id} not found")


class PaymentValidationError(WebhookError):
    pass


class FieldMismatchError(PaymentValidationError):
    def __init__(self, field: str, expected: str, actual: str):
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(f"Field '{field}' mismatch: stored={expected!r} claimed={actual!r}")


class InvalidDataError(PaymentValidationError):
    pass


class NetworkError(WebhookError):
    pass


class MoveError(WebhookError):
    pass


class MoveNotFoundError(MoveError):
    def __init__(self, transaction_id: str, matches: int = 0):
        self.transaction_id = transaction_id
        self.matches = matches
        super().__init__(f"Expected one pending payment {transaction_id}, found {matches}")


class StorageError(MoveError):
    pass
