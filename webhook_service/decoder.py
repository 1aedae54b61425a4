from pydantic import ValidationError
from webhook_service.errors import DecodeError
from webhook_service.schemas import WebhookPayload, TransactionRef


def _decode(model, payload):
    try:
        return model.model_validate_json(payload)
    except ValidationError as e:
        fields = []
        for error in e.errors():
            if error["type"] == "json_invalid":
                raise DecodeError(reason="invalid JSON") from e
            if error["loc"]:
                fields.append(str(error["loc"][0]))
            else:
                raise DecodeError(reason="payload is not a JSON object") from e
        raise DecodeError(fields, reason="missing or invalid fields") from e


def decode_full(payload: bytes | str) -> WebhookPayload:
    """Decode a webhook body that must carry all five payment fields as strings."""
    return _decode(WebhookPayload, payload)


def decode_transaction_id_only(payload: bytes | str) -> str:
    """Recover just the transaction id from a body that failed full decoding."""
    return _decode(TransactionRef, payload).transaction_id
