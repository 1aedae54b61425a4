import pytest
from webhook_service.errors import FieldMismatchError, InvalidDataError, PaymentValidationError
from webhook_service.schemas import PaymentRecord, WebhookPayload
from webhook_service.validator import validate

STORED = PaymentRecord(
    transaction_id="abc123",
    amount="49.90",
    currency="BRL",
    event="payment_success",
    timestamp="2023-10-01T12:00:00Z",
)


def claim(**overrides) -> WebhookPayload:
    return WebhookPayload(**{**STORED.model_dump(), **overrides})


def test_identical_claim_passes():
    validate(STORED, claim())


@pytest.mark.parametrize(
    "field,value",
    [
        ("amount", "19.90"),
        ("currency", "USD"),
        ("timestamp", "2023-10-01T12:00:01Z"),
        ("event", "payment_failed"),
    ],
)
def test_single_field_mismatch_is_reported(field, value):
    with pytest.raises(FieldMismatchError) as exc_info:
        validate(STORED, claim(**{field: value}))

    assert exc_info.value.field == field
    assert exc_info.value.actual == value


def test_numerically_equal_amount_with_different_spelling_mismatches():
    with pytest.raises(FieldMismatchError) as exc_info:
        validate(STORED, claim(amount="49.9"))
    assert exc_info.value.field == "amount"


def test_first_mismatch_in_check_order_wins():
    with pytest.raises(FieldMismatchError) as exc_info:
        validate(STORED, claim(event="other", currency="USD", timestamp="x"))
    assert exc_info.value.field == "currency"


def test_short_timestamp_fails_business_rules():
    stored = PaymentRecord(**{**STORED.model_dump(), "timestamp": "2023-10"})

    with pytest.raises(InvalidDataError):
        validate(stored, claim(timestamp="2023-10"))


def test_empty_timestamp_fails_business_rules():
    stored = PaymentRecord(**{**STORED.model_dump(), "timestamp": ""})

    with pytest.raises(PaymentValidationError):
        validate(stored, claim(timestamp=""))
