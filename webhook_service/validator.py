from webhook_service.errors import FieldMismatchError, InvalidDataError
from webhook_service.schemas import PaymentRecord, WebhookPayload

# Checked in this order; the first mismatch wins
COMPARED_FIELDS = ("amount", "currency", "timestamp", "event")
MIN_TIMESTAMP_LENGTH = 10


def validate(stored: PaymentRecord, claimed: WebhookPayload):
    """Reconcile a webhook claim with the stored pending payment.

    Every compared field must match byte for byte. A divergent claim is
    never corrected; it is rejected so the payment can be cancelled.
    """
    for field in COMPARED_FIELDS:
        expected = getattr(stored, field)
        actual = getattr(claimed, field)
        if expected != actual:
            raise FieldMismatchError(field, expected, actual)

    check_business_rules(claimed)


def check_business_rules(claimed: WebhookPayload):
    if not claimed.timestamp or len(claimed.timestamp) < MIN_TIMESTAMP_LENGTH:
        raise InvalidDataError(f"Malformed timestamp {claimed.timestamp!r}")
