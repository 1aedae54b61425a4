import enum
import logging
from dataclasses import dataclass
from webhook_service.auth import require_token
from webhook_service.context import AuthContext
from webhook_service.decoder import decode_full, decode_transaction_id_only
from webhook_service.errors import (
    AuthError,
    DecodeError,
    MoveError,
    MoveNotFoundError,
    NetworkError,
    PaymentNotFoundError,
    PaymentValidationError,
    StorageError,
)
from webhook_service.models import PaymentState
from webhook_service.validator import validate

logger = logging.getLogger(__name__)


class Outcome(enum.Enum):
    CONFIRMED = ("confirmed", 200, None)
    UNAUTHORIZED = ("unauthorized", 400, "unauthorized")
    PAYMENT_NOT_FOUND = ("payment_not_found", 400, "payment data mismatch")
    CANCELLED_MISMATCH = ("cancelled_mismatch", 400, "payment data mismatch, payment cancelled")
    CANCELLED_MISSING_FIELDS = ("cancelled_missing_fields", 400, "missing fields, payment cancelled")
    INVALID_REQUEST = ("invalid_request", 400, "invalid request")
    CONFIRMATION_FAILED = ("confirmation_failed", 400, "payment confirmation failed")
    MOVE_NOT_FOUND = ("move_not_found", 404, "payment not found")
    STORAGE_FAILURE = ("storage_failure", 500, "internal error")

    def __init__(self, code: str, status_code: int, label: str | None):
        self.code = code
        self.status_code = status_code
        self.label = label


@dataclass(frozen=True)
class WebhookResult:
    outcome: Outcome
    transaction_id: str | None = None

    @property
    def status_code(self) -> int:
        return self.outcome.status_code

    @property
    def body(self):
        if self.outcome is Outcome.CONFIRMED:
            return self.transaction_id
        return {"error": self.outcome.label}


async def handle_webhook(context: AuthContext, token: str | None, body: bytes) -> WebhookResult:
    """Run one webhook through authentication, decoding, reconciliation and settlement.

    The settlement service is always notified before the local move. When
    the notification fails the payment stays pending.
    """
    try:
        require_token(token, context.webhook_token)
    except AuthError as e:
        logger.warning(f"Rejected webhook: {e}")
        return WebhookResult(Outcome.UNAUTHORIZED)

    try:
        claimed = decode_full(body)
    except DecodeError as e:
        logger.warning(f"Webhook payload could not be decoded: {e}")
        return await _cancel_malformed(context, body)

    transaction_id = claimed.transaction_id
    try:
        stored = await context.store.lookup_pending(transaction_id)
    except PaymentNotFoundError:
        logger.warning(f"No pending payment for transaction {transaction_id}")
        return WebhookResult(Outcome.PAYMENT_NOT_FOUND, transaction_id)
    except StorageError as e:
        logger.error(f"Lookup failed for transaction {transaction_id}: {e}")
        return WebhookResult(Outcome.STORAGE_FAILURE, transaction_id)

    try:
        validate(stored, claimed)
    except PaymentValidationError as e:
        logger.warning(f"Webhook for transaction {transaction_id} rejected: {e}")
        return await _cancel(context, transaction_id, Outcome.CANCELLED_MISMATCH)

    return await _confirm(context, transaction_id)


async def _confirm(context: AuthContext, transaction_id: str) -> WebhookResult:
    try:
        await context.notifier.notify_confirm(transaction_id)
    except NetworkError as e:
        logger.error(f"Confirmation of {transaction_id} not sent, payment left pending: {e}")
        return WebhookResult(Outcome.CONFIRMATION_FAILED, transaction_id)

    try:
        await context.store.move(transaction_id, PaymentState.CONFIRMED)
    except MoveNotFoundError as e:
        logger.error(f"Confirmed payment {transaction_id} vanished before the move: {e}")
        return WebhookResult(Outcome.MOVE_NOT_FOUND, transaction_id)
    except StorageError as e:
        logger.error(f"Confirmed payment {transaction_id} could not be stored: {e}")
        return WebhookResult(Outcome.STORAGE_FAILURE, transaction_id)

    return WebhookResult(Outcome.CONFIRMED, transaction_id)


async def _cancel(context: AuthContext, transaction_id: str, outcome: Outcome) -> WebhookResult:
    try:
        await context.notifier.notify_cancel(transaction_id)
    except NetworkError as e:
        logger.error(f"Cancellation of {transaction_id} not sent, payment left pending: {e}")
        return WebhookResult(Outcome.INVALID_REQUEST, transaction_id)

    try:
        await context.store.move(transaction_id, PaymentState.CANCELLED)
    except MoveError as e:
        logger.error(f"Cancelled payment {transaction_id} could not be moved: {e}")
        return WebhookResult(Outcome.INVALID_REQUEST, transaction_id)

    return WebhookResult(outcome, transaction_id)


async def _cancel_malformed(context: AuthContext, body: bytes) -> WebhookResult:
    try:
        transaction_id = decode_transaction_id_only(body)
    except DecodeError as e:
        logger.warning(f"Transaction id unrecoverable from webhook payload: {e}")
        return WebhookResult(Outcome.INVALID_REQUEST)

    return await _cancel(context, transaction_id, Outcome.CANCELLED_MISSING_FIELDS)
