from sqlalchemy import Column, String, DateTime, func
from sqlalchemy.orm import declarative_base
import enum

Base = declarative_base()

class PaymentState(enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"

class PaymentColumns:
    # Amount and timestamp are kept exactly as received; they are compared as strings
    transaction_id = Column(String, primary_key=True, index=True)
    amount = Column(String, nullable=False)
    currency = Column(String, nullable=False)
    event = Column(String, nullable=False)
    timestamp = Column(String, nullable=False)

    def to_fields(self) -> dict:
        return {
            "transaction_id": self.transaction_id,
            "amount": self.amount,
            "currency": self.currency,
            "event": self.event,
            "timestamp": self.timestamp,
        }

class PendingPayment(PaymentColumns, Base):
    __tablename__ = "pending_payments"

class ConfirmedPayment(PaymentColumns, Base):
    __tablename__ = "confirmed_payments"

    confirmed_at = Column(DateTime, server_default=func.now(), nullable=False)

class CancelledPayment(PaymentColumns, Base):
    __tablename__ = "cancelled_payments"

    cancelled_at = Column(DateTime, server_default=func.now(), nullable=False)

STATE_MODELS = {
    PaymentState.PENDING: PendingPayment,
    PaymentState.CONFIRMED: ConfirmedPayment,
    PaymentState.CANCELLED: CancelledPayment,
}
