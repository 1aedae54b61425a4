from pydantic import BaseModel, ConfigDict, Field, StrictStr


class PaymentFields(BaseModel):
    transaction_id: StrictStr = Field(..., examples=["abc123"])
    amount: StrictStr = Field(..., examples=["49.90"])
    currency: StrictStr = Field(..., examples=["BRL"])
    event: StrictStr = Field(..., examples=["payment_success"])
    timestamp: StrictStr = Field(..., examples=["2023-10-01T12:00:00Z"])


class PaymentRecord(PaymentFields):
    """A payment as recorded in the store."""

    model_config = ConfigDict(from_attributes=True, frozen=True)


class WebhookPayload(PaymentFields):
    """A payment as claimed by an incoming webhook; not trusted until validated."""

    model_config = ConfigDict(frozen=True)


class TransactionRef(BaseModel):
    transaction_id: StrictStr

    model_config = ConfigDict(frozen=True)


class PaymentStatusRead(PaymentFields):
    state: str
