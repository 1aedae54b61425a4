import asyncio
import logging
from pathlib import Path
from pydantic import TypeAdapter
from webhook_service.config import Settings
from webhook_service.context import build_context
from webhook_service.schemas import PaymentRecord
from webhook_service.store import PaymentStore

logger = logging.getLogger(__name__)

DEFAULT_PENDING_PAYMENTS = [
    PaymentRecord(transaction_id="abc123", amount="49.90", currency="BRL",
                  event="payment_success", timestamp="2023-10-01T12:00:00Z"),
    PaymentRecord(transaction_id="abc123a", amount="29.90", currency="BRL",
                  event="payment_success", timestamp="2023-10-01T12:00:00Z"),
    PaymentRecord(transaction_id="abc123abc", amount="99.90", currency="BRL",
                  event="payment_success", timestamp="2023-10-01T12:00:00Z"),
]

_records_adapter = TypeAdapter(list[PaymentRecord])


def load_seed_file(path: str | Path) -> list[PaymentRecord]:
    """Read pending payments from a JSON array of payment objects."""
    return _records_adapter.validate_json(Path(path).read_bytes())


async def seed_payments(store: PaymentStore, seed_file: str | None = None) -> int:
    """Clear every payment table and load the initial pending payments."""
    if seed_file:
        records = load_seed_file(seed_file)
        logger.info(f"Loaded {len(records)} seed payments from {seed_file}")
    else:
        records = DEFAULT_PENDING_PAYMENTS

    await store.reset_all_state()
    return await store.seed_pending(records)


async def seed_from_env():
    settings = Settings.from_env()
    context = await build_context(settings)
    try:
        inserted = await seed_payments(context.store, settings.seed_file)
        print(f"Seeded {inserted} pending payments.")
    finally:
        await context.engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed_from_env())
