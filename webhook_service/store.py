import logging
from typing import Iterable
from sqlalchemy import select, delete
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from webhook_service.errors import PaymentNotFoundError, MoveNotFoundError, StorageError
from webhook_service.models import PaymentState, PendingPayment, STATE_MODELS
from webhook_service.schemas import PaymentRecord

logger = logging.getLogger(__name__)

_INSERT_IGNORE_DIALECTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class PaymentStore:
    """Pending, confirmed and cancelled payments keyed by transaction id.

    Moving a payment out of ``pending`` is the only write path used while
    serving requests. Resetting and seeding are setup-time operations.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    async def lookup_pending(self, transaction_id: str) -> PaymentRecord:
        try:
            async with self._session_factory() as session:
                payment = await session.get(PendingPayment, transaction_id)
        except SQLAlchemyError as e:
            raise StorageError(f"Lookup of {transaction_id} failed: {e}") from e
        if payment is None:
            raise PaymentNotFoundError(transaction_id)
        return PaymentRecord.model_validate(payment)

    async def move(self, transaction_id: str, destination: PaymentState):
        """Atomically relocate a pending payment into a terminal set.

        The pending row is re-read inside the transaction and its delete is
        the check: exactly one row must go. A concurrent mover that lost the
        race deletes nothing and gets MoveNotFoundError. On any failure the
        transaction is rolled back and the pending row is left untouched.
        """
        if destination is PaymentState.PENDING:
            raise ValueError("Payments cannot be moved back to pending")
        target = STATE_MODELS[destination]

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    result = await session.execute(
                        select(PendingPayment)
                        .where(PendingPayment.transaction_id == transaction_id)
                        .with_for_update()
                    )
                    rows = result.scalars().all()
                    if len(rows) != 1:
                        raise MoveNotFoundError(transaction_id, len(rows))
                    fields = rows[0].to_fields()

                    deleted = await session.execute(
                        delete(PendingPayment)
                        .where(PendingPayment.transaction_id == transaction_id)
                        .execution_options(synchronize_session=False)
                    )
                    if deleted.rowcount != 1:
                        raise MoveNotFoundError(transaction_id, deleted.rowcount)

                    session.add(target(**fields))
                    await session.flush()
        except IntegrityError as e:
            # Already present in a terminal set; the pending delete was rolled back
            logger.error(f"Payment {transaction_id} already settled, move to {destination.value} refused: {e}")
            raise MoveNotFoundError(transaction_id) from e
        except SQLAlchemyError as e:
            logger.error(f"Moving payment {transaction_id} to {destination.value} failed: {e}")
            raise StorageError(f"Move of {transaction_id} to {destination.value} failed") from e

        logger.info(f"Payment {transaction_id} moved to {destination.value}")

    async def move_to_confirmed(self, transaction_id: str):
        await self.move(transaction_id, PaymentState.CONFIRMED)

    async def move_to_cancelled(self, transaction_id: str):
        await self.move(transaction_id, PaymentState.CANCELLED)

    async def reset_all_state(self):
        async with self._session_factory() as session:
            async with session.begin():
                for model in STATE_MODELS.values():
                    await session.execute(delete(model))
        logger.info("Payment tables cleared.")

    async def seed_pending(self, records: Iterable[PaymentRecord]) -> int:
        """Insert pending payments, skipping transaction ids that already exist.

        Returns the number of rows actually inserted.
        """
        rows = [record.model_dump() for record in records]
        if not rows:
            return 0

        async with self._session_factory() as session:
            async with session.begin():
                insert = _INSERT_IGNORE_DIALECTS.get(session.bind.dialect.name)
                if insert is not None:
                    inserted = 0
                    for row in rows:
                        stmt = insert(PendingPayment).values(**row).on_conflict_do_nothing(
                            index_elements=["transaction_id"]
                        )
                        result = await session.execute(stmt)
                        inserted += result.rowcount
                else:
                    # Dialects without ON CONFLICT support fall back to a per-row existence check
                    inserted = 0
                    for row in rows:
                        if await session.get(PendingPayment, row["transaction_id"]) is None:
                            session.add(PendingPayment(**row))
                            await session.flush()
                            inserted += 1

        logger.info(f"Seeded {inserted} of {len(rows)} pending payments.")
        return inserted

    async def state_of(self, transaction_id: str) -> PaymentState | None:
        async with self._session_factory() as session:
            for state, model in STATE_MODELS.items():
                if await session.get(model, transaction_id) is not None:
                    return state
        return None

    async def get_record(self, transaction_id: str, state: PaymentState) -> PaymentRecord | None:
        async with self._session_factory() as session:
            payment = await session.get(STATE_MODELS[state], transaction_id)
        if payment is None:
            return None
        return PaymentRecord.model_validate(payment)
