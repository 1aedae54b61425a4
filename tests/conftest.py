import httpx
import pytest
from unittest.mock import AsyncMock
from webhook_service.context import AuthContext
from webhook_service.database import create_engine, create_session_factory, init_db
from webhook_service.main import create_app
from webhook_service.notifier import SettlementClient
from webhook_service.schemas import PaymentRecord
from webhook_service.store import PaymentStore

WEBHOOK_TOKEN = "test-webhook-token"

PENDING_PAYMENTS = [
    PaymentRecord(transaction_id="abc123", amount="49.90", currency="BRL",
                  event="payment_success", timestamp="2023-10-01T12:00:00Z"),
    PaymentRecord(transaction_id="abc123a", amount="29.90", currency="BRL",
                  event="payment_success", timestamp="2023-10-01T12:00:00Z"),
    PaymentRecord(transaction_id="abc123abc", amount="99.90", currency="BRL",
                  event="payment_success", timestamp="2023-10-01T12:00:00Z"),
    PaymentRecord(transaction_id="short-ts", amount="10.00", currency="USD",
                  event="payment_success", timestamp="2023-10"),
]


def payload_for(transaction_id: str, **overrides) -> dict:
    record = next(p for p in PENDING_PAYMENTS if p.transaction_id == transaction_id)
    payload = record.model_dump()
    payload.update(overrides)
    return payload


@pytest.fixture
async def engine(tmp_path):
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'payments.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def store(engine):
    store = PaymentStore(create_session_factory(engine))
    await store.seed_pending(PENDING_PAYMENTS)
    return store


@pytest.fixture
def notifier():
    return AsyncMock(spec=SettlementClient)


@pytest.fixture
def context(store, notifier):
    return AuthContext(webhook_token=WEBHOOK_TOKEN, store=store, notifier=notifier)


@pytest.fixture
async def client(context):
    app = create_app(context=context)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
