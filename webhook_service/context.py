from dataclasses import dataclass
from sqlalchemy.ext.asyncio import AsyncEngine
from webhook_service.config import Settings
from webhook_service.database import create_engine, create_session_factory, init_db
from webhook_service.notifier import SettlementClient
from webhook_service.store import PaymentStore


@dataclass(frozen=True)
class AuthContext:
    """Process-wide, read-only dependencies handed to every webhook request."""

    webhook_token: str
    store: PaymentStore
    notifier: SettlementClient
    engine: AsyncEngine | None = None


async def build_context(settings: Settings) -> AuthContext:
    if not settings.webhook_token:
        raise RuntimeError("WEBHOOK_TOKEN must be set")

    engine = create_engine(settings.database_url)
    # A storage failure here is fatal for the process
    await init_db(engine)

    return AuthContext(
        webhook_token=settings.webhook_token,
        store=PaymentStore(create_session_factory(engine)),
        notifier=SettlementClient(
            settings.confirm_url,
            settings.cancel_url,
            timeout=settings.notify_timeout,
        ),
        engine=engine,
    )
