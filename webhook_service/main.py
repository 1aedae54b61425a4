import logging
from contextlib import asynccontextmanager
import uvicorn
from fastapi import FastAPI, Depends, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from webhook_service.auth import authenticate
from webhook_service.config import Settings
from webhook_service.context import AuthContext, build_context
from webhook_service.schemas import PaymentStatusRead
from webhook_service.seeder import seed_payments
from webhook_service.webhook import handle_webhook

logger = logging.getLogger(__name__)


def get_context(request: Request) -> AuthContext:
    return request.app.state.context


def create_app(settings: Settings | None = None, context: AuthContext | None = None) -> FastAPI:
    """Build the webhook application.

    When no context is given, one is built from ``settings`` (or the
    environment) at startup and the payment tables are reset and seeded.
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if context is not None:
            yield
            return

        app_settings = settings or Settings.from_env()
        app.state.context = await build_context(app_settings)
        if app_settings.seed_on_startup:
            await seed_payments(app.state.context.store, app_settings.seed_file)
        try:
            yield
        finally:
            await app.state.context.engine.dispose()

    app = FastAPI(title="Payment Webhook Service", lifespan=lifespan)
    app.state.context = context

    @app.get("/health")
    async def health():
        return {"ok": True}

    @app.post("/webhook")
    async def receive_webhook(
        request: Request,
        x_webhook_token: str | None = Header(default=None),
        ctx: AuthContext = Depends(get_context),
    ):
        body = await request.body()
        result = await handle_webhook(ctx, x_webhook_token, body)
        logger.info(
            f"Webhook for {result.transaction_id or '<unknown>'} finished with "
            f"{result.outcome.code} ({result.status_code})"
        )
        return JSONResponse(status_code=result.status_code, content=result.body)

    @app.get("/payments/{transaction_id}", response_model=PaymentStatusRead)
    async def get_payment(
        transaction_id: str,
        x_webhook_token: str | None = Header(default=None),
        ctx: AuthContext = Depends(get_context),
    ):
        if not authenticate(x_webhook_token, ctx.webhook_token):
            logger.warning(f"Rejected payment status request for {transaction_id}: bad token")
            return JSONResponse(status_code=400, content={"error": "unauthorized"})
        state = await ctx.store.state_of(transaction_id)
        record = await ctx.store.get_record(transaction_id, state) if state is not None else None
        if record is None:
            raise HTTPException(status_code=404, detail="Payment not found")
        return PaymentStatusRead(state=state.value, **record.model_dump())

    return app


def run():
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
