import logging
import httpx
from webhook_service.errors import NetworkError

logger = logging.getLogger(__name__)


class SettlementClient:
    """Notifies the external settlement service about confirmations and cancellations."""

    def __init__(
        self,
        confirm_url: str,
        cancel_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.confirm_url = confirm_url
        self.cancel_url = cancel_url
        self.timeout = timeout
        self._transport = transport

    async def notify_confirm(self, transaction_id: str):
        await self._post(self.confirm_url, transaction_id)

    async def notify_cancel(self, transaction_id: str):
        await self._post(self.cancel_url, transaction_id)

    async def _post(self, url: str, transaction_id: str):
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, json={"transaction_id": transaction_id})
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NetworkError(
                f"Settlement service answered {e.response.status_code} for {transaction_id} at {url}"
            ) from e
        except httpx.HTTPError as e:
            raise NetworkError(f"Settlement call for {transaction_id} to {url} failed: {e!r}") from e

        logger.info(f"Settlement service notified at {url} for {transaction_id}")
