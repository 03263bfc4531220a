"""
Webhook Transport Client — one POST per payload, no retries.

  POST <webhook_url>?wait=true
  Content-Type: application/json
  body: Webhook.to_json()

200 and 204 count as delivered; anything else raises WebhookDeliveryError
carrying the response body.
"""
from __future__ import annotations

import structlog
from dataclasses import dataclass
from typing import Optional

import httpx

from channels.errors import WebhookDeliveryError
from models.webhook import Webhook

logger = structlog.get_logger()

SUCCESS_STATUSES = frozenset({200, 204})


@dataclass(frozen=True)
class DeliveryResult:
    status_code: int
    body: str = ""


class WebhookClient:
    """Async HTTP client for webhook execution."""

    def __init__(
        self,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout, connect=10.0),
                headers={"Content-Type": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def send(self, webhook: Webhook) -> DeliveryResult:
        client = await self._get_client()
        try:
            resp = await client.post(
                webhook.endpoint,
                content=webhook.to_json(),
            )
        except httpx.HTTPError as e:
            logger.error("webhook_request_error", error=str(e))
            raise WebhookDeliveryError(f"Failed to send request, {e}") from e

        if resp.status_code in SUCCESS_STATUSES:
            logger.debug("webhook_delivered", status=resp.status_code)
            return DeliveryResult(status_code=resp.status_code, body=_read_body(resp))

        body = _read_body(resp)
        logger.error("webhook_api_error", status=resp.status_code, body=body[:500])
        raise WebhookDeliveryError(
            f"Failed to send request, {body}",
            status_code=resp.status_code,
            body=body,
        )

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> WebhookClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


def _read_body(resp: httpx.Response) -> str:
    try:
        return resp.text
    except (UnicodeDecodeError, LookupError):
        return ""
