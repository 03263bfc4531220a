"""
Webhook Dispatch Queue — rate-limited delivery of pending webhooks.

Producers push onto the front of a shared deque; a single dispatcher task
pops from the back, at most MAX_PER_WINDOW items every WINDOW_SECONDS:

  enqueue ──▶ [ newest ... oldest ] ──▶ dispatcher ──▶ WebhookClient.send
                                         (2 per 2s)

The lock guards deque mutation only and is never held across a network
call. Delivery is at-most-once: failures are logged and dropped.

There is no backpressure. The deque is unbounded, so producers that
outpace the ceiling grow it without limit.
"""
from __future__ import annotations

import asyncio
import structlog
from collections import deque
from typing import Iterable, Optional

from channels.webhook_client import WebhookClient
from models.webhook import Webhook

logger = structlog.get_logger()

MAX_PER_WINDOW = 2
WINDOW_SECONDS = 2.0


class WebhookQueue:
    """
    Usage:
        queue = WebhookQueue(client)
        await queue.enqueue(webhook)
        task = queue.start()          # runs forever

        queue = WebhookQueue(client, drain_until_empty=True)
        ...
        await queue.start()           # resolves once the deque is empty

        async with WebhookQueue() as queue:   # closes the client it created
            ...
    """

    def __init__(
        self,
        client: Optional[WebhookClient] = None,
        drain_until_empty: bool = False,
        window_seconds: float = WINDOW_SECONDS,
    ):
        self._owns_client = client is None
        self.client = client if client is not None else WebhookClient()
        self.drain_until_empty = drain_until_empty
        self.window_seconds = window_seconds
        self.webhooks: deque[Webhook] = deque()
        self._lock = asyncio.Lock()
        self.windows = 0
        self.delivered = 0
        self.failed = 0

    # ── Producers ─────────────────────────────────────────────

    async def enqueue(self, webhook: Webhook) -> None:
        async with self._lock:
            self.webhooks.appendleft(webhook)
            pending = len(self.webhooks)
        logger.debug("webhook_enqueued", pending=pending)

    async def enqueue_multi(self, webhooks: Iterable[Webhook]) -> None:
        """
        Push each webhook to the front in turn.

        The batch sits reversed in the deque, but since the dispatcher pops
        from the back it is still delivered in the order given.
        """
        async with self._lock:
            for webhook in webhooks:
                self.webhooks.appendleft(webhook)
            pending = len(self.webhooks)
        logger.debug("webhooks_enqueued", pending=pending)

    async def pending(self) -> int:
        async with self._lock:
            return len(self.webhooks)

    # ── Dispatcher ────────────────────────────────────────────

    def start(self) -> asyncio.Task:
        """Spawn the dispatcher. The task returns this queue once drained."""
        return asyncio.create_task(self.run())

    async def run(self) -> WebhookQueue:
        loop = asyncio.get_running_loop()
        logger.info("webhook_dispatcher_started",
                    drain_until_empty=self.drain_until_empty,
                    window_seconds=self.window_seconds)

        while True:
            window_start = loop.time()
            batch = await self._pop_batch()

            if not batch and self.drain_until_empty:
                logger.info("webhook_dispatcher_drained",
                            windows=self.windows,
                            delivered=self.delivered,
                            failed=self.failed)
                await self.close()
                return self

            # at most two per window, so sequential sends are enough
            for webhook in batch:
                await self._deliver(webhook)
            if batch:
                self.windows += 1

            remaining = window_start + self.window_seconds - loop.time()
            await asyncio.sleep(max(remaining, 0.0))

    async def _pop_batch(self) -> list[Webhook]:
        async with self._lock:
            batch = []
            for _ in range(MAX_PER_WINDOW):
                if not self.webhooks:
                    break
                batch.append(self.webhooks.pop())
            return batch

    async def _deliver(self, webhook: Webhook) -> None:
        try:
            await self.client.send(webhook)
            self.delivered += 1
        except Exception as e:
            self.failed += 1
            logger.warning("webhook_dispatch_failed", error=str(e))

    # ── Lifecycle ─────────────────────────────────────────────

    async def close(self) -> None:
        """Close the HTTP client if this queue created it."""
        if self._owns_client:
            await self.client.close()

    async def __aenter__(self) -> WebhookQueue:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
