"""Chain Outbox — decouples blockchain notifications from the HTTP write path.

Invariants:
    - enqueue() never awaits and never raises: the store commit is the
      transaction boundary, the notification is strictly after it
    - One worker task drains the queue, so marker transfers (and their nonces)
      are sent one at a time
    - Every delivery failure is logged and counted; none reaches a caller or
      rolls back a store mutation
    - A full queue drops the notification with a warning

Design Decisions:
    - asyncio.Queue + background task over FastAPI BackgroundTasks: survives the
      request, bounded, and observable through stats()
    - on_confirmed callback instead of a store reference: the outbox does not
      know how records are kept
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from contextlib import suppress
from dataclasses import dataclass

from rice_supply.core.domain_types import EntityKind
from rice_supply.core.errors import ChainInteractionError
from rice_supply.infrastructure.chain_client import ChainClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChainNotification:
    entity: EntityKind
    record_id: str


ConfirmedCallback = Callable[[ChainNotification, str], Awaitable[None]]


class ChainOutbox:
    """Bounded queue of pending marker transfers with a single worker."""

    def __init__(
        self,
        client: ChainClient | None,
        on_confirmed: ConfirmedCallback | None = None,
        max_size: int = 1000,
    ):
        self._client = client
        self._on_confirmed = on_confirmed
        self._queue: asyncio.Queue[ChainNotification] = asyncio.Queue(maxsize=max_size)
        self._task: asyncio.Task | None = None
        self.sent = 0
        self.failed = 0
        self.dropped = 0

    @property
    def enabled(self) -> bool:
        return self._client is not None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def enqueue(self, notification: ChainNotification) -> bool:
        """Queue a notification. Returns False if disabled or the queue is full."""
        if self._client is None:
            return False
        try:
            self._queue.put_nowait(notification)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(
                f"Chain outbox full, dropping notification for {notification.record_id}",
                extra={
                    "entity": notification.entity.value,
                    "record_id": notification.record_id,
                    "queue_size": self._queue.qsize(),
                },
            )
            return False
        return True

    async def start(self) -> None:
        if self._client is None or self.running:
            return
        self._task = asyncio.create_task(self._run(), name="chain-outbox")
        logger.info("Chain outbox worker started")

    async def stop(self, drain_timeout: float = 5.0) -> None:
        """Give pending notifications `drain_timeout` seconds, then cancel."""
        if self._task is None:
            return
        try:
            await asyncio.wait_for(self._queue.join(), timeout=drain_timeout)
        except TimeoutError:
            logger.warning(
                f"Chain outbox stopped with {self._queue.qsize()} pending notifications",
                extra={"queue_size": self._queue.qsize()},
            )
        self._task.cancel()
        with suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def drain(self) -> None:
        """Wait until every queued notification has been processed."""
        await self._queue.join()

    def stats(self) -> dict:
        return {
            "enabled": self.enabled,
            "running": self.running,
            "pending": self._queue.qsize(),
            "sent": self.sent,
            "failed": self.failed,
            "dropped": self.dropped,
        }

    async def _run(self) -> None:
        while True:
            notification = await self._queue.get()
            try:
                await self._deliver(notification)
            finally:
                self._queue.task_done()

    async def _deliver(self, notification: ChainNotification) -> None:
        extra = {
            "entity": notification.entity.value,
            "record_id": notification.record_id,
        }
        try:
            tx_hash = await self._client.send_marker_transfer(
                notification.record_id, notification.entity.value,
            )
        except ChainInteractionError as e:
            self.failed += 1
            logger.error(
                f"Chain notification failed: {e.message}",
                extra={**extra, "error_code": e.code},
            )
            return
        except Exception as e:
            self.failed += 1
            logger.error(
                f"Unexpected chain notification error: {e}",
                extra=extra, exc_info=True,
            )
            return

        self.sent += 1
        logger.info(
            f"Marker transfer confirmed for {notification.record_id}",
            extra={**extra, "tx_hash": tx_hash},
        )
        if self._on_confirmed is None:
            return
        try:
            await self._on_confirmed(notification, tx_hash)
        except Exception as e:
            logger.error(
                f"Failed to record marker transfer {tx_hash}: {e}",
                extra={**extra, "tx_hash": tx_hash}, exc_info=True,
            )
