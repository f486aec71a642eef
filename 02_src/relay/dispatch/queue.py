"""DispatchQueue: hand-off channel between ingestion and delivery."""

import asyncio

from ..errors import QueueClosedError
from ..logging_config import get_logger
from ..models import QueuedPayload

logger = get_logger(__name__)


class DispatchQueue:
    """Bounded asyncio FIFO with a close signal for shutdown."""

    def __init__(self, maxsize: int = 0):
        self._queue: asyncio.Queue[QueuedPayload] = asyncio.Queue(maxsize=maxsize)
        self._closed = False
        self._blocked_puts: set[asyncio.Future] = set()

    @property
    def maxsize(self) -> int:
        return self._queue.maxsize

    @property
    def closed(self) -> bool:
        return self._closed

    def qsize(self) -> int:
        return self._queue.qsize()

    async def put(self, item: QueuedPayload) -> None:
        """Enqueue a payload, waiting while the queue is full.

        Raises QueueClosedError if the queue is closed before or while waiting.
        """
        if self._closed:
            raise QueueClosedError("Dispatch queue is closed")
        if not self._queue.full():
            self._queue.put_nowait(item)
            return

        waiter = asyncio.ensure_future(self._queue.put(item))
        self._blocked_puts.add(waiter)
        try:
            await waiter
        except asyncio.CancelledError:
            # close() removes the waiters it cancels
            if self._closed and waiter not in self._blocked_puts:
                raise QueueClosedError("Dispatch queue is closed") from None
            raise
        finally:
            self._blocked_puts.discard(waiter)

    async def get(self) -> QueuedPayload:
        """Wait for the next payload."""
        return await self._queue.get()

    def get_nowait(self) -> QueuedPayload:
        """Take the next payload; raises asyncio.QueueEmpty if there is none."""
        return self._queue.get_nowait()

    def task_done(self) -> None:
        self._queue.task_done()

    async def join(self) -> None:
        """Wait until every enqueued payload has been marked done."""
        await self._queue.join()

    def close(self) -> None:
        """Stop accepting new payloads. Already queued payloads stay.

        Producers still waiting for room get QueueClosedError.
        """
        if not self._closed:
            logger.info("Dispatch queue closed with %s pending", self.qsize())
        self._closed = True
        waiters, self._blocked_puts = self._blocked_puts, set()
        for waiter in waiters:
            waiter.cancel()

    def discard_pending(self) -> int:
        """Drop every queued payload and return how many were dropped."""
        dropped = 0
        while True:
            try:
                self._queue.get_nowait()
            except asyncio.QueueEmpty:
                break
            self._queue.task_done()
            dropped += 1
        return dropped
