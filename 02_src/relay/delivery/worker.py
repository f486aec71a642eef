"""DeliveryWorker: drains the dispatch queue and relays events to the webhook."""

import asyncio
import json
from dataclasses import asdict, dataclass
from enum import Enum

from ..decoder import AttributeDecoder, IAttributeDecoder
from ..dispatch import DispatchQueue
from ..errors import DeliveryError
from ..logging_config import get_logger
from ..models import OutboundEvent, QueuedPayload
from .webhook_client import IWebhookClient

logger = get_logger(__name__)


class ItemOutcome(str, Enum):
    """Terminal state of one dequeued payload."""

    SENT = "sent"
    DECODE_FAILED = "decode_failed"
    DELIVERY_FAILED = "delivery_failed"
    FAILED = "failed"  # unexpected error while processing


@dataclass
class WorkerStats:
    """Counters over the worker's lifetime."""

    received: int = 0
    sent: int = 0
    decode_failed: int = 0
    delivery_failed: int = 0
    failed: int = 0
    abandoned: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


class DeliveryWorker:
    """Decodes queued payloads and POSTs them to the webhook, one at a time."""

    def __init__(
        self,
        queue: DispatchQueue,
        webhook_client: IWebhookClient,
        decoder: IAttributeDecoder | None = None,
    ):
        self._queue = queue
        self._client = webhook_client
        self._decoder = decoder or AttributeDecoder()
        self._stats = WorkerStats()
        self._task: asyncio.Task | None = None

    @property
    def stats(self) -> WorkerStats:
        return self._stats

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the background consumer task."""
        if self.running:
            return
        logger.info("Starting DeliveryWorker")
        self._task = asyncio.create_task(self._run(), name="delivery-worker")

    async def stop(self, drain_timeout: float = 5.0) -> None:
        """Close the queue, drain it until the deadline, then cancel."""
        self._queue.close()

        if self.running:
            try:
                await asyncio.wait_for(self._queue.join(), timeout=drain_timeout)
            except asyncio.TimeoutError:
                logger.warning(
                    "Drain deadline of %ss passed with %s payloads pending",
                    drain_timeout,
                    self._queue.qsize(),
                )
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None

        abandoned = self._queue.discard_pending()
        if abandoned:
            self._stats.abandoned += abandoned
            logger.warning("Abandoned %s queued payloads on shutdown", abandoned)
        logger.info("DeliveryWorker stopped", extra={"context": self._stats.as_dict()})

    async def _run(self) -> None:
        """Consume the queue until cancelled."""
        while True:
            item = await self._queue.get()
            try:
                await self.process(item)
            except asyncio.CancelledError:
                self._stats.abandoned += 1
                logger.warning("Abandoned in-flight payload %s on shutdown", item.id)
                raise
            finally:
                self._queue.task_done()

    async def process(self, item: QueuedPayload) -> ItemOutcome:
        """Decode, transform and deliver one payload."""
        self._stats.received += 1
        try:
            outcome = await self._process(item)
        except Exception as e:
            logger.error("Unexpected error processing payload %s: %s", item.id, e, exc_info=True)
            outcome = ItemOutcome.FAILED

        if outcome is ItemOutcome.SENT:
            self._stats.sent += 1
        elif outcome is ItemOutcome.DECODE_FAILED:
            self._stats.decode_failed += 1
        elif outcome is ItemOutcome.DELIVERY_FAILED:
            self._stats.delivery_failed += 1
        else:
            self._stats.failed += 1
        return outcome

    async def _process(self, item: QueuedPayload) -> ItemOutcome:
        # Canonical bytes decouple the decoded event from the request's objects
        raw = json.dumps(item.payload, separators=(",", ":"))
        result = self._decoder.decode(raw.encode("ascii"))
        if not result.ok:
            logger.warning(
                "Dropping payload %s: %s",
                item.id,
                result.error,
                extra={
                    "context": {
                        "payload_id": item.id,
                        "field": result.error.field,
                        "reason": result.error.reason,
                    }
                },
            )
            return ItemOutcome.DECODE_FAILED

        event = result.event
        logger.debug("Processed payload %s: %s", item.id, event)
        outbound = OutboundEvent.from_decoded(event)

        try:
            status = await self._client.send(outbound)
        except DeliveryError as e:
            logger.warning(
                "Delivery failed for message %s: %s",
                event.message_id,
                e,
                extra={
                    "context": {
                        "payload_id": item.id,
                        "message_id": event.message_id,
                        "status_code": e.status_code,
                    }
                },
            )
            return ItemOutcome.DELIVERY_FAILED

        logger.info(
            "Delivered message %s (%s) with HTTP %s",
            event.message_id,
            event.event_name,
            status,
        )
        return ItemOutcome.SENT
