"""Application bootstrap and lifecycle management."""

from typing import Protocol

import httpx

from .config import RelaySettings
from .delivery import DeliveryWorker, WebhookClient
from .dispatch import DispatchQueue
from .logging_config import get_logger

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Drain the queue and shut down in reverse order."""
        ...

    @property
    def queue(self) -> DispatchQueue:
        ...

    @property
    def worker(self) -> DeliveryWorker:
        ...


class Application:
    """Main application bootstrap."""

    def __init__(
        self,
        settings: RelaySettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._settings = settings or RelaySettings.from_env()
        self._transport = transport

        # Components (will be initialized in start())
        self._webhook_client: WebhookClient | None = None
        self._queue: DispatchQueue | None = None
        self._worker: DeliveryWorker | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. WebhookClient (no dependencies)
        self._webhook_client = WebhookClient(
            url=self._settings.webhook_url,
            timeout=self._settings.webhook_timeout,
            transport=self._transport,
        )
        await self._webhook_client.start()
        logger.info("WebhookClient initialized for %s", self._settings.webhook_url)

        # 2. DispatchQueue (no dependencies)
        self._queue = DispatchQueue(maxsize=self._settings.queue_maxsize)
        logger.info("DispatchQueue initialized (maxsize=%s)", self._settings.queue_maxsize)

        # 3. DeliveryWorker (depends on DispatchQueue + WebhookClient)
        self._worker = DeliveryWorker(
            queue=self._queue,
            webhook_client=self._webhook_client,
        )
        await self._worker.start()
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Drain the queue and shut down in reverse order."""
        if self._worker:
            await self._worker.stop(drain_timeout=self._settings.drain_timeout)
        if self._webhook_client:
            await self._webhook_client.close()
            logger.info("WebhookClient closed")

    @property
    def settings(self) -> RelaySettings:
        return self._settings

    @property
    def queue(self) -> DispatchQueue:
        """Get dispatch queue instance."""
        if self._queue is None:
            raise RuntimeError("Application not started")
        return self._queue

    @property
    def worker(self) -> DeliveryWorker:
        """Get delivery worker instance."""
        if self._worker is None:
            raise RuntimeError("Application not started")
        return self._worker
