"""Pytest configuration and fixtures."""

import asyncio
import json
import sys
from datetime import datetime, timezone
from pathlib import Path

import httpx
import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

WEBHOOK_URL = "https://hooks.test/relay"


class RecordingWebhook:
    """Fake downstream webhook built on httpx.MockTransport."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.delay: float = 0.0
        self.error: Exception | None = None
        self.transport = httpx.MockTransport(self._handle)

    async def _handle(self, request: httpx.Request) -> httpx.Response:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        self.requests.append(request)
        return httpx.Response(self.status_code, json={"ok": self.status_code < 400})

    @property
    def bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def webhook():
    """Create a recording fake webhook."""
    return RecordingWebhook()


@pytest.fixture
def settings():
    """Relay settings suitable for tests."""
    from relay.config import RelaySettings

    return RelaySettings(
        webhook_url=WEBHOOK_URL,
        webhook_timeout=2.0,
        queue_maxsize=100,
        drain_timeout=2.0,
    )


@pytest.fixture
def valid_payload():
    """A complete inbound payload with one event attribute."""
    return {
        "ev": "click",
        "et": "ui",
        "id": "a1",
        "uid": "u1",
        "mid": "m1",
        "t": "Home",
        "p": "http://x",
        "l": "en",
        "sc": "1920x1080",
        "atrk0": "color",
        "atrv0": "red",
        "atrt0": "string",
    }


@pytest.fixture
def decoder():
    """Create AttributeDecoder."""
    from relay.decoder import AttributeDecoder

    return AttributeDecoder()


@pytest.fixture
def queue():
    """Create a bounded DispatchQueue."""
    from relay.dispatch import DispatchQueue

    return DispatchQueue(maxsize=100)


@pytest_asyncio.fixture
async def webhook_client(webhook):
    """Create a started WebhookClient backed by the fake webhook."""
    from relay.delivery import WebhookClient

    client = WebhookClient(url=WEBHOOK_URL, timeout=2.0, transport=webhook.transport)
    await client.start()
    yield client
    await client.close()


@pytest_asyncio.fixture
async def worker(queue, webhook_client):
    """Create DeliveryWorker. Tests decide when to start it."""
    from relay.delivery import DeliveryWorker

    w = DeliveryWorker(queue=queue, webhook_client=webhook_client)
    yield w
    await w.stop(drain_timeout=1.0)


@pytest_asyncio.fixture
async def application(settings, webhook):
    """Create and start an Application wired to the fake webhook."""
    from relay.app import Application

    app = Application(settings=settings, transport=webhook.transport)
    await app.start()
    yield app
    await app.stop()


@pytest_asyncio.fixture
async def client(application):
    """HTTP client talking to the FastAPI app in-process."""
    from relay.api import create_fastapi_app

    fastapi_app = create_fastapi_app(application)
    transport = httpx.ASGITransport(app=fastapi_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://relay.test") as c:
        yield c


@pytest.fixture
def make_item():
    """Factory wrapping a payload the way the ingestion endpoint does."""
    from relay.models import QueuedPayload

    def _make(payload, item_id: str = "item-1") -> QueuedPayload:
        return QueuedPayload(
            id=item_id, payload=payload, received_at=datetime.now(timezone.utc)
        )

    return _make
