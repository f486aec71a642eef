"""Tests for Application."""

import asyncio

import pytest

from relay.app import Application
from relay.config import RelaySettings
from relay.errors import QueueClosedError


class TestApplicationStart:
    """Tests for Application.start()."""

    @pytest.mark.asyncio
    async def test_start_initializes_components(self, settings, webhook):
        """Test that start wires queue, client and worker together."""
        app = Application(settings=settings, transport=webhook.transport)
        await app.start()
        try:
            assert app._webhook_client is not None
            assert app._queue is not None
            assert app._worker is not None
            assert app.worker._queue is app.queue
            assert app.worker._client is app._webhook_client
            assert app.worker.running
        finally:
            await app.stop()

    @pytest.mark.asyncio
    async def test_start_uses_settings(self, webhook):
        """Test that queue bound and webhook URL come from settings."""
        settings = RelaySettings(webhook_url="https://other.test/hook", queue_maxsize=7)
        app = Application(settings=settings, transport=webhook.transport)
        await app.start()
        try:
            assert app.queue.maxsize == 7
            assert app._webhook_client.url == "https://other.test/hook"
        finally:
            await app.stop()

    def test_settings_from_env_by_default(self, monkeypatch):
        """Test that settings fall back to the environment."""
        monkeypatch.setenv("RELAY_WEBHOOK_URL", "https://env.test/hook")

        app = Application()

        assert app.settings.webhook_url == "https://env.test/hook"


class TestApplicationStop:
    """Tests for Application.stop()."""

    @pytest.mark.asyncio
    async def test_stop_drains_and_closes(self, settings, webhook, valid_payload, make_item):
        """Test that stop delivers queued events, then refuses new ones."""
        app = Application(settings=settings, transport=webhook.transport)
        await app.start()
        await app.queue.put(make_item(valid_payload))

        await app.stop()

        assert len(webhook.requests) == 1
        assert not app.worker.running
        assert app._webhook_client._client is None
        with pytest.raises(QueueClosedError):
            await app.queue.put(make_item(valid_payload))

    @pytest.mark.asyncio
    async def test_stop_respects_drain_timeout(self, webhook, valid_payload, make_item):
        """Test that a hung webhook cannot block shutdown."""
        webhook.delay = 5.0
        settings = RelaySettings(webhook_url="https://hooks.test/relay", drain_timeout=0.1)
        app = Application(settings=settings, transport=webhook.transport)
        await app.start()
        await app.queue.put(make_item(valid_payload))
        await asyncio.sleep(0.02)

        await asyncio.wait_for(app.stop(), timeout=2.0)

        assert app.worker.stats.abandoned == 1

    @pytest.mark.asyncio
    async def test_stop_before_start(self, settings):
        """Test that stopping an unstarted application is a no-op."""
        app = Application(settings=settings)

        await app.stop()


class TestApplicationProperties:
    """Tests for Application properties."""

    def test_queue_property_raises_when_not_started(self, settings):
        """Test that queue property raises when not started."""
        app = Application(settings=settings)

        with pytest.raises(RuntimeError, match="not started"):
            _ = app.queue

    def test_worker_property_raises_when_not_started(self, settings):
        """Test that worker property raises when not started."""
        app = Application(settings=settings)

        with pytest.raises(RuntimeError, match="not started"):
            _ = app.worker

    def test_settings_property(self, settings):
        """Test settings property."""
        app = Application(settings=settings)

        assert app.settings is settings
