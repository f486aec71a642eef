"""Outbound webhook client."""

import asyncio
from typing import Protocol

import httpx

from ..errors import DeliveryError
from ..models import OutboundEvent


class IWebhookClient(Protocol):
    """Single-attempt POST of an OutboundEvent to the downstream webhook."""

    async def send(self, event: OutboundEvent) -> int:
        """POST the event. Returns the HTTP status, raises DeliveryError."""
        ...


class WebhookClient:
    """httpx-backed webhook sender with a bounded total request time."""

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._url = url
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def url(self) -> str:
        return self._url

    async def start(self) -> None:
        """Open the underlying HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                headers={"User-Agent": "event-relay/0.1.0"},
            )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def send(self, event: OutboundEvent) -> int:
        """POST the event. Returns the HTTP status, raises DeliveryError."""
        if self._client is None:
            raise DeliveryError("Webhook client not started")

        try:
            body = event.model_dump_json().encode("utf-8")
        except ValueError as e:
            raise DeliveryError(f"Event could not be serialized: {e}") from e

        try:
            response = await asyncio.wait_for(
                self._client.post(
                    self._url,
                    content=body,
                    headers={"Content-Type": "application/json"},
                ),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            raise DeliveryError(f"Webhook timed out after {self._timeout}s") from None
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise DeliveryError(f"Webhook request failed: {e!r}") from e

        if not response.is_success:
            raise DeliveryError(
                f"Webhook returned HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        return response.status_code
