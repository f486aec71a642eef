"""Event relay: decodes analytics payloads and relays them to a webhook."""

from .app import Application, IApplication
from .config import RelaySettings
from .decoder import AttributeDecoder, DecodeResult
from .delivery import DeliveryWorker, ItemOutcome, WebhookClient, WorkerStats
from .dispatch import DispatchQueue
from .errors import DecodeError, DeliveryError, QueueClosedError, RelayError
from .models import DecodedEvent, OutboundEvent, QueuedPayload, Trait

__all__ = [
    # Application
    "Application",
    "IApplication",
    "RelaySettings",
    # Models
    "Trait",
    "DecodedEvent",
    "OutboundEvent",
    "QueuedPayload",
    # Components
    "AttributeDecoder",
    "DecodeResult",
    "DispatchQueue",
    "DeliveryWorker",
    "ItemOutcome",
    "WebhookClient",
    "WorkerStats",
    # Errors
    "RelayError",
    "DecodeError",
    "DeliveryError",
    "QueueClosedError",
]
