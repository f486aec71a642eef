"""Core data models for the event relay."""

from .events import DecodedEvent, OutboundEvent, QueuedPayload
from .traits import Trait

__all__ = [
    # Traits
    "Trait",
    # Events
    "DecodedEvent",
    "OutboundEvent",
    "QueuedPayload",
]
