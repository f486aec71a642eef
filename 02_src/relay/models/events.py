"""Event data models: decoded (internal) and outbound (receiver contract)."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from .traits import Trait


@dataclass
class QueuedPayload:
    """A raw inbound payload waiting on the dispatch queue."""

    id: str
    payload: Any  # parsed JSON, shape not yet checked
    received_at: datetime


@dataclass
class DecodedEvent:
    """An inbound event after attribute extraction."""

    event_name: str
    event_type: str
    app_id: str
    user_id: str
    message_id: str
    page_title: str
    page_url: str
    browser_language: str
    screen_size: str
    attributes: dict[str, Trait] = field(default_factory=dict)
    user_traits: dict[str, Trait] = field(default_factory=dict)


class OutboundEvent(BaseModel):
    """Event body in the shape the downstream webhook expects."""

    event: str
    event_type: str
    app_id: str
    user_id: str
    message_id: str
    page_title: str
    page_url: str
    browser_language: str
    screen_size: str
    attributes: dict[str, Trait] = Field(default_factory=dict)
    traits: dict[str, Trait] = Field(default_factory=dict)

    @classmethod
    def from_decoded(cls, decoded: DecodedEvent) -> "OutboundEvent":
        """Rename a DecodedEvent's fields into the outbound contract."""
        return cls(
            event=decoded.event_name,
            event_type=decoded.event_type,
            app_id=decoded.app_id,
            user_id=decoded.user_id,
            message_id=decoded.message_id,
            page_title=decoded.page_title,
            page_url=decoded.page_url,
            browser_language=decoded.browser_language,
            screen_size=decoded.screen_size,
            attributes=dict(decoded.attributes),
            traits=dict(decoded.user_traits),
        )
