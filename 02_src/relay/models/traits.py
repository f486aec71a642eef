"""Trait data model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Trait:
    """A typed value attached to an event or a user."""

    value: str
    type: str  # e.g. "string", "number", "boolean"
