"""Relay error types."""


class RelayError(Exception):
    """Base class for relay errors."""


class DecodeError(RelayError):
    """An inbound payload could not be decoded into an event."""

    def __init__(self, field: str, reason: str):
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


class DeliveryError(RelayError):
    """The outbound webhook POST did not succeed."""

    def __init__(self, reason: str, status_code: int | None = None):
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code


class QueueClosedError(RelayError):
    """The dispatch queue no longer accepts payloads."""
