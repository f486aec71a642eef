"""Attribute decoder: flat analytics payload -> DecodedEvent.

Inbound payloads carry nine fixed scalar keys plus any number of
index-correlated trait triples::

    atrk<idx>  -> trait name     uatrk<idx> -> user trait name
    atrv<idx>  -> trait value    uatrv<idx> -> user trait value
    atrt<idx>  -> trait type     uatrt<idx> -> user trait type

Decoding runs in two passes. ``group_indexed_keys`` collects every indexed
key into a group per (scope, index token); the decoder then checks each
group that names a trait for its value and type companions before emitting
a ``Trait``.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from ..errors import DecodeError
from ..models import DecodedEvent, Trait

PAYLOAD_FIELD = "<payload>"

# (inbound key, DecodedEvent attribute)
REQUIRED_FIELDS: tuple[tuple[str, str], ...] = (
    ("ev", "event_name"),
    ("et", "event_type"),
    ("id", "app_id"),
    ("uid", "user_id"),
    ("mid", "message_id"),
    ("t", "page_title"),
    ("p", "page_url"),
    ("l", "browser_language"),
    ("sc", "screen_size"),
)


class TraitScope(str, Enum):
    """Which trait map an indexed key belongs to."""

    ATTRIBUTES = "attributes"
    USER_TRAITS = "user_traits"


class TraitRole(str, Enum):
    """Which part of a trait triple an indexed key carries."""

    KEY = "k"
    VALUE = "v"
    TYPE = "t"


_SCOPE_PREFIXES = {
    TraitScope.USER_TRAITS: "uatr",
    TraitScope.ATTRIBUTES: "atr",
}

# Longest prefixes first so "uatrk0" never matches as an "atr" key.
_INDEXED_PREFIXES: tuple[tuple[str, TraitScope, TraitRole], ...] = tuple(
    (stem + role.value, scope, role)
    for scope, stem in _SCOPE_PREFIXES.items()
    for role in TraitRole
)


@dataclass
class TraitKeyGroup:
    """All indexed keys sharing one (scope, index token)."""

    scope: TraitScope
    index: str
    keys: dict[TraitRole, str] = field(default_factory=dict)  # role -> source key
    position: int = -1  # payload position of the name key, -1 if absent

    def key_for(self, role: TraitRole) -> str:
        """Source key expected for a role, whether or not it was seen."""
        return self.keys.get(role) or f"{_SCOPE_PREFIXES[self.scope]}{role.value}{self.index}"


@dataclass
class DecodeResult:
    """Outcome of decoding one payload: an event or the cause of failure."""

    event: DecodedEvent | None = None
    error: DecodeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, event: DecodedEvent) -> "DecodeResult":
        return cls(event=event)

    @classmethod
    def failure(cls, error: DecodeError) -> "DecodeResult":
        return cls(error=error)


def match_indexed_key(key: str) -> tuple[TraitScope, TraitRole, str] | None:
    """Split an indexed key into (scope, role, index token), or None."""
    for prefix, scope, role in _INDEXED_PREFIXES:
        if key.startswith(prefix):
            return scope, role, key[len(prefix):]
    return None


def group_indexed_keys(
    payload: dict[str, Any],
) -> dict[tuple[TraitScope, str], TraitKeyGroup]:
    """Group indexed keys by (scope, index token). Other keys are ignored."""
    groups: dict[tuple[TraitScope, str], TraitKeyGroup] = {}
    for position, key in enumerate(payload):
        match = match_indexed_key(key)
        if match is None:
            continue
        scope, role, index = match
        group = groups.setdefault((scope, index), TraitKeyGroup(scope=scope, index=index))
        group.keys[role] = key
        if role is TraitRole.KEY:
            group.position = position
    return groups


def _require_string(payload: dict[str, Any], key: str) -> str:
    if key not in payload:
        raise DecodeError(key, "missing")
    value = payload[key]
    if not isinstance(value, str):
        raise DecodeError(key, "not a string")
    # Lone surrogates from "\ud800"-style escapes cannot be re-encoded outbound
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise DecodeError(key, "not valid unicode") from None
    return value


class IAttributeDecoder(Protocol):
    """Turns raw inbound payloads into DecodedEvents."""

    def decode(self, raw: bytes | str) -> DecodeResult:
        """Parse JSON text and decode it."""
        ...

    def decode_mapping(self, payload: Any) -> DecodeResult:
        """Decode an already parsed JSON value."""
        ...


class AttributeDecoder:
    """Decodes the index-suffixed analytics key encoding."""

    def decode(self, raw: bytes | str) -> DecodeResult:
        """Parse JSON text and decode it."""
        try:
            payload = json.loads(raw)
        except (ValueError, TypeError):
            return DecodeResult.failure(DecodeError(PAYLOAD_FIELD, "invalid JSON"))
        return self.decode_mapping(payload)

    def decode_mapping(self, payload: Any) -> DecodeResult:
        """Decode an already parsed JSON value."""
        try:
            return DecodeResult.success(self._decode(payload))
        except DecodeError as e:
            return DecodeResult.failure(e)

    def _decode(self, payload: Any) -> DecodedEvent:
        if not isinstance(payload, dict):
            raise DecodeError(PAYLOAD_FIELD, "not a JSON object")

        scalars = {attr: _require_string(payload, key) for key, attr in REQUIRED_FIELDS}

        traits: dict[TraitScope, dict[str, Trait]] = {scope: {} for scope in TraitScope}
        named = [g for g in group_indexed_keys(payload).values() if TraitRole.KEY in g.keys]
        # Later name keys overwrite earlier ones on a trait name collision
        for group in sorted(named, key=lambda g: g.position):
            name = _require_string(payload, group.key_for(TraitRole.KEY))
            traits[group.scope][name] = Trait(
                value=_require_string(payload, group.key_for(TraitRole.VALUE)),
                type=_require_string(payload, group.key_for(TraitRole.TYPE)),
            )

        return DecodedEvent(
            **scalars,
            attributes=traits[TraitScope.ATTRIBUTES],
            user_traits=traits[TraitScope.USER_TRAITS],
        )
