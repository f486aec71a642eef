"""Decoder module."""

from .decoder import (
    AttributeDecoder,
    DecodeResult,
    IAttributeDecoder,
    TraitKeyGroup,
    TraitRole,
    TraitScope,
    group_indexed_keys,
    match_indexed_key,
)

__all__ = [
    "AttributeDecoder",
    "DecodeResult",
    "IAttributeDecoder",
    "TraitKeyGroup",
    "TraitRole",
    "TraitScope",
    "group_indexed_keys",
    "match_indexed_key",
]
