"""Payload Normalizer — turns an arbitrary request `data` value into ordered procedure parameters.

Invariants:
    - None → no parameters
    - list/tuple → one positional parameter per element, order preserved
    - dict → exactly ONE parameter holding the whole mapping as JSON text
    - any other scalar → InvalidPayloadError
    - After sanitizing, every parameter is None, a date/binary value, or a primitive

Design Decisions:
    - classify_payload returns a tagged union so normalize_payload branches on kind,
      not on isinstance chains scattered through the caller
    - Single-JSON-parameter convention for mappings: procedures parse the JSON
      themselves (ADR: generic facade, no per-key expansion)
"""

import json
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any

from procgate.core.errors import InvalidPayloadError

_PASSTHROUGH_TYPES = (date, datetime, time, bytes, bytearray, memoryview)


@dataclass(frozen=True)
class EmptyPayload:
    pass


@dataclass(frozen=True)
class SequencePayload:
    items: tuple[Any, ...]


@dataclass(frozen=True)
class MappingPayload:
    mapping: dict[str, Any]


Payload = EmptyPayload | SequencePayload | MappingPayload


def classify_payload(value: Any) -> Payload:
    """Classify a decoded JSON value into one of the three accepted payload shapes."""
    if value is None:
        return EmptyPayload()
    if isinstance(value, (list, tuple)):
        return SequencePayload(tuple(value))
    if isinstance(value, dict):
        return MappingPayload(value)
    raise InvalidPayloadError(type(value).__name__)


def sanitize_parameter(value: Any) -> Any:
    """Make one parameter bindable: structures become JSON text, everything else passes."""
    if value is None or isinstance(value, _PASSTHROUGH_TYPES):
        return value
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return value


def normalize_payload(value: Any) -> list[Any]:
    """Ordered, sanitized parameter list for a request payload."""
    payload = classify_payload(value)
    if isinstance(payload, EmptyPayload):
        raw: tuple[Any, ...] = ()
    elif isinstance(payload, SequencePayload):
        raw = payload.items
    else:
        raw = (payload.mapping,)
    return [sanitize_parameter(item) for item in raw]
