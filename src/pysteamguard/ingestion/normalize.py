"""Normalization helpers.

Centralizes defensive parsing of inconsistently shaped remote records.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def to_unix_seconds(value: Any) -> int | None:
    """Epoch seconds from a numeric or numeric-string value.

    Zero and negative values count as missing so the next accessor in a
    chain gets a chance.
    """
    parsed = safe_int(value)
    if parsed is None or parsed <= 0:
        return None
    return parsed


@dataclass(frozen=True, slots=True)
class FieldAccessor:
    """A named way of reading one value out of a raw record."""

    name: str
    read: Callable[[Mapping[str, Any]], Any]

    def __call__(self, record: Mapping[str, Any]) -> Any:
        return self.read(record)


def nested_field(parent: str, child: str) -> FieldAccessor:
    def _read(record: Mapping[str, Any]) -> Any:
        container = record.get(parent)
        if isinstance(container, Mapping):
            return container.get(child)
        return None

    return FieldAccessor(f"{parent}.{child}", _read)


def flat_field(key: str) -> FieldAccessor:
    return FieldAccessor(key, lambda record: record.get(key))


def first_timestamp(accessors: Iterable[FieldAccessor], record: Mapping[str, Any]) -> int | None:
    """Return the first accessor result that parses as epoch seconds."""
    for accessor in accessors:
        value = to_unix_seconds(accessor(record))
        if value is not None:
            return value
    return None


# Order matters: records carry either the nested object, the flat field or both.
LAST_SEEN_ACCESSORS: tuple[FieldAccessor, ...] = (
    nested_field("last_seen", "time"),
    flat_field("time_updated"),
)
FIRST_SEEN_ACCESSORS: tuple[FieldAccessor, ...] = (
    nested_field("first_seen", "time"),
    flat_field("time_updated"),
)
