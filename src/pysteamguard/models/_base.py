"""Shared pieces for models parsed from remote payloads.

Remote records omit fields, send empty strings for "unknown" and mix
second and millisecond epochs.  :class:`GuardBaseModel` treats blanks as
absent so field defaults apply, and keeps the untouched payload on
``raw`` for debugging.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

# Epoch values at or above this are milliseconds (year 33658 in seconds).
_MILLIS_CUTOFF = 10**12


def parse_epoch_timestamp(value: Any) -> datetime | None:
    """UTC datetime from epoch seconds or milliseconds; datetimes pass through."""
    if value is None or isinstance(value, datetime):
        return value
    seconds = int(value)
    if seconds >= _MILLIS_CUTOFF:
        seconds //= 1000
    return datetime.fromtimestamp(seconds, tz=UTC)


EpochTimestamp = Annotated[datetime | None, BeforeValidator(parse_epoch_timestamp)]


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class GuardBaseModel(BaseModel):
    """Frozen remote record that ignores unknown keys."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    raw: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _drop_blanks(cls, payload: Any) -> Any:
        if not isinstance(payload, dict):
            return payload
        present = {key: value for key, value in payload.items() if not _is_blank(value)}
        # An explicit raw= wins over the payload snapshot.
        present.setdefault("raw", dict(payload))
        return present
