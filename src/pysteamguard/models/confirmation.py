"""Pending confirmation and confirmation action models."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pysteamguard.models._base import EpochTimestamp, GuardBaseModel


class ConfirmationOp(StrEnum):
    """Actions the confirmation endpoint accepts.  The value doubles as the signing tag."""

    ALLOW = "allow"
    CANCEL = "cancel"


class Confirmation(GuardBaseModel):
    """A pending confirmation as returned by the listing call.

    ``nonce`` is the per-item action key.  It is only valid for the
    next action call and must not be reused across calls.
    """

    id: str
    nonce: str
    type: int | None = None
    type_name: str | None = None
    headline: str | None = None
    summary: list[str] = Field(default_factory=list)
    creation_time: EpochTimestamp = None
    creator_id: str | None = None
    icon: str | None = None

    @field_validator("id", "nonce", "creator_id", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("summary", mode="before")
    @classmethod
    def _wrap_summary(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    @property
    def key(self) -> str:
        return self.nonce


class ConfirmationSelection(BaseModel):
    """An ``id``/``key`` pair submitted to the action call."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    key: str = Field(min_length=1)

    @field_validator("id", "key", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @classmethod
    def of(cls, item: Confirmation | ConfirmationSelection | dict[str, Any]) -> ConfirmationSelection:
        """Build a selection; a mapping may carry its key as ``key`` or ``nonce``.

        Raises pydantic's ``ValidationError`` when the id or key is missing.
        """
        if isinstance(item, ConfirmationSelection):
            return item
        if isinstance(item, Confirmation):
            return cls(id=item.id, key=item.nonce)
        return cls.model_validate({"id": item.get("id"), "key": item.get("key") or item.get("nonce")})


class ConfirmationAck(GuardBaseModel):
    """Acknowledgement of a successful action call."""

    success: bool = True
    op: ConfirmationOp | None = None
    count: int = 0
