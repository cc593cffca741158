"""Account security status model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class SecurityStatus(BaseModel):
    """Security summary read from the device management page."""

    model_config = ConfigDict(frozen=True)

    account_name: str | None = None
    email: str | None = None
    phone_hint: str | None = None
    two_factor_enabled: bool = False
    two_factor_raw: dict[str, Any] | None = None
