"""Authorized device models."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DeviceCategory(StrEnum):
    """Which list the device came from: active tokens or revoked/recent ones."""

    ACTIVE = "active"
    RECENT = "recent"


class DeviceKind(StrEnum):
    PC_CLIENT = "pc_client"
    MOBILE_IOS = "mobile_ios"
    MOBILE_ANDROID = "mobile_android"
    WEB = "web"


PLATFORM_LABELS: dict[DeviceKind, str] = {
    DeviceKind.PC_CLIENT: "PC Steam Client",
    DeviceKind.MOBILE_IOS: "Mobile device",
    DeviceKind.MOBILE_ANDROID: "Mobile device",
    DeviceKind.WEB: "Web browser",
}


class Device(BaseModel):
    """Canonical device record.

    Rebuilt from scratch on every listing; ``id`` is the remote token id.

    Parameters
    ----------
    id : str
        Remote token id.
    description : str
        Token description, or the platform label when the remote omits it.
    category : DeviceCategory
        ``active`` for current tokens, ``recent`` for revoked ones.
    kind : DeviceKind
        Inferred platform.
    platform_label : str
        Human label for ``kind``.
    location : str or None
        Last seen location, when known.
    last_active_time : int or None
        Epoch seconds the device was last seen.
    first_seen_time : int or None
        Epoch seconds the device was first seen.
    is_new : bool
        First seen within the new-device window.
    is_current_device : bool
        The token making the request.
    logged_in : bool
        Remote logged-in flag.
    raw : dict
        Original remote record.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    description: str
    category: DeviceCategory
    kind: DeviceKind
    platform_label: str
    location: str | None = None
    last_active_time: int | None = None
    first_seen_time: int | None = None
    is_new: bool = False
    is_current_device: bool = False
    logged_in: bool = False
    raw: dict[str, Any] = Field(default_factory=dict)


class RemoveDevicesResult(BaseModel):
    """Outcome of a sign-out-everywhere request."""

    model_config = ConfigDict(frozen=True)

    success: bool
    status: int | None = None
    devices: list[Device] = Field(default_factory=list)
