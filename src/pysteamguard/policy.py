"""Deterministic device activity policy.

Filtering and ordering applied on top of normalized devices.  No payload
parsing happens here.
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from enum import StrEnum

from pysteamguard._constants import ACTIVE_WINDOW_SECONDS
from pysteamguard.models.device import Device


class DeviceFilter(StrEnum):
    ALL = "all"
    ACTIVE = "active"
    RECENT = "recent"


def is_active_now(device: Device, now: int, *, window_seconds: int = ACTIVE_WINDOW_SECONDS) -> bool:
    """Logged in, or last seen within *window_seconds* of *now*."""
    if device.logged_in:
        return True
    if device.last_active_time is None:
        return False
    return now - device.last_active_time <= window_seconds


def is_recently_seen(device: Device, now: int, *, window_seconds: int = ACTIVE_WINDOW_SECONDS) -> bool:
    """Not active, but with some last-seen timestamp."""
    return not is_active_now(device, now, window_seconds=window_seconds) and device.last_active_time is not None


def filter_devices(
    devices: Iterable[Device],
    device_filter: DeviceFilter | str = DeviceFilter.ALL,
    *,
    now: int | None = None,
    window_seconds: int = ACTIVE_WINDOW_SECONDS,
) -> list[Device]:
    if now is None:
        now = int(time.time())
    selected = DeviceFilter(device_filter)
    if selected == DeviceFilter.ACTIVE:
        return [d for d in devices if is_active_now(d, now, window_seconds=window_seconds)]
    if selected == DeviceFilter.RECENT:
        return [d for d in devices if is_recently_seen(d, now, window_seconds=window_seconds)]
    return list(devices)


def sort_devices(
    devices: Iterable[Device],
    *,
    now: int | None = None,
    window_seconds: int = ACTIVE_WINDOW_SECONDS,
) -> list[Device]:
    """Active devices first, then by last seen descending; undated devices last.

    The sort is stable, so undated inactive devices keep their input order.
    """
    if now is None:
        now = int(time.time())

    def _key(device: Device) -> tuple[int, int, int]:
        active = is_active_now(device, now, window_seconds=window_seconds)
        undated = device.last_active_time is None
        return (0 if active else 1, 1 if undated else 0, -(device.last_active_time or 0))

    return sorted(devices, key=_key)
