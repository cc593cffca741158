"""Device record normalization.

Raw token records from the device page are inconsistently shaped; this
module maps them onto :class:`~pysteamguard.models.device.Device`.
"""

from __future__ import annotations

import re
import time
from collections.abc import Mapping
from typing import Any

from pysteamguard._constants import NEW_DEVICE_DAYS
from pysteamguard.ingestion.normalize import (
    FIRST_SEEN_ACCESSORS,
    LAST_SEEN_ACCESSORS,
    first_timestamp,
    safe_int,
)
from pysteamguard.models.device import PLATFORM_LABELS, Device, DeviceCategory, DeviceKind

_IOS_PATTERN = re.compile(r"iphone|ios", re.IGNORECASE)

PLATFORM_TYPE_PC_CLIENT = 1
PLATFORM_TYPE_MOBILE = 3


def infer_kind(record: Mapping[str, Any]) -> DeviceKind:
    platform_type = safe_int(record.get("platform_type"))
    if platform_type == PLATFORM_TYPE_PC_CLIENT:
        return DeviceKind.PC_CLIENT
    if platform_type == PLATFORM_TYPE_MOBILE:
        description = str(record.get("token_description") or "")
        if _IOS_PATTERN.search(description):
            return DeviceKind.MOBILE_IOS
        return DeviceKind.MOBILE_ANDROID
    return DeviceKind.WEB


def build_location(record: Mapping[str, Any]) -> str | None:
    last_seen = record.get("last_seen")
    if not isinstance(last_seen, Mapping):
        return None
    city = last_seen.get("city") or None
    country = last_seen.get("country") or None
    if city and country:
        return f"{city}, {country}"
    return country or city


def _strip_quotes(value: Any) -> str:
    return str(value).replace('"', "")


def is_current_token(token_id: Any, current_token_id: str | None) -> bool:
    if not current_token_id or token_id is None:
        return False
    return _strip_quotes(current_token_id) == _strip_quotes(token_id)


def normalize_device(
    record: Mapping[str, Any],
    category: DeviceCategory,
    current_token_id: str | None,
    *,
    now: int | None = None,
    new_device_days: int = NEW_DEVICE_DAYS,
) -> Device:
    """Build a canonical device from one raw token record.

    Parameters
    ----------
    record : Mapping
        Raw token record.
    category : DeviceCategory
        List the record came from.
    current_token_id : str or None
        Token id of the requesting session, for ``is_current_device``.
    now : int or None
        Epoch seconds used for ``is_new``.  Defaults to the local clock.
    new_device_days : int
        Window for ``is_new``.
    """
    if now is None:
        now = int(time.time())

    kind = infer_kind(record)
    last_active = first_timestamp(LAST_SEEN_ACCESSORS, record)
    first_seen = first_timestamp(FIRST_SEEN_ACCESSORS, record)
    is_new = first_seen is not None and now - first_seen < new_device_days * 24 * 60 * 60

    return Device(
        id=str(record.get("token_id")),
        description=str(record.get("token_description") or PLATFORM_LABELS[kind]),
        category=category,
        kind=kind,
        platform_label=PLATFORM_LABELS[kind],
        location=build_location(record),
        last_active_time=last_active,
        first_seen_time=first_seen,
        is_new=is_new,
        is_current_device=is_current_token(record.get("token_id"), current_token_id),
        logged_in=bool(record.get("logged_in") or record.get("loggedIn")),
        raw=dict(record),
    )
