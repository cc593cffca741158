"""Account model."""

from __future__ import annotations

import hashlib
import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from pysteamguard.exceptions import GuardConfigError

_UUID_SHAPE = re.compile(r"^([0-9a-f]{8})([0-9a-f]{4})([0-9a-f]{4})([0-9a-f]{4})([0-9a-f]{12})")


def fallback_device_id(steamid: str) -> str:
    """Derive the deterministic ``android:`` device id for an account without one."""
    digest = hashlib.sha1(str(steamid).encode("utf-8")).hexdigest()
    return "android:" + _UUID_SHAPE.sub(r"\1-\2-\3-\4-\5", digest)[:36]


class Account(BaseModel):
    """Long-lived authenticator data for one account.

    Parameters
    ----------
    steamid : str
        64-bit account id as a string.
    account_name : str
        Login name.
    shared_secret : str
        TOTP seed (hex or base64).
    identity_secret : str
        Confirmation signing seed (hex or base64).
    device_id : str
        Authenticator device id sent with confirmation calls.
    id : str
        Local registry key.  Defaults to ``steamid``.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    steamid: str
    account_name: str = ""
    shared_secret: str = ""
    identity_secret: str = ""
    device_id: str = ""
    id: str = ""

    @model_validator(mode="before")
    @classmethod
    def _defaults(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        merged = dict(values)
        steamid = str(merged.get("steamid") or "").strip()
        merged["steamid"] = steamid
        if not merged.get("id"):
            merged["id"] = steamid
        if not merged.get("device_id") and steamid:
            merged["device_id"] = fallback_device_id(steamid)
        return merged

    @classmethod
    def from_mafile(cls, data: Mapping[str, Any]) -> Account:
        """Build an account from an already-decoded maFile mapping."""
        session = data.get("Session")
        steamid = data.get("steamid") or data.get("SteamID")
        if not steamid and isinstance(session, Mapping):
            steamid = session.get("SteamID")
        if not steamid:
            raise GuardConfigError("maFile is missing SteamID")

        device_id = data.get("device_id") or data.get("deviceID") or data.get("deviceId") or ""
        return cls(
            steamid=str(steamid),
            account_name=str(data.get("account_name") or ""),
            shared_secret=str(data.get("shared_secret") or ""),
            identity_secret=str(data.get("identity_secret") or ""),
            device_id=str(device_id),
        )
