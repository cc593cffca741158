"""Data models for Steam Guard payloads."""

from pysteamguard.models._base import EpochTimestamp, GuardBaseModel, parse_epoch_timestamp
from pysteamguard.models.account import Account, fallback_device_id
from pysteamguard.models.auth_code import AuthCode
from pysteamguard.models.confirmation import (
    Confirmation,
    ConfirmationAck,
    ConfirmationOp,
    ConfirmationSelection,
)
from pysteamguard.models.device import (
    PLATFORM_LABELS,
    Device,
    DeviceCategory,
    DeviceKind,
    RemoveDevicesResult,
)
from pysteamguard.models.requests import SignedRequest
from pysteamguard.models.security import SecurityStatus

__all__ = [
    "PLATFORM_LABELS",
    "Account",
    "AuthCode",
    "Confirmation",
    "ConfirmationAck",
    "ConfirmationOp",
    "ConfirmationSelection",
    "Device",
    "DeviceCategory",
    "DeviceKind",
    "EpochTimestamp",
    "GuardBaseModel",
    "RemoveDevicesResult",
    "SecurityStatus",
    "SignedRequest",
    "fallback_device_id",
    "parse_epoch_timestamp",
]
