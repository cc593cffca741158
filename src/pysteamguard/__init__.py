"""pysteamguard - Async Python client for Steam Guard codes, confirmations and devices."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pysteamguard")
except PackageNotFoundError:
    __version__ = "0+local"
from pysteamguard._api.login import LoginFlow, LoginFlowResult
from pysteamguard.client import SteamGuardClient
from pysteamguard.config import GuardConfig
from pysteamguard.exceptions import (
    AccountNotFoundError,
    DataParseError,
    DeviceRevokeUnsupportedError,
    ErrorKind,
    GuardApiError,
    GuardAuthenticationError,
    GuardConfigError,
    GuardCryptoError,
    GuardError,
    GuardHttpError,
    GuardNetworkError,
    GuardTimeoutError,
    GuardTransportError,
    LoginRequiredError,
    LoginResponseMalformedError,
    MissingSecretError,
    NoSelectionError,
    ProtocolError,
    SignatureRejectedError,
)
from pysteamguard.models import (
    Account,
    AuthCode,
    Confirmation,
    ConfirmationAck,
    ConfirmationOp,
    ConfirmationSelection,
    Device,
    DeviceCategory,
    DeviceKind,
    RemoveDevicesResult,
    SecurityStatus,
)
from pysteamguard.policy import DeviceFilter, filter_devices, sort_devices
from pysteamguard.session import (
    JsonFileSessionStore,
    MemorySessionStore,
    Session,
    SessionState,
    SessionStore,
)
from pysteamguard.time_sync import TimeSync

__all__ = [
    "__version__",
    "Account",
    "AccountNotFoundError",
    "AuthCode",
    "Confirmation",
    "ConfirmationAck",
    "ConfirmationOp",
    "ConfirmationSelection",
    "DataParseError",
    "Device",
    "DeviceCategory",
    "DeviceFilter",
    "DeviceKind",
    "DeviceRevokeUnsupportedError",
    "ErrorKind",
    "GuardApiError",
    "GuardAuthenticationError",
    "GuardConfig",
    "GuardConfigError",
    "GuardCryptoError",
    "GuardError",
    "GuardHttpError",
    "GuardNetworkError",
    "GuardTimeoutError",
    "GuardTransportError",
    "JsonFileSessionStore",
    "LoginFlow",
    "LoginFlowResult",
    "LoginRequiredError",
    "LoginResponseMalformedError",
    "MemorySessionStore",
    "MissingSecretError",
    "NoSelectionError",
    "ProtocolError",
    "RemoveDevicesResult",
    "SecurityStatus",
    "Session",
    "SessionState",
    "SessionStore",
    "SignatureRejectedError",
    "SteamGuardClient",
    "TimeSync",
    "filter_devices",
    "sort_devices",
]
