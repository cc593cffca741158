"""Custom exception hierarchy for pysteamguard."""

from __future__ import annotations

from enum import StrEnum
from typing import ClassVar


class ErrorKind(StrEnum):
    """Stable error identifiers surfaced to callers."""

    LOGIN_REQUIRED = "LOGIN_REQUIRED"
    SIGNATURE_REJECTED = "SIGNATURE_REJECTED"
    PROTOCOL_ERROR = "PROTOCOL_ERROR"
    HTTP_ERROR = "HTTP_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    DATA_PARSE_ERROR = "DATA_PARSE_ERROR"
    DEVICE_REVOKE_UNSUPPORTED = "DEVICE_REVOKE_UNSUPPORTED"
    MISSING_SECRET = "MISSING_SECRET"
    LOGIN_RESPONSE_MALFORMED = "LOGIN_RESPONSE_MALFORMED"
    NO_SELECTION = "NO_SELECTION"
    CONFIG_ERROR = "CONFIG_ERROR"
    CRYPTO_ERROR = "CRYPTO_ERROR"
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"


class GuardError(Exception):
    """Base exception for all pysteamguard errors."""

    kind: ClassVar[ErrorKind] = ErrorKind.PROTOCOL_ERROR


class GuardConfigError(GuardError):
    """Invalid or missing configuration or account data."""

    kind = ErrorKind.CONFIG_ERROR


class AccountNotFoundError(GuardConfigError):
    """No account is registered under the requested id."""


class GuardCryptoError(GuardError):
    """A secret could not be decoded into key material."""

    kind = ErrorKind.CRYPTO_ERROR


class MissingSecretError(GuardConfigError):
    """The account lacks the secret required for the operation."""

    kind = ErrorKind.MISSING_SECRET


class NoSelectionError(GuardError, ValueError):
    """A confirmation action was requested with nothing selected."""

    kind = ErrorKind.NO_SELECTION


class GuardTransportError(GuardError):
    """HTTP-level failure (network, unexpected status)."""

    kind = ErrorKind.HTTP_ERROR

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class GuardHttpError(GuardTransportError):
    """The remote service answered with a non-success status."""


class GuardNetworkError(GuardTransportError):
    """The request never produced a response."""

    kind = ErrorKind.NETWORK_ERROR


class GuardTimeoutError(GuardNetworkError):
    """The caller-supplied timeout elapsed before the call finished."""


class GuardApiError(GuardError):
    """The remote service reached us but reported an application failure."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        endpoint: str = "",
    ) -> None:
        self.code = code
        self.endpoint = endpoint
        super().__init__(message)


class ProtocolError(GuardApiError):
    """Remote failure body carrying a message we do not classify further."""


class LoginRequiredError(GuardApiError):
    """The session is missing, invalid or expired.

    Surfaced so the caller can prompt for re-authentication.  Never retried
    internally.
    """

    kind = ErrorKind.LOGIN_REQUIRED


class SignatureRejectedError(GuardApiError):
    """The remote service rejected the confirmation signature.

    Usually a clock or identity-secret mismatch.  A retry needs a fresh
    time sync and a fresh listing.
    """

    kind = ErrorKind.SIGNATURE_REJECTED


class DataParseError(GuardApiError):
    """A remote payload could not be decoded."""

    kind = ErrorKind.DATA_PARSE_ERROR


class DeviceRevokeUnsupportedError(GuardApiError):
    """Per-device revocation does not exist in the remote protocol.

    This is a permanent capability gap.  Callers should not retry and
    should offer sign-out-everywhere instead.
    """

    kind = ErrorKind.DEVICE_REVOKE_UNSUPPORTED


class GuardAuthenticationError(GuardApiError):
    """The login flow refused the supplied credentials."""

    kind = ErrorKind.AUTHENTICATION_FAILED


class LoginResponseMalformedError(GuardAuthenticationError):
    """Login reported success but the session cookie was not issued."""

    kind = ErrorKind.LOGIN_RESPONSE_MALFORMED
