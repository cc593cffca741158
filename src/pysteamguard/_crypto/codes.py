"""One-time authenticator codes.

Standard 30-second HMAC-SHA1 TOTP with dynamic truncation, rendered in
the provider's 26-symbol alphabet instead of decimal digits.
"""

from __future__ import annotations

import struct

from pysteamguard._constants import CODE_ALPHABET, CODE_LENGTH, CODE_PERIOD_SECONDS
from pysteamguard._crypto.hashing import hmac_sha1
from pysteamguard._crypto.keys import derive_signing_key
from pysteamguard.models.auth_code import AuthCode


def code_for_counter(key: bytes, counter: int) -> str:
    digest = hmac_sha1(key, struct.pack(">Q", counter))
    offset = digest[19] & 0x0F
    full = struct.unpack(">I", digest[offset : offset + 4])[0] & 0x7FFFFFFF

    chars: list[str] = []
    for _ in range(CODE_LENGTH):
        chars.append(CODE_ALPHABET[full % len(CODE_ALPHABET)])
        full //= len(CODE_ALPHABET)
    return "".join(chars)


def generate_auth_code(shared_secret: str, epoch_millis: int) -> AuthCode:
    """Generate the code valid at *epoch_millis*.

    Parameters
    ----------
    shared_secret : str
        The account's TOTP seed (hex or base64).
    epoch_millis : int
        Remote-aligned time in milliseconds since epoch.

    Returns
    -------
    AuthCode
        The code plus the seconds left before it rotates.
    """
    seconds = int(epoch_millis // 1000)
    counter = seconds // CODE_PERIOD_SECONDS
    code = code_for_counter(derive_signing_key(shared_secret), counter)
    return AuthCode(
        code=code,
        seconds_remaining=CODE_PERIOD_SECONDS - (seconds % CODE_PERIOD_SECONDS),
        time=seconds,
    )
