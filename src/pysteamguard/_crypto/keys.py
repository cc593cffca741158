"""Secret decoding.

Account secrets are distributed either as 40-character hex strings or as
base64.  The encoding is detected from the value itself.
"""

from __future__ import annotations

import base64
import binascii
import re

from pysteamguard.exceptions import GuardCryptoError

_HEX_SECRET = re.compile(r"^[0-9a-fA-F]{40}$")


def derive_signing_key(secret: str) -> bytes:
    """Decode *secret* into raw HMAC key bytes.

    A 40-character hexadecimal string is hex-decoded; any other string is
    base64-decoded.

    Raises
    ------
    GuardCryptoError
        If the value is empty or is neither valid hex nor valid base64.
    """
    text = (secret or "").strip()
    if not text:
        raise GuardCryptoError("secret is empty")
    if _HEX_SECRET.match(text):
        return bytes.fromhex(text)

    padded = text + "=" * (-len(text) % 4)
    try:
        key = base64.b64decode(padded)
    except (binascii.Error, ValueError) as exc:
        raise GuardCryptoError("secret is neither 40-char hex nor base64") from exc
    if not key:
        raise GuardCryptoError("secret decoded to an empty key")
    return key
