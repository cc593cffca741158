"""Confirmation request signing."""

from __future__ import annotations

import base64
import struct

from pysteamguard._crypto.hashing import hmac_sha1
from pysteamguard._crypto.keys import derive_signing_key


def build_signing_buffer(time: int, tag: str) -> bytes:
    """Return the signed message: 4 zero bytes, 4-byte big-endian time, tag."""
    return struct.pack(">II", 0, int(time) & 0xFFFFFFFF) + (tag or "").encode("utf-8")


def sign_confirmation(identity_secret: str, time: int, tag: str) -> str:
    """Compute the base64 confirmation signature for *tag* at *time*.

    The remote service only accepts a signature for the exact tag of the
    operation it is attached to.
    """
    digest = hmac_sha1(derive_signing_key(identity_secret), build_signing_buffer(time, tag))
    return base64.b64encode(digest).decode("ascii")
