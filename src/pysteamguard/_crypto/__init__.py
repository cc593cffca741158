"""Cryptographic primitives for Steam Guard codes and confirmation signatures."""

from __future__ import annotations

from pysteamguard._crypto.codes import generate_auth_code
from pysteamguard._crypto.hashing import hmac_sha1
from pysteamguard._crypto.keys import derive_signing_key
from pysteamguard._crypto.signing import build_signing_buffer, sign_confirmation

__all__ = [
    "build_signing_buffer",
    "derive_signing_key",
    "generate_auth_code",
    "hmac_sha1",
    "sign_confirmation",
]
