"""Keyed hash primitives shared by code generation and request signing."""

from __future__ import annotations

from cryptography.hazmat.primitives import hashes, hmac


def hmac_sha1(key: bytes, data: bytes) -> bytes:
    """Compute a raw 20-byte HMAC-SHA1 digest of *data* under *key*."""
    mac = hmac.HMAC(key, hashes.SHA1())
    mac.update(data)
    return mac.finalize()
