from __future__ import annotations

import base64
import hashlib
import hmac
import struct

import pytest

from pysteamguard._constants import CODE_ALPHABET
from pysteamguard._crypto import (
    build_signing_buffer,
    derive_signing_key,
    generate_auth_code,
    hmac_sha1,
    sign_confirmation,
)
from pysteamguard.exceptions import GuardCryptoError

_KEY = bytes(range(20))
_HEX_SECRET = _KEY.hex()
_B64_SECRET = base64.b64encode(_KEY).decode("ascii")


def _reference_code(key: bytes, seconds: int) -> str:
    digest = hmac.new(key, struct.pack(">Q", seconds // 30), hashlib.sha1).digest()
    start = digest[19] & 0x0F
    value = int.from_bytes(digest[start : start + 4], "big") & 0x7FFFFFFF
    out = ""
    for _ in range(5):
        out += CODE_ALPHABET[value % 26]
        value //= 26
    return out


def test_hex_and_base64_secrets_decode_to_the_same_key() -> None:
    assert len(_HEX_SECRET) == 40
    assert derive_signing_key(_HEX_SECRET) == _KEY
    assert derive_signing_key(_B64_SECRET) == _KEY


def test_base64_secret_without_padding_is_accepted() -> None:
    secret = base64.b64encode(b"abcd").decode("ascii").rstrip("=")
    assert derive_signing_key(secret) == b"abcd"


@pytest.mark.parametrize("secret", ["", "   ", "!!!"])
def test_undecodable_secret_raises(secret: str) -> None:
    with pytest.raises(GuardCryptoError):
        derive_signing_key(secret)


def test_hmac_sha1_matches_stdlib() -> None:
    assert hmac_sha1(b"key", b"data") == hmac.new(b"key", b"data", hashlib.sha1).digest()


def test_signing_buffer_layout() -> None:
    assert build_signing_buffer(0x01020304, "conf") == b"\x00\x00\x00\x00\x01\x02\x03\x04conf"


def test_signature_is_base64_hmac_of_buffer() -> None:
    expected = base64.b64encode(
        hmac.new(_KEY, b"\x00\x00\x00\x00" + struct.pack(">I", 1_700_000_000) + b"allow", hashlib.sha1).digest()
    ).decode("ascii")

    assert sign_confirmation(_B64_SECRET, 1_700_000_000, "allow") == expected
    assert sign_confirmation(_HEX_SECRET, 1_700_000_000, "allow") == expected


def test_signature_depends_on_tag() -> None:
    listing = sign_confirmation(_B64_SECRET, 1_700_000_000, "conf")
    allow = sign_confirmation(_B64_SECRET, 1_700_000_000, "allow")
    cancel = sign_confirmation(_B64_SECRET, 1_700_000_000, "cancel")
    assert len({listing, allow, cancel}) == 3


@pytest.mark.parametrize("seconds", [0, 29, 30, 1_699_999_980, 1_700_000_000, 2_000_000_017])
def test_code_matches_reference_totp(seconds: int) -> None:
    code = generate_auth_code(_B64_SECRET, seconds * 1000)
    assert code.code == _reference_code(_KEY, seconds)
    assert code.time == seconds


def test_code_uses_provider_alphabet() -> None:
    for seconds in range(0, 30 * 50, 30):
        code = generate_auth_code(_HEX_SECRET, seconds * 1000).code
        assert len(code) == 5
        assert set(code) <= set(CODE_ALPHABET)


def test_code_is_stable_within_a_window() -> None:
    start = generate_auth_code(_B64_SECRET, 1_699_999_980_000)
    end = generate_auth_code(_B64_SECRET, 1_700_000_009_999)
    assert start.code == end.code


@pytest.mark.parametrize(
    ("millis", "remaining"),
    [
        (1_699_999_980_000, 30),
        (1_700_000_000_000, 10),
        (1_700_000_009_999, 1),
        (1_700_000_010_000, 30),
    ],
)
def test_seconds_remaining(millis: int, remaining: int) -> None:
    assert generate_auth_code(_B64_SECRET, millis).seconds_remaining == remaining


def test_signature_is_deterministic_and_time_bound() -> None:
    first = sign_confirmation(_B64_SECRET, 1_700_000_000, "conf")
    assert first == sign_confirmation(_B64_SECRET, 1_700_000_000, "conf")
    assert first != sign_confirmation(_B64_SECRET, 1_700_000_001, "conf")


def test_code_changes_across_window_boundary() -> None:
    before = generate_auth_code(_B64_SECRET, 1_699_999_979_000)
    after = generate_auth_code(_B64_SECRET, 1_699_999_980_000)
    assert before.code != after.code
    assert before.seconds_remaining == 1
