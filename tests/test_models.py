from __future__ import annotations

import hashlib
import re
from datetime import UTC, datetime
from typing import Any

import pytest
from pydantic import ValidationError

from pysteamguard.exceptions import GuardConfigError
from pysteamguard.models import (
    Account,
    AuthCode,
    Confirmation,
    ConfirmationSelection,
    fallback_device_id,
    parse_epoch_timestamp,
)


def test_account_defaults_id_and_device_id() -> None:
    account = Account(steamid=76561198000000001, account_name=" alice ")
    assert account.steamid == "76561198000000001"
    assert account.id == "76561198000000001"
    assert account.account_name == "alice"
    assert account.device_id == fallback_device_id("76561198000000001")


def test_fallback_device_id_shape() -> None:
    device_id = fallback_device_id("76561198000000001")
    digest = hashlib.sha1(b"76561198000000001").hexdigest()

    assert re.fullmatch(r"android:[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", device_id)
    assert device_id.replace("-", "").removeprefix("android:") == digest[:32]


def test_from_mafile_variants() -> None:
    nested = Account.from_mafile(
        {
            "account_name": "bob",
            "shared_secret": "c2hhcmVk",
            "identity_secret": "aWRlbnRpdHk=",
            "device_id": "android:abc",
            "Session": {"SteamID": 76561198000000002},
        }
    )
    assert nested.steamid == "76561198000000002"
    assert nested.device_id == "android:abc"
    assert nested.identity_secret == "aWRlbnRpdHk="

    flat = Account.from_mafile({"SteamID": "76561198000000003", "deviceID": "android:def"})
    assert flat.steamid == "76561198000000003"
    assert flat.device_id == "android:def"

    with pytest.raises(GuardConfigError):
        Account.from_mafile({"account_name": "nobody"})


def test_confirmation_coerces_remote_shapes() -> None:
    confirmation = Confirmation.model_validate(
        {
            "id": 12345,
            "nonce": 987,
            "type": 2,
            "headline": "",
            "summary": "One line",
            "creation_time": 1_700_000_000_000,
            "creator_id": 42,
            "unknown": "ignored",
        }
    )

    assert confirmation.id == "12345"
    assert confirmation.key == "987"
    assert confirmation.creator_id == "42"
    assert confirmation.headline is None
    assert confirmation.summary == ["One line"]
    assert confirmation.creation_time == datetime(2023, 11, 14, 22, 13, 20, tzinfo=UTC)
    assert confirmation.raw["unknown"] == "ignored"


def test_epoch_timestamp_accepts_seconds_and_millis() -> None:
    assert parse_epoch_timestamp(None) is None
    assert parse_epoch_timestamp(1_700_000_000) == parse_epoch_timestamp(1_700_000_000_000)


def test_confirmation_selection_of() -> None:
    confirmation = Confirmation(id="1", nonce="k1")
    assert ConfirmationSelection.of(confirmation) == ConfirmationSelection(id="1", key="k1")
    assert ConfirmationSelection.of({"id": 2, "nonce": "k2"}) == ConfirmationSelection(id="2", key="k2")


@pytest.mark.parametrize("item", [{"nonce": "k1"}, {"id": "1"}, {"id": "1", "key": ""}, {"id": "", "key": "k1"}])
def test_confirmation_selection_requires_id_and_key(item: dict[str, Any]) -> None:
    with pytest.raises(ValidationError):
        ConfirmationSelection.of(item)


def test_auth_code_bounds() -> None:
    with pytest.raises(ValueError):
        AuthCode(code="ABCD", seconds_remaining=10, time=0)
    with pytest.raises(ValueError):
        AuthCode(code="ABCDE", seconds_remaining=0, time=0)
