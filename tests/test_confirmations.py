from __future__ import annotations

import base64
import itertools
import json
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from pysteamguard._api.confirmations import act_on_confirmations, fetch_confirmations
from pysteamguard._constants import MOBILE_REQUESTED_WITH, QUERY_TIME_PATH
from pysteamguard._crypto import sign_confirmation
from pysteamguard._transport import HttpResponse
from pysteamguard.config import GuardConfig
from pysteamguard.exceptions import (
    DataParseError,
    GuardError,
    GuardHttpError,
    GuardNetworkError,
    LoginRequiredError,
    MissingSecretError,
    NoSelectionError,
    ProtocolError,
    SignatureRejectedError,
)
from pysteamguard.models.account import Account
from pysteamguard.models.confirmation import Confirmation, ConfirmationOp, ConfirmationSelection
from pysteamguard.session import MemorySessionStore
from pysteamguard.time_sync import TimeSync

_IDENTITY_SECRET = base64.b64encode(b"identity-secret-bytes").decode("ascii")
_LOCAL_NOW = 1_700_000_000.0
_REMOTE_NOW = 1_700_000_042
_EPOCH = datetime(2024, 1, 1, tzinfo=UTC)


class _SteamTransport:
    """Answers QueryTime itself and replays queued responses for everything else."""

    def __init__(self, *responses: HttpResponse) -> None:
        self._responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Any = None,
        data: Any = None,
        headers: Any = None,
        allow_redirects: bool = True,
    ) -> HttpResponse:
        if url.endswith(QUERY_TIME_PATH):
            return HttpResponse(status=200, text=json.dumps({"response": {"server_time": _REMOTE_NOW}}))
        self.calls.append(
            {
                "method": method,
                "url": url,
                "params": dict(params or []),
                "data": list(data or []),
                "headers": dict(headers or {}),
            }
        )
        return self._responses.pop(0)


class _UnreachableTransport(_SteamTransport):
    """Answers QueryTime but fails every other request at the network level."""

    async def request(self, method: str, url: str, **kwargs: Any) -> HttpResponse:
        if url.endswith(QUERY_TIME_PATH):
            return await super().request(method, url, **kwargs)
        raise GuardNetworkError("connection reset", endpoint=url)


def _ticking_store(account: Account) -> MemorySessionStore:
    ticks = itertools.count()
    store = MemorySessionStore(clock=lambda: _EPOCH + timedelta(seconds=next(ticks)))
    store.set(account.id, "sid-1", "secure-1")
    return store


def _json(body: Any, status: int = 200) -> HttpResponse:
    return HttpResponse(status=status, text=json.dumps(body))


def _account(**overrides: Any) -> Account:
    values: dict[str, Any] = {
        "steamid": "76561198000000001",
        "account_name": "alice",
        "identity_secret": _IDENTITY_SECRET,
        "device_id": "android:device-1",
    }
    values.update(overrides)
    return Account(**values)


def _store(account: Account) -> MemorySessionStore:
    store = MemorySessionStore()
    store.set(account.id, "sid-1", "secure-1")
    return store


def _listing(*items: dict[str, Any]) -> HttpResponse:
    return _json({"success": True, "conf": list(items)})


async def _fetch(account: Account, store: MemorySessionStore, transport: _SteamTransport) -> list[Confirmation]:
    return await fetch_confirmations(GuardConfig(), account, store, transport, TimeSync(clock=lambda: _LOCAL_NOW))


@pytest.mark.asyncio
async def test_listing_is_signed_with_conf_tag() -> None:
    account = _account()
    transport = _SteamTransport(
        _listing(
            {
                "id": 111,
                "nonce": "n-111",
                "type": 2,
                "type_name": "Trade Offer",
                "headline": "bob",
                "summary": ["1 item"],
                "creation_time": 1_699_999_000,
            }
        )
    )

    confirmations = await _fetch(account, _store(account), transport)

    assert len(transport.calls) == 1
    call = transport.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "https://steamcommunity.com/mobileconf/getlist"
    assert call["params"] == {
        "p": "android:device-1",
        "a": "76561198000000001",
        "k": sign_confirmation(_IDENTITY_SECRET, _REMOTE_NOW, "conf"),
        "t": str(_REMOTE_NOW),
        "m": "android",
        "tag": "conf",
    }
    assert call["headers"]["X-Requested-With"] == MOBILE_REQUESTED_WITH
    assert call["headers"]["Cookie"] == "sessionid=sid-1; steamLoginSecure=secure-1"

    assert [c.id for c in confirmations] == ["111"]
    first = confirmations[0]
    assert first.key == "n-111"
    assert first.type_name == "Trade Offer"
    assert first.summary == ["1 item"]
    assert first.creation_time is not None
    assert first.raw["nonce"] == "n-111"


@pytest.mark.asyncio
async def test_empty_listing() -> None:
    account = _account()
    transport = _SteamTransport(_json({"success": True}))
    assert await _fetch(account, _store(account), transport) == []


_REACHED_SERVICE = [
    _listing(),
    HttpResponse(status=401, text=""),
    HttpResponse(status=500, text="oops"),
    _json({"success": False, "message": "Oh nooooooes!"}),
    _json({"success": False, "needauth": True}),
    _json({"success": False, "message": "Something else"}),
]


@pytest.mark.parametrize("response", _REACHED_SERVICE)
@pytest.mark.asyncio
async def test_listing_touches_session_whatever_the_outcome(response: HttpResponse) -> None:
    account = _account()
    store = _ticking_store(account)
    before = store.get(account.id)

    try:
        await _fetch(account, store, _SteamTransport(response))
    except GuardError:
        pass

    after = store.get(account.id)
    assert before is not None and after is not None
    assert after.last_used > before.last_used
    assert after.created_at == before.created_at


@pytest.mark.parametrize("response", _REACHED_SERVICE)
@pytest.mark.asyncio
async def test_act_touches_session_whatever_the_outcome(response: HttpResponse) -> None:
    account = _account()
    store = _ticking_store(account)
    before = store.get(account.id)

    try:
        await act_on_confirmations(
            GuardConfig(),
            account,
            store,
            _SteamTransport(response),
            TimeSync(clock=lambda: _LOCAL_NOW),
            "allow",
            [Confirmation(id="1", nonce="k1")],
        )
    except GuardError:
        pass

    after = store.get(account.id)
    assert before is not None and after is not None
    assert after.last_used > before.last_used


@pytest.mark.asyncio
async def test_network_failure_does_not_touch_session() -> None:
    account = _account()
    store = _ticking_store(account)
    before = store.get(account.id)

    with pytest.raises(GuardNetworkError):
        await _fetch(account, store, _UnreachableTransport())

    assert store.get(account.id) == before


@pytest.mark.asyncio
async def test_missing_session_fails_without_network() -> None:
    account = _account()
    transport = _SteamTransport()

    with pytest.raises(LoginRequiredError):
        await _fetch(account, MemorySessionStore(), transport)

    assert transport.calls == []


@pytest.mark.asyncio
async def test_missing_identity_secret() -> None:
    account = _account(identity_secret="")
    transport = _SteamTransport()

    with pytest.raises(MissingSecretError):
        await _fetch(account, _store(account), transport)

    assert transport.calls == []


@pytest.mark.parametrize(
    ("response", "error"),
    [
        (HttpResponse(status=401, text=""), LoginRequiredError),
        (HttpResponse(status=403, text=""), LoginRequiredError),
        (HttpResponse(status=500, text="oops"), GuardHttpError),
        (HttpResponse(status=200, text="<html>"), DataParseError),
        (_json(["not", "an", "object"]), DataParseError),
        (_json({"success": False, "message": "Oh nooooooes!"}), SignatureRejectedError),
        (_json({"success": False, "needauth": True}), LoginRequiredError),
        (_json({"success": False, "message": "Something else"}), ProtocolError),
        (_json({"success": False}), ProtocolError),
    ],
)
@pytest.mark.asyncio
async def test_listing_failures_are_classified(response: HttpResponse, error: type[Exception]) -> None:
    account = _account()
    transport = _SteamTransport(response)

    with pytest.raises(error) as exc_info:
        await _fetch(account, _store(account), transport)

    assert getattr(exc_info.value, "endpoint", None) == "/mobileconf/getlist"


@pytest.mark.asyncio
async def test_http_error_keeps_status_code() -> None:
    account = _account()
    transport = _SteamTransport(HttpResponse(status=502, text="bad gateway"))

    with pytest.raises(GuardHttpError) as exc_info:
        await _fetch(account, _store(account), transport)

    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_signature_rejection_is_not_login_required() -> None:
    account = _account()
    transport = _SteamTransport(_json({"success": False, "message": "Oh nooooooes!", "needauth": True}))

    with pytest.raises(SignatureRejectedError) as exc_info:
        await _fetch(account, _store(account), transport)

    assert not isinstance(exc_info.value, LoginRequiredError)


@pytest.mark.asyncio
async def test_act_posts_selection_signed_with_op() -> None:
    account = _account()
    transport = _SteamTransport(_json({"success": True}))
    selection = [
        Confirmation(id="1", nonce="k1"),
        ConfirmationSelection(id="2", key="k2"),
        {"id": 3, "key": "k3"},
    ]

    ack = await act_on_confirmations(
        GuardConfig(),
        account,
        _store(account),
        transport,
        TimeSync(clock=lambda: _LOCAL_NOW),
        "allow",
        selection,
    )

    assert ack.success
    assert ack.op == ConfirmationOp.ALLOW
    assert ack.count == 3

    call = transport.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://steamcommunity.com/mobileconf/multiajaxop"
    assert call["data"] == [
        ("op", "allow"),
        ("cid[]", "1"),
        ("ck[]", "k1"),
        ("cid[]", "2"),
        ("ck[]", "k2"),
        ("cid[]", "3"),
        ("ck[]", "k3"),
    ]
    assert call["params"]["tag"] == "allow"
    assert call["params"]["k"] == sign_confirmation(_IDENTITY_SECRET, _REMOTE_NOW, "allow")
    assert call["params"]["k"] != sign_confirmation(_IDENTITY_SECRET, _REMOTE_NOW, "conf")


@pytest.mark.asyncio
async def test_cancel_is_signed_with_cancel_tag() -> None:
    account = _account()
    transport = _SteamTransport(_json({"success": True}))

    await act_on_confirmations(
        GuardConfig(),
        account,
        _store(account),
        transport,
        TimeSync(clock=lambda: _LOCAL_NOW),
        ConfirmationOp.CANCEL,
        [Confirmation(id="9", nonce="k9")],
    )

    params = transport.calls[0]["params"]
    assert params["tag"] == "cancel"
    assert params["k"] == sign_confirmation(_IDENTITY_SECRET, _REMOTE_NOW, "cancel")


@pytest.mark.asyncio
async def test_act_with_empty_selection_fails_without_network() -> None:
    account = _account()
    transport = _SteamTransport()

    with pytest.raises(NoSelectionError):
        await act_on_confirmations(
            GuardConfig(),
            account,
            _store(account),
            transport,
            TimeSync(clock=lambda: _LOCAL_NOW),
            "allow",
            [],
        )

    assert transport.calls == []


@pytest.mark.asyncio
async def test_act_rejects_unknown_op() -> None:
    account = _account()
    with pytest.raises(ValueError):
        await act_on_confirmations(
            GuardConfig(),
            account,
            _store(account),
            _SteamTransport(),
            TimeSync(clock=lambda: _LOCAL_NOW),
            "delete",
            [Confirmation(id="1", nonce="k1")],
        )


@pytest.mark.asyncio
async def test_act_failure_body_is_classified() -> None:
    account = _account()
    transport = _SteamTransport(_json({"success": False, "message": "Oh nooooooes!"}))

    with pytest.raises(SignatureRejectedError) as exc_info:
        await act_on_confirmations(
            GuardConfig(),
            account,
            _store(account),
            transport,
            TimeSync(clock=lambda: _LOCAL_NOW),
            "cancel",
            [Confirmation(id="1", nonce="k1")],
        )

    assert exc_info.value.endpoint == "/mobileconf/multiajaxop"


@pytest.mark.asyncio
async def test_session_without_primary_token_fails_without_network() -> None:
    account = _account()
    store = MemorySessionStore()
    store.set(account.id, "sid-1", "")
    transport = _SteamTransport()

    with pytest.raises(LoginRequiredError):
        await _fetch(account, store, transport)

    assert transport.calls == []


@pytest.mark.asyncio
async def test_act_with_keyless_selection_fails_without_network() -> None:
    account = _account()
    transport = _SteamTransport()

    with pytest.raises(NoSelectionError):
        await act_on_confirmations(
            GuardConfig(),
            account,
            _store(account),
            transport,
            TimeSync(clock=lambda: _LOCAL_NOW),
            "allow",
            [{"id": "1"}],
        )

    assert transport.calls == []
