"""High-level async client for Steam Guard operations."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, TypeVar

import aiohttp

from pysteamguard._api import confirmations as _confirmations_api
from pysteamguard._api import devices as _devices_api
from pysteamguard._api.login import LoginFlow, login_account
from pysteamguard._constants import QUERY_TIME_PATH
from pysteamguard._crypto.codes import generate_auth_code
from pysteamguard._transport import SteamTransport, Transport
from pysteamguard.config import GuardConfig
from pysteamguard.exceptions import (
    AccountNotFoundError,
    GuardConfigError,
    GuardError,
    GuardTimeoutError,
    LoginRequiredError,
    MissingSecretError,
)
from pysteamguard.models.account import Account
from pysteamguard.models.auth_code import AuthCode
from pysteamguard.models.confirmation import (
    Confirmation,
    ConfirmationAck,
    ConfirmationOp,
    ConfirmationSelection,
)
from pysteamguard.models.device import Device, RemoveDevicesResult
from pysteamguard.models.security import SecurityStatus
from pysteamguard.policy import DeviceFilter, filter_devices, sort_devices
from pysteamguard.session import JsonFileSessionStore, MemorySessionStore, SessionState, SessionStore
from pysteamguard.time_sync import TimeSync

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class SteamGuardClient:
    """Async client for Steam Guard codes, confirmations and devices.

    Usage::

        async with SteamGuardClient(accounts=[account]) as client:
            code = await client.get_code(account.id)
            pending = await client.list_confirmations(account.id)

    A :class:`TimeSync` may be shared between clients so the remote
    clock is queried once per process.
    """

    def __init__(
        self,
        config: GuardConfig | None = None,
        *,
        accounts: Iterable[Account] = (),
        store: SessionStore | None = None,
        time_sync: TimeSync | None = None,
        login_flow: LoginFlow | None = None,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config or GuardConfig()
        if store is None:
            store = (
                JsonFileSessionStore(self._config.session_file)
                if self._config.session_file
                else MemorySessionStore()
            )
        self._store = store
        self._time_sync = time_sync or TimeSync(url=f"{self._config.api_url}{QUERY_TIME_PATH}")
        self._login_flow = login_flow
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._external_transport = transport is not None
        self._accounts: dict[str, Account] = {}
        self._states: dict[str, SessionState] = {}
        for account in accounts:
            self.add_account(account)

    @classmethod
    def from_config(
        cls,
        config: GuardConfig | None = None,
        *,
        accounts: Iterable[Account] = (),
        **kwargs: Any,
    ) -> SteamGuardClient:
        """Build a client from *config*, or from ``STEAMGUARD_*`` variables.

        Sessions persist to ``config.session_file`` when it is set.
        """
        return cls(config or GuardConfig.from_env(), accounts=accounts, **kwargs)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SteamGuardClient:
        if self._transport is None:
            if self._http_session is None:
                timeout = (
                    aiohttp.ClientTimeout(total=self._config.request_timeout)
                    if self._config.request_timeout > 0
                    else None
                )
                # Cookies come only from the session store, per account.
                self._http_session = aiohttp.ClientSession(timeout=timeout, cookie_jar=aiohttp.DummyCookieJar())
            self._transport = SteamTransport(self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None

    # ------------------------------------------------------------------
    # Accounts and session state
    # ------------------------------------------------------------------

    @property
    def config(self) -> GuardConfig:
        return self._config

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def time_sync(self) -> TimeSync:
        return self._time_sync

    def add_account(self, account: Account) -> None:
        self._accounts[account.id] = account

    def get_account(self, account_id: str) -> Account:
        """Look an account up by registry id or steamid."""
        key = str(account_id)
        account = self._accounts.get(key)
        if account is not None:
            return account
        for candidate in self._accounts.values():
            if candidate.steamid == key:
                return candidate
        raise AccountNotFoundError(f"Unknown account {key}")

    @property
    def accounts(self) -> list[Account]:
        return list(self._accounts.values())

    def session_state(self, account_id: str) -> SessionState:
        """Current session state.

        ``INVALID`` whenever no usable session is stored; otherwise the
        state last established by a call outcome (``UNKNOWN`` until then).
        """
        account = self.get_account(account_id)
        if not self._store.is_valid(account.id).valid:
            return SessionState.INVALID
        return self._states.get(account.id, SessionState.UNKNOWN)

    def logout(self, account_id: str) -> None:
        """Explicitly drop the stored session."""
        account = self.get_account(account_id)
        self._store.clear(account.id)
        self._states[account.id] = SessionState.INVALID

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise GuardError("Client not initialized. Use 'async with SteamGuardClient(...) as client:'")
        return self._transport

    def _on_login_required(self, account: Account) -> None:
        self._states[account.id] = SessionState.INVALID
        if self._config.clear_session_on_auth_failure:
            _logger.info("Dropping rejected session for %s", account.account_name or account.steamid)
            self._store.clear(account.id)

    async def _run(
        self,
        account: Account,
        fn: Callable[[], Awaitable[T]],
        *,
        timeout: float | None,
        uses_session: bool = True,
    ) -> T:
        """Run one operation, applying *timeout* and session state transitions."""
        try:
            async with asyncio.timeout(timeout):
                result = await fn()
        except TimeoutError as exc:
            raise GuardTimeoutError(f"Operation timed out after {timeout}s") from exc
        except LoginRequiredError:
            self._on_login_required(account)
            raise
        if uses_session:
            self._states[account.id] = SessionState.VALID
        return result

    # ------------------------------------------------------------------
    # Codes
    # ------------------------------------------------------------------

    async def get_code(self, account_id: str, *, timeout: float | None = None) -> AuthCode:
        """Current one-time code and the seconds it stays valid."""
        account = self.get_account(account_id)
        if not account.shared_secret:
            raise MissingSecretError(f"Account {account.account_name or account.steamid} has no shared_secret")
        transport = self._require_transport()

        async def _call() -> AuthCode:
            await self._time_sync.align(transport)
            return generate_auth_code(account.shared_secret, self._time_sync.now_ms())

        return await self._run(account, _call, timeout=timeout, uses_session=False)

    # ------------------------------------------------------------------
    # Confirmations
    # ------------------------------------------------------------------

    async def list_confirmations(self, account_id: str, *, timeout: float | None = None) -> list[Confirmation]:
        account = self.get_account(account_id)
        transport = self._require_transport()
        return await self._run(
            account,
            lambda: _confirmations_api.fetch_confirmations(
                self._config, account, self._store, transport, self._time_sync
            ),
            timeout=timeout,
        )

    async def act(
        self,
        account_id: str,
        op: ConfirmationOp | str,
        confirmations: Iterable[Confirmation | ConfirmationSelection | dict[str, Any]],
        *,
        timeout: float | None = None,
    ) -> ConfirmationAck:
        """Allow or cancel confirmations from the latest listing.

        Not retried: a failed action needs a fresh :meth:`list_confirmations`.
        """
        account = self.get_account(account_id)
        transport = self._require_transport()
        selection = list(confirmations)
        return await self._run(
            account,
            lambda: _confirmations_api.act_on_confirmations(
                self._config, account, self._store, transport, self._time_sync, op, selection
            ),
            timeout=timeout,
        )

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def login(self, account_id: str, password: str, *, timeout: float | None = None) -> None:
        """Establish a new session with *password* and a generated code."""
        if self._login_flow is None:
            raise GuardConfigError("No login flow configured (pass login_flow=...)")
        account = self.get_account(account_id)
        transport = self._require_transport()
        flow = self._login_flow
        await self._run(
            account,
            lambda: login_account(account, password, flow, self._store, transport, self._time_sync),
            timeout=timeout,
        )

    # ------------------------------------------------------------------
    # Devices
    # ------------------------------------------------------------------

    async def list_devices(
        self,
        steamid: str,
        *,
        device_filter: DeviceFilter | str = DeviceFilter.ALL,
        sort: bool = False,
        timeout: float | None = None,
    ) -> list[Device]:
        """Authorized devices, optionally filtered and ordered by activity."""
        account = self.get_account(steamid)
        transport = self._require_transport()
        devices = await self._run(
            account,
            lambda: _devices_api.fetch_devices(self._config, account, self._store, transport),
            timeout=timeout,
        )
        window = self._config.active_window_seconds
        devices = filter_devices(devices, device_filter, window_seconds=window)
        if sort:
            devices = sort_devices(devices, window_seconds=window)
        return devices

    async def remove_all_devices(self, steamid: str, *, timeout: float | None = None) -> RemoveDevicesResult:
        """Sign out everywhere, then re-fetch the device list."""
        account = self.get_account(steamid)
        transport = self._require_transport()

        async def _call() -> RemoveDevicesResult:
            result = await _devices_api.sign_out_everywhere(self._config, account, self._store, transport)
            devices = await _devices_api.fetch_devices(self._config, account, self._store, transport)
            return result.model_copy(update={"devices": devices})

        return await self._run(account, _call, timeout=timeout)

    async def remove_device(
        self,
        steamid: str,
        device_id: str,
        *,
        timeout: float | None = None,
    ) -> RemoveDevicesResult:
        """Remove one device.

        Only ``"all"`` is supported; any other id raises
        :class:`~pysteamguard.exceptions.DeviceRevokeUnsupportedError`.
        """
        if device_id == _devices_api.ALL_DEVICES:
            return await self.remove_all_devices(steamid, timeout=timeout)
        _devices_api.revoke_single_device(self.get_account(steamid), device_id)

    async def get_security_status(self, steamid: str, *, timeout: float | None = None) -> SecurityStatus:
        account = self.get_account(steamid)
        transport = self._require_transport()
        return await self._run(
            account,
            lambda: _devices_api.fetch_security_status(self._config, account, self._store, transport),
            timeout=timeout,
        )
