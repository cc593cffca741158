"""Authorized device endpoints.

Endpoints:
  - /account/authorizeddevices (device management page, store site)
  - /twofactor/manage_action (sign out everywhere)

The remote protocol offers no per-device revoke.  The only revocation is
signing out every device at once.
"""

from __future__ import annotations

import logging
from typing import NoReturn

from pysteamguard._api._common import raise_for_auth_status, raise_for_http_status, require_session
from pysteamguard._constants import AUTHORIZED_DEVICES_PATH, MANAGE_ACTION_PATH
from pysteamguard._transport import Transport
from pysteamguard.config import GuardConfig
from pysteamguard.exceptions import DeviceRevokeUnsupportedError, GuardHttpError, LoginRequiredError
from pysteamguard.ingestion.device_page import DevicePage, parse_device_page, parse_security_status
from pysteamguard.ingestion.devices import normalize_device
from pysteamguard.models.account import Account
from pysteamguard.models.device import Device, DeviceCategory, RemoveDevicesResult
from pysteamguard.models.security import SecurityStatus
from pysteamguard.session import Session, SessionStore

_logger = logging.getLogger(__name__)

ALL_DEVICES = "all"


def _page_headers(config: GuardConfig, session: Session) -> dict[str, str]:
    return {
        "Cookie": session.store_cookie_header(),
        "User-Agent": config.desktop_user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
    }


async def fetch_device_page(config: GuardConfig, session: Session, transport: Transport) -> str:
    """Fetch the device management page markup."""
    response = await transport.request(
        "GET",
        f"{config.store_url}{AUTHORIZED_DEVICES_PATH}",
        headers=_page_headers(config, session),
    )
    raise_for_http_status(response, endpoint=AUTHORIZED_DEVICES_PATH)
    return response.text


def normalize_page(page: DevicePage, *, now: int | None = None, new_device_days: int = 14) -> list[Device]:
    """Normalize active devices first, then revoked ones tagged ``recent``."""
    devices = [
        normalize_device(raw, DeviceCategory.ACTIVE, page.current_token_id, now=now, new_device_days=new_device_days)
        for raw in page.active_raw
    ]
    devices.extend(
        normalize_device(raw, DeviceCategory.RECENT, page.current_token_id, now=now, new_device_days=new_device_days)
        for raw in page.revoked_raw
    )
    return devices


async def fetch_devices(
    config: GuardConfig,
    account: Account,
    store: SessionStore,
    transport: Transport,
    *,
    now: int | None = None,
) -> list[Device]:
    """Fetch, parse and normalize every device on the account."""
    session = require_session(store, account.id, endpoint=AUTHORIZED_DEVICES_PATH)
    html = await fetch_device_page(config, session, transport)
    devices = normalize_page(parse_device_page(html), now=now, new_device_days=config.new_device_days)
    store.touch(account.id)
    _logger.debug("Loaded %d device(s) for %s", len(devices), account.account_name or account.steamid)
    return devices


async def fetch_security_status(
    config: GuardConfig,
    account: Account,
    store: SessionStore,
    transport: Transport,
) -> SecurityStatus:
    """Read the account's security summary from the device page."""
    session = require_session(store, account.id, endpoint=AUTHORIZED_DEVICES_PATH)
    html = await fetch_device_page(config, session, transport)
    status = parse_security_status(html)
    store.touch(account.id)
    if status.account_name is None and account.account_name:
        status = status.model_copy(update={"account_name": account.account_name})
    return status


async def sign_out_everywhere(
    config: GuardConfig,
    account: Account,
    store: SessionStore,
    transport: Transport,
) -> RemoveDevicesResult:
    """Deauthorize every device on the account.

    Signing out everywhere may invalidate the very session used for the
    request, in which case the remote redirects to its login path.

    Raises
    ------
    LoginRequiredError
        If the response redirects to a login path.
    GuardHttpError
        For statuses that are neither success nor redirect.
    """
    session = require_session(store, account.id, endpoint=MANAGE_ACTION_PATH)
    headers = {
        "Cookie": session.store_cookie_header(),
        "User-Agent": config.desktop_user_agent,
        "Origin": config.store_url,
        "Referer": f"{config.store_url}{AUTHORIZED_DEVICES_PATH}",
    }
    response = await transport.request(
        "POST",
        f"{config.store_url}{MANAGE_ACTION_PATH}",
        data=[("action", "deauthorize"), ("sessionid", session.sessionid)],
        headers=headers,
        allow_redirects=False,
    )
    store.touch(account.id)

    raise_for_auth_status(response, endpoint=MANAGE_ACTION_PATH)
    if response.is_redirect:
        if "/login" in response.location:
            raise LoginRequiredError(
                f"{MANAGE_ACTION_PATH} redirected to login",
                code=str(response.status),
                endpoint=MANAGE_ACTION_PATH,
            )
        return RemoveDevicesResult(success=True, status=response.status)
    if response.ok:
        return RemoveDevicesResult(success=True, status=response.status)

    _logger.warning("Sign out everywhere failed: status=%d location=%s", response.status, response.location)
    raise GuardHttpError(
        f"HTTP {response.status} from {MANAGE_ACTION_PATH}: {response.text[:200]}",
        status_code=response.status,
        endpoint=MANAGE_ACTION_PATH,
    )


def revoke_single_device(account: Account, device_id: str) -> NoReturn:
    """Always fails: the remote protocol has no per-device revoke."""
    raise DeviceRevokeUnsupportedError(
        f"Revoking a single device ({device_id}) is not supported; sign out everywhere instead",
        code="DEVICE_REVOKE_UNSUPPORTED",
        endpoint=MANAGE_ACTION_PATH,
    )
