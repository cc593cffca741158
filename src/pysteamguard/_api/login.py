"""Login orchestration.

The credential exchange itself belongs to an injected :class:`LoginFlow`;
this module feeds it a freshly generated one-time code and turns the
cookies it returns into a stored session.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from http.cookies import CookieError, SimpleCookie
from typing import Protocol

from pysteamguard._constants import SESSION_COOKIE
from pysteamguard._crypto.codes import generate_auth_code
from pysteamguard._transport import Transport
from pysteamguard.exceptions import GuardConfigError, LoginResponseMalformedError, MissingSecretError
from pysteamguard.models.account import Account
from pysteamguard.session import SessionStore
from pysteamguard.time_sync import TimeSync

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LoginFlowResult:
    """What a successful login flow hands back.

    ``cookies`` is either a sequence of ``Set-Cookie`` style strings or a
    name/value mapping.
    """

    sessionid: str
    cookies: Sequence[str] | Mapping[str, str] = field(default_factory=tuple)
    oauth_token: str | None = None


class LoginFlow(Protocol):
    """The remote provider's login flow.

    Implementations raise :class:`~pysteamguard.exceptions.GuardAuthenticationError`
    when the credentials are refused.
    """

    async def login(self, account_name: str, password: str, two_factor_code: str) -> LoginFlowResult: ...


def extract_cookie(cookies: Sequence[str] | Mapping[str, str], name: str = SESSION_COOKIE) -> str | None:
    """Return the value of cookie *name*, or ``None`` when absent or empty."""
    if isinstance(cookies, Mapping):
        value = cookies.get(name)
        return str(value) if value else None

    for raw in cookies:
        if not isinstance(raw, str):
            continue
        cookie: SimpleCookie = SimpleCookie()
        try:
            cookie.load(raw)
        except CookieError:
            _logger.debug("Skipping unparseable cookie line")
            continue
        morsel = cookie.get(name)
        if morsel is not None and morsel.value:
            return morsel.value
    return None


async def login_account(
    account: Account,
    password: str,
    flow: LoginFlow,
    store: SessionStore,
    transport: Transport,
    time_sync: TimeSync,
) -> None:
    """Log *account* in and store the resulting session.

    The password is handed to the flow once and is not kept anywhere.

    Raises
    ------
    MissingSecretError
        If the account has no ``shared_secret``.
    LoginResponseMalformedError
        If the flow succeeded without issuing the session cookie.
    """
    if not account.account_name:
        raise GuardConfigError(f"Account {account.steamid} is missing account_name")
    if not account.shared_secret:
        raise MissingSecretError(f"Account {account.account_name} is missing shared_secret; cannot generate a code")

    await time_sync.align(transport)
    code = generate_auth_code(account.shared_secret, time_sync.now_ms())

    _logger.info("Logging in as %s (%s)", account.account_name, account.steamid)
    result = await flow.login(account.account_name, password, code.code)

    login_secure = extract_cookie(result.cookies)
    if not login_secure:
        _logger.error("Login for %s returned no %s cookie", account.account_name, SESSION_COOKIE)
        raise LoginResponseMalformedError(
            f"Login succeeded but the {SESSION_COOKIE} cookie is missing",
            code="missing_cookie",
            endpoint="login",
        )

    store.set(account.id, result.sessionid, login_secure, result.oauth_token)
    _logger.info("Session stored for %s", account.account_name)
