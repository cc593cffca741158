"""Shared helpers for Steam endpoint modules.

This module centralizes the most repeated patterns:
- resolving a usable session or failing before any network I/O
- building per-call confirmation signatures and query strings
- mapping remote failure bodies onto the error taxonomy

It is internal to pysteamguard and may change at any time.
"""

from __future__ import annotations

import logging
from typing import Any

from pysteamguard._constants import (
    CONFIRMATION_DEVICE_TYPE,
    MOBILE_REQUESTED_WITH,
    SIGNATURE_REJECTED_MESSAGE,
)
from pysteamguard._crypto.signing import sign_confirmation
from pysteamguard._transport import HttpResponse
from pysteamguard.config import GuardConfig
from pysteamguard.exceptions import (
    DataParseError,
    GuardHttpError,
    LoginRequiredError,
    MissingSecretError,
    ProtocolError,
    SignatureRejectedError,
)
from pysteamguard.models.account import Account
from pysteamguard.models.requests import SignedRequest
from pysteamguard.session import Session, SessionStore
from pysteamguard.time_sync import TimeSync

_logger = logging.getLogger(__name__)

AUTH_FAILURE_STATUSES: frozenset[int] = frozenset({401, 403})


def require_session(store: SessionStore, account_id: str, *, endpoint: str = "") -> Session:
    """Return the stored session or raise :class:`LoginRequiredError`."""
    validity = store.is_valid(account_id)
    if not validity.valid or validity.session is None:
        raise LoginRequiredError(
            f"No usable session for account {account_id}: {validity.reason or 'invalid'}",
            endpoint=endpoint,
        )
    return validity.session


def build_signed_request(account: Account, time_sync: TimeSync, tag: str) -> SignedRequest:
    """Sign *tag* at the current remote-aligned time."""
    if not account.identity_secret:
        raise MissingSecretError(f"Account {account.account_name or account.steamid} has no identity_secret")
    now = time_sync.now()
    return SignedRequest(time=now, tag=tag, signature=sign_confirmation(account.identity_secret, now, tag))


def confirmation_query(account: Account, signed: SignedRequest) -> list[tuple[str, str]]:
    """Query parameters shared by the listing and action calls."""
    return [
        ("p", account.device_id),
        ("a", account.steamid),
        ("k", signed.signature),
        ("t", str(signed.time)),
        ("m", CONFIRMATION_DEVICE_TYPE),
        ("tag", signed.tag),
    ]


def confirmation_headers(config: GuardConfig, session: Session) -> dict[str, str]:
    """Mobile-app identity headers; the confirmation endpoints reject anything else."""
    return {
        "Accept": "application/json, text/javascript; q=0.01",
        "User-Agent": config.mobile_user_agent,
        "X-Requested-With": MOBILE_REQUESTED_WITH,
        "Referer": f"{config.community_url}/mobileconf/",
        "Cookie": session.cookie_header(),
    }


def raise_for_auth_status(response: HttpResponse, *, endpoint: str) -> None:
    if response.status in AUTH_FAILURE_STATUSES:
        raise LoginRequiredError(
            f"{endpoint} rejected the session (HTTP {response.status})",
            code=str(response.status),
            endpoint=endpoint,
        )


def raise_for_http_status(response: HttpResponse, *, endpoint: str) -> None:
    raise_for_auth_status(response, endpoint=endpoint)
    if not response.ok:
        raise GuardHttpError(
            f"HTTP {response.status} from {endpoint}: {response.text[:200]}",
            status_code=response.status,
            endpoint=endpoint,
        )


def classify_confirmation_response(response: HttpResponse, *, endpoint: str) -> dict[str, Any]:
    """Return the decoded success body or raise the matching error.

    Order: auth statuses, other HTTP failures, undecodable bodies, then the
    body's own failure flags.
    """
    raise_for_http_status(response, endpoint=endpoint)

    body = response.json(endpoint=endpoint)
    if not isinstance(body, dict):
        raise DataParseError(
            f"{endpoint} returned a non-object body",
            code="invalid_body",
            endpoint=endpoint,
        )

    if body.get("success"):
        return body

    message = str(body.get("message") or "")
    if message == SIGNATURE_REJECTED_MESSAGE:
        raise SignatureRejectedError(
            f"{endpoint} rejected the confirmation signature ({message})",
            code="signature_rejected",
            endpoint=endpoint,
        )
    if body.get("needauth"):
        raise LoginRequiredError(
            f"{endpoint} requires authentication",
            code="needauth",
            endpoint=endpoint,
        )
    raise ProtocolError(
        f"{endpoint} failed: {message or 'success=false'}",
        code="failure",
        endpoint=endpoint,
    )
