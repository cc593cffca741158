"""Confirmation endpoints.

Endpoints:
  - /mobileconf/getlist (listing, signed with tag ``conf``)
  - /mobileconf/multiajaxop (action, signed with tag = op)

A listing's nonces are single use.  After any action the caller must
list again before acting again.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from pysteamguard._api._common import (
    build_signed_request,
    classify_confirmation_response,
    confirmation_headers,
    confirmation_query,
    require_session,
)
from pysteamguard._constants import LISTING_TAG
from pysteamguard._redact import redact_for_log
from pysteamguard._transport import Transport
from pysteamguard.config import GuardConfig
from pysteamguard.exceptions import DataParseError, NoSelectionError
from pysteamguard.models.account import Account
from pysteamguard.models.confirmation import (
    Confirmation,
    ConfirmationAck,
    ConfirmationOp,
    ConfirmationSelection,
)
from pysteamguard.session import SessionStore
from pysteamguard.time_sync import TimeSync

_logger = logging.getLogger(__name__)


def _parse_confirmations(body: dict[str, Any], *, endpoint: str) -> list[Confirmation]:
    items = body.get("conf") or []
    if not isinstance(items, list):
        raise DataParseError(f"{endpoint} returned a non-list 'conf'", code="invalid_body", endpoint=endpoint)
    try:
        return [Confirmation.model_validate(item) for item in items]
    except ValueError as exc:
        raise DataParseError(f"{endpoint} returned a malformed confirmation: {exc}", endpoint=endpoint) from exc


async def fetch_confirmations(
    config: GuardConfig,
    account: Account,
    store: SessionStore,
    transport: Transport,
    time_sync: TimeSync,
) -> list[Confirmation]:
    """List pending confirmations for *account*.

    Raises
    ------
    LoginRequiredError
        Without any network call when no usable session is stored, or when
        the remote rejects the session.
    SignatureRejectedError
        When the remote rejects the signature.
    ProtocolError
        For any other failure body.
    """
    endpoint = config.confirmation_list_path
    session = require_session(store, account.id, endpoint=endpoint)
    await time_sync.align(transport)

    signed = build_signed_request(account, time_sync, LISTING_TAG)
    _logger.debug("Querying confirmations for %s", account.account_name or account.steamid)
    response = await transport.request(
        "GET",
        f"{config.community_url}{endpoint}",
        params=confirmation_query(account, signed),
        headers=confirmation_headers(config, session),
    )
    store.touch(account.id)

    body = classify_confirmation_response(response, endpoint=endpoint)
    confirmations = _parse_confirmations(body, endpoint=endpoint)
    _logger.debug("Found %d confirmation(s) for %s", len(confirmations), account.account_name or account.steamid)
    return confirmations


async def act_on_confirmations(
    config: GuardConfig,
    account: Account,
    store: SessionStore,
    transport: Transport,
    time_sync: TimeSync,
    op: ConfirmationOp | str,
    confirmations: Iterable[Confirmation | ConfirmationSelection | dict[str, Any]],
) -> ConfirmationAck:
    """Allow or cancel the given confirmations.

    The request is signed afresh with ``tag=op``; the listing signature
    and nonces are never reused as the signature.
    """
    operation = ConfirmationOp(op)
    try:
        selection = [ConfirmationSelection.of(item) for item in confirmations]
    except ValidationError as exc:
        raise NoSelectionError(f"Invalid confirmation selection: {exc}") from exc
    if not selection:
        raise NoSelectionError("No confirmations selected")

    endpoint = config.confirmation_action_path
    session = require_session(store, account.id, endpoint=endpoint)
    await time_sync.align(transport)

    signed = build_signed_request(account, time_sync, operation.value)
    form: list[tuple[str, str]] = [("op", operation.value)]
    for item in selection:
        form.append(("cid[]", item.id))
        form.append(("ck[]", item.key))

    headers = confirmation_headers(config, session)
    headers["Content-Type"] = "application/x-www-form-urlencoded; charset=UTF-8"
    _logger.debug("Confirmation %s form=%s", operation.value, redact_for_log(form))

    response = await transport.request(
        "POST",
        f"{config.community_url}{endpoint}",
        params=confirmation_query(account, signed),
        data=form,
        headers=headers,
    )
    store.touch(account.id)

    body = classify_confirmation_response(response, endpoint=endpoint)
    _logger.info("Confirmation %s succeeded for %d item(s)", operation.value, len(selection))
    return ConfirmationAck(success=True, op=operation, count=len(selection), raw=body)
