"""Device management page parsing.

The page embeds its data as HTML-escaped JSON in the ``data-*``
attributes of a single ``#application_config`` element.  When the
session is not accepted the page still answers HTTP 200 but renders a
logged-out variant without that element, so a missing element is the
login-detection signal.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Any

from pysteamguard.exceptions import DataParseError, LoginRequiredError
from pysteamguard.models.security import SecurityStatus

CONFIG_ELEMENT_ID = "application_config"
ACTIVE_DEVICES_ATTR = "data-active_devices"
REVOKED_DEVICES_ATTR = "data-revoked_devices"
REQUESTING_TOKEN_ATTR = "data-requesting_token_id"

_ENDPOINT = "authorizeddevices"


class _ConfigElementFinder(HTMLParser):
    """Collects the attributes of the first element with the config id."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.attributes: dict[str, str] | None = None

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if self.attributes is not None:
            return
        values = {name.lower(): value or "" for name, value in attrs}
        if values.get("id") == CONFIG_ELEMENT_ID:
            self.attributes = values


@dataclass(frozen=True, slots=True)
class DevicePage:
    """Raw data extracted from the device management page."""

    active_raw: list[dict[str, Any]] = field(default_factory=list)
    revoked_raw: list[dict[str, Any]] = field(default_factory=list)
    current_token_id: str | None = None
    attributes: dict[str, str] = field(default_factory=dict)


def find_config_attributes(html: str) -> dict[str, str]:
    """Return the config element's attributes (entity-decoded).

    Raises
    ------
    LoginRequiredError
        If the element is absent.
    """
    finder = _ConfigElementFinder()
    finder.feed(html or "")
    finder.close()
    if finder.attributes is None:
        raise LoginRequiredError(
            "Device page has no application config (logged-out variant)",
            endpoint=_ENDPOINT,
        )
    return finder.attributes


def decode_json_attribute(raw: str | None, *, name: str = "") -> Any:
    """Decode an attribute value as JSON.  Empty values decode to ``None``."""
    if not raw:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise DataParseError(
            f"Failed to parse JSON from {name or 'data attribute'}: {exc}",
            code="invalid_json",
            endpoint=_ENDPOINT,
        ) from exc


def _as_records(value: Any) -> list[dict[str, Any]]:
    if isinstance(value, list):
        return [item for item in value if isinstance(item, dict)]
    if isinstance(value, dict):
        return [value]
    return []


def parse_device_page(html: str) -> DevicePage:
    """Extract the active/revoked device lists and the current token id."""
    attributes = find_config_attributes(html)
    active_attr = attributes.get(ACTIVE_DEVICES_ATTR)
    revoked_attr = attributes.get(REVOKED_DEVICES_ATTR)
    if not active_attr and not revoked_attr:
        raise LoginRequiredError(
            "Device page carries no device lists (logged-out variant)",
            endpoint=_ENDPOINT,
        )

    current = decode_json_attribute(attributes.get(REQUESTING_TOKEN_ATTR), name=REQUESTING_TOKEN_ATTR)
    return DevicePage(
        active_raw=_as_records(decode_json_attribute(active_attr, name=ACTIVE_DEVICES_ATTR)),
        revoked_raw=_as_records(decode_json_attribute(revoked_attr, name=REVOKED_DEVICES_ATTR)),
        current_token_id=None if current is None else str(current),
        attributes=attributes,
    )


def parse_security_status(html: str) -> SecurityStatus:
    """Read the 2FA state and contact hints from the same page."""
    attributes = find_config_attributes(html)
    two_factor = decode_json_attribute(attributes.get("data-two_factor_status"), name="data-two_factor_status")
    account_name = decode_json_attribute(attributes.get("data-accountname"), name="data-accountName")
    email = decode_json_attribute(attributes.get("data-email"), name="data-email")
    phone_hint = decode_json_attribute(attributes.get("data-phone_hint"), name="data-phone_hint")

    two_factor_raw = two_factor if isinstance(two_factor, dict) else None
    return SecurityStatus(
        account_name=str(account_name) if account_name else None,
        email=str(email) if email else None,
        phone_hint=str(phone_hint) if phone_hint else None,
        two_factor_enabled=bool(two_factor_raw and two_factor_raw.get("state") == 1),
        two_factor_raw=two_factor_raw,
    )
