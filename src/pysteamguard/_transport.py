"""HTTP transport with cookie-header requests and response capture."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

import aiohttp

from pysteamguard._redact import redact_for_log
from pysteamguard.exceptions import DataParseError, GuardNetworkError, GuardTimeoutError

_logger = logging.getLogger(__name__)

Params = Mapping[str, Any] | Sequence[tuple[str, Any]]


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """A fully read HTTP response.

    Header names are lower-cased.  ``set_cookies`` keeps every
    ``Set-Cookie`` line since a plain mapping would collapse them.
    """

    status: int
    text: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    set_cookies: tuple[str, ...] = ()
    url: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def is_redirect(self) -> bool:
        return 300 <= self.status < 400

    @property
    def location(self) -> str:
        return self.headers.get("location", "")

    def json(self, *, endpoint: str = "") -> Any:
        """Decode the body as JSON, raising :class:`DataParseError` on failure."""
        try:
            return json.loads(self.text)
        except json.JSONDecodeError as exc:
            raise DataParseError(
                f"Invalid JSON from {endpoint or self.url}: {self.text[:200]}",
                code="invalid_json",
                endpoint=endpoint or self.url,
            ) from exc


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`SteamTransport`) concrete.
    """

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Params | None = None,
        data: Params | None = None,
        headers: Mapping[str, str] | None = None,
        allow_redirects: bool = True,
    ) -> HttpResponse: ...


class SteamTransport:
    """aiohttp-backed transport.

    Non-2xx statuses are returned, not raised; classification belongs to
    the endpoint modules.  Connection failures raise
    :class:`GuardNetworkError`.
    """

    def __init__(self, http_session: aiohttp.ClientSession) -> None:
        self._http = http_session

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Params | None = None,
        data: Params | None = None,
        headers: Mapping[str, str] | None = None,
        allow_redirects: bool = True,
    ) -> HttpResponse:
        _logger.debug("%s %s params=%s", method, url, redact_for_log(params))

        request_params: Any = list(params.items()) if isinstance(params, Mapping) else params
        request_data: Any = list(data.items()) if isinstance(data, Mapping) else data

        try:
            async with self._http.request(
                method,
                url,
                params=request_params,
                data=request_data,
                headers=dict(headers or {}),
                allow_redirects=allow_redirects,
            ) as resp:
                text = await resp.text()
                response_headers = {key.lower(): value for key, value in resp.headers.items()}
                set_cookies = tuple(resp.headers.getall("Set-Cookie", []))
                status = resp.status
        except asyncio.TimeoutError as exc:
            raise GuardTimeoutError(f"Request to {url} timed out", endpoint=url) from exc
        except aiohttp.ClientError as exc:
            raise GuardNetworkError(f"Request to {url} failed: {exc}", endpoint=url) from exc

        _logger.debug("%s %s -> %d", method, url, status)
        return HttpResponse(
            status=status,
            text=text,
            headers=response_headers,
            set_cookies=set_cookies,
            url=url,
        )
