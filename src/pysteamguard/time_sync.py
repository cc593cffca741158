"""Remote clock alignment.

Codes and confirmation signatures are only accepted when computed from
the remote service's clock.  :class:`TimeSync` learns the offset between
the local and remote clocks once and applies it afterwards.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from typing import Any

from pysteamguard._constants import API_URL, QUERY_TIME_PATH
from pysteamguard._transport import Transport
from pysteamguard.exceptions import GuardError

_logger = logging.getLogger(__name__)


def parse_server_time(body: Any) -> int | None:
    """Extract ``response.server_time`` from a QueryTime body."""
    if not isinstance(body, dict):
        return None
    response = body.get("response")
    if not isinstance(response, dict):
        return None
    try:
        return int(response.get("server_time"))
    except (TypeError, ValueError):
        return None


class TimeSync:
    """Process-wide clock offset with single-flight alignment.

    A successful :meth:`align` latches the offset for the lifetime of the
    instance.  A failed one leaves it unset so the next call retries.
    Concurrent callers share one in-flight request.
    """

    def __init__(
        self,
        *,
        url: str = f"{API_URL}{QUERY_TIME_PATH}",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._url = url
        self._clock = clock
        self._offset = 0
        self._aligned = False
        self._inflight: asyncio.Future[None] | None = None

    @property
    def offset(self) -> int:
        """Seconds to add to local time.  ``0`` until aligned."""
        return self._offset

    @property
    def aligned(self) -> bool:
        return self._aligned

    def now(self) -> int:
        """Remote-aligned epoch seconds."""
        return int(self._clock()) + self._offset

    def now_ms(self) -> int:
        """Remote-aligned epoch milliseconds."""
        return int(self._clock() * 1000) + self._offset * 1000

    async def align(self, transport: Transport) -> None:
        """Learn the remote clock offset unless already aligned."""
        if self._aligned:
            return
        inflight = self._inflight
        if inflight is None:
            inflight = asyncio.ensure_future(self._query(transport))
            self._inflight = inflight
            inflight.add_done_callback(self._clear_inflight)
        # Shielded so one cancelled caller does not abort the shared request.
        await asyncio.shield(inflight)

    def _clear_inflight(self, _future: asyncio.Future[None]) -> None:
        self._inflight = None

    async def _query(self, transport: Transport) -> None:
        try:
            response = await transport.request(
                "POST",
                self._url,
                headers={"Content-Length": "0"},
            )
            server_time = parse_server_time(response.json(endpoint=self._url)) if response.ok else None
        except GuardError as exc:
            _logger.warning("Time sync failed: %s", exc)
            return

        if server_time is None:
            _logger.warning("Time sync failed: no server_time in response (HTTP %d)", response.status)
            return

        self._offset = server_time - int(self._clock())
        self._aligned = True
        _logger.info("Time synced with remote clock, offset=%ds", self._offset)
