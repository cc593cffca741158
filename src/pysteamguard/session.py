"""Session state management for authenticated web calls.

A session is the cookie pair produced by a successful login.  The core
only talks to storage through the :class:`SessionStore` protocol; two
implementations are provided, an in-memory one and a JSON file.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Callable
from datetime import UTC, datetime
from enum import StrEnum
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SessionState(StrEnum):
    """Per-account session state driven by call outcomes."""

    UNKNOWN = "unknown"
    VALID = "valid"
    INVALID = "invalid"


class Session(BaseModel):
    """Stored session record.

    Field aliases match the persisted JSON keys.

    Parameters
    ----------
    sessionid : str
        The ``sessionid`` cookie.
    steam_login_secure : str
        The ``steamLoginSecure`` cookie, the primary auth token.
    oauth_token : str or None
        Optional secondary token returned by the login flow.
    created_at : datetime
        When the record was written by a login.
    last_used : datetime
        Last time a call using the record reached the remote service.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    sessionid: str = ""
    steam_login_secure: str = Field(default="", alias="steamLoginSecure")
    oauth_token: str | None = Field(default=None, alias="oAuthToken")
    created_at: datetime = Field(default_factory=_utcnow, alias="createdAt")
    last_used: datetime = Field(default_factory=_utcnow, alias="lastUsed")

    @property
    def is_present(self) -> bool:
        """Whether both required tokens are non-empty."""
        return bool(self.sessionid) and bool(self.steam_login_secure)

    def cookie_header(self) -> str:
        """Cookie header for confirmation calls."""
        return f"sessionid={self.sessionid}; steamLoginSecure={self.steam_login_secure}"

    def store_cookie_header(self) -> str:
        """Cookie header for store pages, which also need the language cookie."""
        return f"steamLoginSecure={self.steam_login_secure}; sessionid={self.sessionid}; Steam_Language=english"


class SessionValidity(BaseModel):
    """Result of :meth:`SessionStore.is_valid`."""

    model_config = ConfigDict(frozen=True)

    valid: bool
    session: Session | None = None
    reason: str | None = None


class SessionStore(Protocol):
    """Read/write contract for per-account session records."""

    def get(self, account_id: str) -> Session | None: ...

    def is_valid(self, account_id: str) -> SessionValidity: ...

    def set(
        self,
        account_id: str,
        sessionid: str,
        primary_token: str,
        secondary_token: str | None = None,
    ) -> None: ...

    def touch(self, account_id: str) -> None: ...

    def clear(self, account_id: str) -> None: ...


def check_validity(session: Session | None) -> SessionValidity:
    if session is None:
        return SessionValidity(valid=False, reason="no session stored")
    if not session.sessionid:
        return SessionValidity(valid=False, session=session, reason="sessionid missing")
    if not session.steam_login_secure:
        return SessionValidity(valid=False, session=session, reason="steamLoginSecure missing")
    return SessionValidity(valid=True, session=session)


class MemorySessionStore:
    """Dict-backed session store."""

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._sessions: dict[str, Session] = {}

    def _load(self) -> dict[str, Session]:
        return self._sessions

    def _save(self, sessions: dict[str, Session]) -> None:
        self._sessions = sessions

    def get(self, account_id: str) -> Session | None:
        return self._load().get(account_id)

    def is_valid(self, account_id: str) -> SessionValidity:
        return check_validity(self.get(account_id))

    def set(
        self,
        account_id: str,
        sessionid: str,
        primary_token: str,
        secondary_token: str | None = None,
    ) -> None:
        now = self._clock()
        sessions = dict(self._load())
        sessions[account_id] = Session(
            sessionid=sessionid,
            steam_login_secure=primary_token,
            oauth_token=secondary_token,
            created_at=now,
            last_used=now,
        )
        self._save(sessions)
        _logger.info("Saved session for account %s", account_id)

    def touch(self, account_id: str) -> None:
        sessions = dict(self._load())
        current = sessions.get(account_id)
        if current is None:
            return
        sessions[account_id] = current.model_copy(update={"last_used": self._clock()})
        self._save(sessions)

    def clear(self, account_id: str) -> None:
        sessions = dict(self._load())
        if sessions.pop(account_id, None) is not None:
            self._save(sessions)
            _logger.info("Cleared session for account %s", account_id)


class JsonFileSessionStore(MemorySessionStore):
    """Session store persisted as ``{"sessions": {account_id: {...}}}``.

    The file is re-read on every access so several processes may share
    it.  Writes go through a temporary file and an atomic rename.
    """

    def __init__(self, path: str | os.PathLike[str], *, clock: Callable[[], datetime] = _utcnow) -> None:
        super().__init__(clock=clock)
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Session]:
        if not self._path.exists():
            return {}
        try:
            document: Any = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            _logger.warning("Session file %s is unreadable; treating it as empty", self._path, exc_info=True)
            return {}

        raw_sessions = document.get("sessions") if isinstance(document, dict) else None
        if not isinstance(raw_sessions, dict):
            return {}

        sessions: dict[str, Session] = {}
        for account_id, raw in raw_sessions.items():
            if not isinstance(raw, dict):
                continue
            try:
                sessions[str(account_id)] = Session.model_validate(raw)
            except ValidationError:
                _logger.warning("Skipping malformed session record for account %s", account_id)
        return sessions

    def _save(self, sessions: dict[str, Session]) -> None:
        document = {
            "sessions": {
                account_id: session.model_dump(mode="json", by_alias=True) for account_id, session in sessions.items()
            }
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".sessions-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle, indent=2)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
