"""Client configuration for pysteamguard."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pysteamguard._constants import (
    ACTIVE_WINDOW_SECONDS,
    API_URL,
    COMMUNITY_URL,
    CONFIRMATION_ACTION_PATH,
    CONFIRMATION_LIST_PATH,
    DESKTOP_USER_AGENT,
    MOBILE_USER_AGENT,
    NEW_DEVICE_DAYS,
    STORE_URL,
)


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class GuardConfig:
    """Client configuration.

    Parameters
    ----------
    community_url : str
        Base URL of the community site hosting the confirmation endpoints.
    store_url : str
        Base URL of the store site hosting device management.
    api_url : str
        Base URL of the Web API used for time alignment.
    confirmation_list_path : str
        Path of the confirmation listing endpoint.
    confirmation_action_path : str
        Path of the confirmation action endpoint.
    mobile_user_agent : str
        User agent sent with confirmation calls.
    desktop_user_agent : str
        User agent sent with store page calls.
    request_timeout : float
        Total per-request timeout in seconds applied to the owned HTTP
        session.  ``0`` disables it.
    active_window_seconds : int
        A device last seen within this window counts as active.
    new_device_days : int
        A device first seen within this many days is flagged new.
    clear_session_on_auth_failure : bool
        Drop the stored session when a call is classified as
        ``LOGIN_REQUIRED``.  Off by default; sessions are then only
        removed by an explicit logout.
    session_file : str or None
        Path of the JSON session file used by :meth:`SteamGuardClient.from_config`.
        ``None`` keeps sessions in memory.
    """

    community_url: str = COMMUNITY_URL
    store_url: str = STORE_URL
    api_url: str = API_URL
    confirmation_list_path: str = CONFIRMATION_LIST_PATH
    confirmation_action_path: str = CONFIRMATION_ACTION_PATH
    mobile_user_agent: str = MOBILE_USER_AGENT
    desktop_user_agent: str = DESKTOP_USER_AGENT
    request_timeout: float = 30.0
    active_window_seconds: int = ACTIVE_WINDOW_SECONDS
    new_device_days: int = NEW_DEVICE_DAYS
    clear_session_on_auth_failure: bool = False
    session_file: str | None = None

    @classmethod
    def from_env(cls, **overrides: Any) -> GuardConfig:
        """Create configuration from environment variables.

        Reads optional ``STEAMGUARD_*`` variables.  Explicit keyword
        arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "STEAMGUARD_COMMUNITY_URL": "community_url",
            "STEAMGUARD_STORE_URL": "store_url",
            "STEAMGUARD_API_URL": "api_url",
            "STEAMGUARD_CONFIRMATION_LIST_PATH": "confirmation_list_path",
            "STEAMGUARD_CONFIRMATION_ACTION_PATH": "confirmation_action_path",
            "STEAMGUARD_MOBILE_USER_AGENT": "mobile_user_agent",
            "STEAMGUARD_DESKTOP_USER_AGENT": "desktop_user_agent",
            "STEAMGUARD_SESSION_FILE": "session_file",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = val

        timeout_env = env.get("STEAMGUARD_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = float(timeout_env)

        window_env = env.get("STEAMGUARD_ACTIVE_WINDOW_SECONDS")
        if window_env is not None and "active_window_seconds" not in overrides:
            config_kwargs["active_window_seconds"] = int(window_env)

        days_env = env.get("STEAMGUARD_NEW_DEVICE_DAYS")
        if days_env is not None and "new_device_days" not in overrides:
            config_kwargs["new_device_days"] = int(days_env)

        if "clear_session_on_auth_failure" not in overrides:
            config_kwargs["clear_session_on_auth_failure"] = _env_bool(
                env.get("STEAMGUARD_CLEAR_SESSION_ON_AUTH_FAILURE"),
                False,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
