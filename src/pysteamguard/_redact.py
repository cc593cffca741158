"""Masking of secrets in debug output.

Request parameters and form bodies carry the confirmation signature,
per-item action keys and session cookies.  Anything logged at DEBUG goes
through :func:`redact_for_log` first.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

REDACTED = "<redacted>"

_SECRET_NAMES: frozenset[str] = frozenset(
    {
        "password",
        "shared_secret",
        "identity_secret",
        "steamloginsecure",
        "sessionid",
        "oauth_token",
        "oauthtoken",
        "token",
        "authorization",
        "cookie",
        # signature and per-item action keys
        "k",
        "nonce",
        "ck[]",
    }
)

_MAX_DEPTH = 20


def is_secret_name(name: Any) -> bool:
    return str(name).lower() in _SECRET_NAMES


def _is_pair_list(value: Sequence[Any]) -> bool:
    return bool(value) and all(isinstance(item, tuple) and len(item) == 2 for item in value)


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Copy *value* with secret fields masked and long strings shortened.

    Mappings are masked by key, ``(name, value)`` pair lists (query
    strings and form bodies) by name.
    """
    if _depth > _MAX_DEPTH:
        return "<max-depth>"

    def _child(item: Any) -> Any:
        return redact_for_log(item, max_string=max_string, _depth=_depth + 1)

    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"
    if isinstance(value, Mapping):
        return {str(k): REDACTED if is_secret_name(k) else _child(v) for k, v in value.items()}
    if isinstance(value, Sequence):
        if _is_pair_list(value):
            return [(name, REDACTED if is_secret_name(name) else _child(item)) for name, item in value]
        return [_child(item) for item in value]
    return repr(value)
