"""Signed request value object."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class SignedRequest(BaseModel):
    """Time, tag and signature for a single confirmation call.

    Derived per call; a signature computed for one tag is rejected for
    any other.
    """

    model_config = ConfigDict(frozen=True)

    time: int
    tag: str
    signature: str
