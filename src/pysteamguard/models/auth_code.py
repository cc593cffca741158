"""One-time code model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AuthCode(BaseModel):
    """A generated one-time code.

    Parameters
    ----------
    code : str
        Five-character code.
    seconds_remaining : int
        Seconds until the code rotates (1-30).
    time : int
        Remote-aligned epoch seconds the code was generated for.
    """

    model_config = ConfigDict(frozen=True)

    code: str = Field(min_length=5, max_length=5)
    seconds_remaining: int = Field(ge=1, le=30)
    time: int
