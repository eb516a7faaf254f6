"""
Rate limiting data models.
"""

from dataclasses import dataclass
from typing import Optional
from pydantic import BaseModel, Field


@dataclass
class RateLimitEntry:
    """
    Attempt counter for one identifier.

    Mutable; owned by the rate-limit store. All timestamps are epoch
    milliseconds.
    """

    count: int
    reset_at: int
    first_attempt: int


class RateLimitResult(BaseModel):
    """Outcome of a rate-limit check."""

    allowed: bool
    remaining_attempts: int = Field(..., ge=0)
    reset_at: int = Field(..., description="Window end, epoch milliseconds")
    retry_after: Optional[int] = Field(
        None, description="Seconds until the window resets"
    )

    model_config = {"frozen": True}


class RateLimitPolicy(BaseModel):
    """A named (max_attempts, window) pair applied to one endpoint class."""

    name: str
    max_attempts: int = Field(..., ge=1)
    window_ms: int = Field(..., ge=1)

    model_config = {"frozen": True}
