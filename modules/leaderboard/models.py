"""
Leaderboard data models.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator


class GameMode(str, Enum):
    SPEEDRUN = "speedrun"
    SURVIVAL = "survival"
    DISCOVERY = "discovery"
    BOSS_RUSH = "boss_rush"
    GLOBAL = "global"


class Platform(str, Enum):
    PC = "PC"
    MAC = "Mac"
    LINUX = "Linux"
    PS = "PS"
    XBOX = "Xbox"
    SWITCH = "Switch"


class LeaderboardWindow(str, Enum):
    """Time window of a leaderboard query."""

    TODAY = "today"
    WEEK = "7d"
    MONTH = "30d"
    QUARTER = "90d"
    ALL = "all"

    def cutoff(self, now: datetime) -> Optional[datetime]:
        """Earliest submission time included, None for all time."""
        days = {
            LeaderboardWindow.TODAY: 1,
            LeaderboardWindow.WEEK: 7,
            LeaderboardWindow.MONTH: 30,
            LeaderboardWindow.QUARTER: 90,
        }.get(self)
        return now - timedelta(days=days) if days else None


class SortField(str, Enum):
    """Columns the leaderboard may be ordered by."""

    SCORE = "score"
    SUBMITTED_AT = "submitted_at"
    LEVEL = "level"
    TIME_SECONDS = "time_seconds"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ScoreSubmission(BaseModel):
    """Score posted by the game client or the website."""

    score: int = Field(..., gt=0)
    mode: GameMode
    platform: Platform
    level: int = Field(default=1, ge=1)
    time_seconds: Optional[int] = Field(default=None, ge=0)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("metadata", mode="before")
    @classmethod
    def default_metadata(cls, v: Any) -> Any:
        return v if v is not None else {}


class LeaderboardEntry(BaseModel):
    """A score row with its rank and player profile."""

    id: Optional[str] = None
    user_id: Optional[str] = None
    score: int
    mode: str
    platform: Optional[str] = None
    level: Optional[int] = None
    time_seconds: Optional[int] = None
    is_verified: bool = False
    submitted_at: Optional[datetime] = None
    metadata: Optional[dict[str, Any]] = None
    profile: Optional[dict[str, Any]] = None
    rank: int

    model_config = {"extra": "ignore"}


class LeaderboardResponse(BaseModel):
    """One page of the leaderboard."""

    data: list[LeaderboardEntry]
    total: int
    page: int
    page_size: int = Field(..., serialization_alias="pageSize")


class ScoreSubmissionResponse(BaseModel):
    success: bool = True
    score: dict[str, Any]
