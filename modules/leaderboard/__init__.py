"""
Leaderboard module.

Verified player scores by time window and game mode, and authenticated
score submission (always stored unverified).
"""

from .models import (
    GameMode,
    Platform,
    LeaderboardWindow,
    SortField,
    ScoreSubmission,
    LeaderboardEntry,
    LeaderboardResponse,
)

__all__ = [
    "GameMode",
    "Platform",
    "LeaderboardWindow",
    "SortField",
    "ScoreSubmission",
    "LeaderboardEntry",
    "LeaderboardResponse",
]
