"""
Leaderboard repository.

Reads verified rows of player_scores joined with the player's profile,
and inserts new submissions.
"""

from datetime import datetime
from typing import Any, Optional

from shared.repository import BaseRepository

from .models import GameMode, LeaderboardEntry, LeaderboardResponse, SortDirection, SortField

TABLE = "player_scores"


class LeaderboardRepository(BaseRepository[LeaderboardEntry]):
    """Repository for player_scores."""

    def get_leaderboard(
        self,
        mode: GameMode,
        cutoff: Optional[datetime],
        sort_field: SortField,
        sort_dir: SortDirection,
        page: int,
        page_size: int,
    ) -> LeaderboardResponse:
        """
        One page of verified scores with 1-based ranks.

        The global mode spans every game mode.
        """
        query = (
            self._db.table(TABLE)
            .select("*, profile:profiles(*)", count="exact")
            .eq("is_verified", True)
        )
        if cutoff is not None:
            query = query.gte("submitted_at", cutoff.isoformat())
        if mode is not GameMode.GLOBAL:
            query = query.eq("mode", mode.value)

        start, end = self._page_range(page, page_size)
        query = query.order(sort_field.value, desc=sort_dir is SortDirection.DESC).range(start, end)

        result = self._execute(query, "load leaderboard")
        rows = result.data or []

        return LeaderboardResponse(
            data=[
                LeaderboardEntry.model_validate({**row, "rank": start + idx + 1})
                for idx, row in enumerate(rows)
            ],
            total=result.count or 0,
            page=page,
            page_size=page_size,
        )

    def insert_score(self, user_id: str, record: dict[str, Any]) -> dict[str, Any]:
        """Store a submission for a user. Submissions are never pre-verified."""
        row = {**record, "user_id": user_id, "is_verified": False}
        result = self._execute(self._db.table(TABLE).insert(row), "store score")
        return self._first(result) or row
