"""
Admin statistics repository.
"""

from typing import Any

from shared.repository import BaseRepository

COUNTED_TABLES = ("profiles", "feedback", "backlog_items", "player_scores")


class AdminStatsRepository(BaseRepository[dict]):
    """Read-only aggregate queries for the admin dashboard."""

    def count_rows(self, table: str) -> int:
        query = self._db.table(table).select("id", count="exact").limit(1)
        return self._execute(query, f"count {table}").count or 0

    def counts(self) -> dict[str, int]:
        return {table: self.count_rows(table) for table in COUNTED_TABLES}

    def recent_feedback(self, limit: int = 5) -> list[dict[str, Any]]:
        query = (
            self._db.table("feedback")
            .select("id, type, title, created_at")
            .order("created_at", desc=True)
            .limit(limit)
        )
        return self._execute(query, "load recent feedback").data or []
