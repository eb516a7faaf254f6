"""
Profile repository.
"""

from typing import Any, Optional

from shared.repository import BaseRepository

PUBLIC_COLUMNS = (
    "id, username, avatar_url, faction_choice, created_at, level, xp, "
    "total_kills, total_deaths, total_wins, total_losses, total_playtime, "
    "highest_score, ship_class, is_public, role"
)


class ProfileRepository(BaseRepository[dict]):
    """Repository for the profiles table."""

    def get_profile(self, user_id: str) -> Optional[dict[str, Any]]:
        query = self._db.table("profiles").select("*").eq("id", user_id)
        return self._first(self._execute(query, "load profile"))

    def get_public_profile(self, user_id: str) -> Optional[dict[str, Any]]:
        query = self._db.table("profiles").select(PUBLIC_COLUMNS).eq("id", user_id)
        return self._first(self._execute(query, "load profile"))

    def update_profile(self, user_id: str, changes: dict[str, Any]) -> Optional[dict[str, Any]]:
        query = self._db.table("profiles").update(changes).eq("id", user_id)
        return self._first(self._execute(query, "update profile"))
