"""
Ship design repository.
"""

from datetime import datetime, timezone
from typing import Any

from shared.repository import BaseRepository

TABLE = "ship_designs"


class ShipRepository(BaseRepository[dict]):
    """Repository for ship_designs."""

    def save_ship(self, user_id: str, ship_data: dict[str, Any]) -> tuple[dict[str, Any], bool]:
        """
        Insert or update the user's design with this ship name.

        Returns:
            (row, created) where created is False for an update
        """
        name = ship_data["name"]
        existing_query = (
            self._db.table(TABLE)
            .select("id")
            .eq("user_id", user_id)
            .eq("ship_name", name)
        )
        existing = self._first(self._execute(existing_query, "look up ship"))

        if existing:
            query = (
                self._db.table(TABLE)
                .update({
                    "ship_data": ship_data,
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                })
                .eq("id", existing["id"])
            )
            result = self._execute(query, "update ship")
            return self._first(result) or {**existing, "ship_data": ship_data}, False

        row = {"user_id": user_id, "ship_name": name, "ship_data": ship_data}
        result = self._execute(self._db.table(TABLE).insert(row), "save ship")
        return self._first(result) or row, True
