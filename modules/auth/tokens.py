"""
Auth token repository.

Single-use password reset and magic-link tokens live in the auth_tokens
table. At most one unconsumed token exists per user and type: issuing a
new one consumes the others first, and migration 001 backs this with a
partial unique index.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Optional

from supabase import Client

from shared.repository import BaseRepository

from .models import TokenType

TABLE = "auth_tokens"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuthTokenRepository(BaseRepository[dict]):
    """
    Repository for the auth_tokens table.

    Consumption is recorded by setting used_at; rows are never deleted.
    """

    def __init__(self, db: Client, clock: Callable[[], datetime] = _utcnow) -> None:
        super().__init__(db)
        self._clock = clock

    def insert_token(self, record: dict[str, Any]) -> dict[str, Any]:
        result = self._execute(self._db.table(TABLE).insert(record), "store auth token")
        return self._first(result) or record

    def find_active_token(self, token: str, token_type: TokenType) -> Optional[dict[str, Any]]:
        query = (
            self._db.table(TABLE)
            .select("*")
            .eq("token", token)
            .eq("token_type", token_type.value)
            .is_("used_at", "null")
        )
        return self._first(self._execute(query, "look up auth token"))

    def find_token(self, token: str, token_type: TokenType) -> Optional[dict[str, Any]]:
        query = (
            self._db.table(TABLE)
            .select("expires_at, used_at, user_id, token_type")
            .eq("token", token)
            .eq("token_type", token_type.value)
        )
        return self._first(self._execute(query, "look up auth token"))

    def mark_used(self, token: str) -> bool:
        """Consume an unused token. False when it was already consumed."""
        query = (
            self._db.table(TABLE)
            .update({"used_at": self._clock().isoformat()})
            .eq("token", token)
            .is_("used_at", "null")
        )
        result = self._execute(query, "consume auth token")
        return bool(result.data)

    def invalidate_all_active(
        self,
        user_id: str,
        token_type: TokenType,
        except_token: Optional[str] = None,
    ) -> None:
        query = (
            self._db.table(TABLE)
            .update({"used_at": self._clock().isoformat()})
            .eq("user_id", user_id)
            .eq("token_type", token_type.value)
            .is_("used_at", "null")
        )
        if except_token:
            query = query.neq("token", except_token)
        self._execute(query, "invalidate auth tokens")
