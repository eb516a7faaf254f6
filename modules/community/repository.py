"""
Community repository.

Tables: backlog_items, backlog_votes, feedback, feedback_votes. Vote
counts on items are maintained by database triggers.
"""

import re
from typing import Any, Optional

from shared.exceptions import ExternalServiceError
from shared.repository import BaseRepository

from .exceptions import DuplicateVoteError
from .models import BacklogSortField, BacklogType, FeedbackType

BACKLOG_SELECT = "*, profiles:user_id (id, username, avatar_url)"

# Postgres unique_violation, raised when a concurrent vote wins the insert
UNIQUE_VIOLATION = "23505"

# Characters with meaning inside a PostgREST or() filter
_FILTER_SYNTAX = re.compile(r"[,()%*\\]")


class CommunityRepository(BaseRepository[dict]):
    """Repository for backlog items, feedback and their votes."""

    def _insert_vote(self, table: str, row: dict[str, Any], target: str, target_id: str) -> dict[str, Any]:
        try:
            result = self._execute(self._db.table(table).insert(row), f"add {target} vote")
        except ExternalServiceError as e:
            if getattr(e.__cause__, "code", None) == UNIQUE_VIOLATION:
                raise DuplicateVoteError(target, target_id) from e
            raise
        return self._first(result) or row

    # -------------------------------------------------------------------------
    # Backlog
    # -------------------------------------------------------------------------

    def list_backlog(
        self,
        item_type: Optional[BacklogType],
        status: Optional[str],
        search: Optional[str],
        sort_by: BacklogSortField,
        ascending: bool,
        page: int,
        page_size: int,
    ) -> tuple[list[dict[str, Any]], int]:
        """One page of backlog items and the total matching count."""
        query = self._db.table("backlog_items").select(BACKLOG_SELECT, count="exact")
        if item_type is not None:
            query = query.eq("type", item_type.value)
        if status:
            query = query.eq("status", status)
        if search:
            term = _FILTER_SYNTAX.sub(" ", search).strip()
            if term:
                query = query.or_(f"title.ilike.%{term}%,description.ilike.%{term}%")

        start, end = self._page_range(page, page_size)
        query = query.order(sort_by.value, desc=not ascending).range(start, end)

        result = self._execute(query, "load backlog")
        return result.data or [], result.count or 0

    def create_backlog_item(self, user_id: str, item: dict[str, Any]) -> dict[str, Any]:
        row = {**item, "user_id": user_id, "status": "open", "vote_count": 0}
        result = self._execute(self._db.table("backlog_items").insert(row), "create backlog item")
        return self._first(result) or row

    def list_backlog_votes(self, user_id: str) -> list[str]:
        """IDs of the backlog items a user has voted on."""
        query = self._db.table("backlog_votes").select("backlog_item_id").eq("user_id", user_id)
        result = self._execute(query, "load backlog votes")
        return [row["backlog_item_id"] for row in result.data or []]

    def add_backlog_vote(self, user_id: str, item_id: str) -> dict[str, Any]:
        """
        Record a vote.

        Raises:
            DuplicateVoteError: The user already voted on the item
        """
        existing = (
            self._db.table("backlog_votes")
            .select("id")
            .eq("user_id", user_id)
            .eq("backlog_item_id", item_id)
        )
        if self._first(self._execute(existing, "check backlog vote")):
            raise DuplicateVoteError("item", item_id)

        row = {"user_id": user_id, "backlog_item_id": item_id}
        return self._insert_vote("backlog_votes", row, "item", item_id)

    def remove_backlog_vote(self, user_id: str, item_id: str) -> None:
        query = (
            self._db.table("backlog_votes")
            .delete()
            .eq("user_id", user_id)
            .eq("backlog_item_id", item_id)
        )
        self._execute(query, "remove backlog vote")

    # -------------------------------------------------------------------------
    # Feedback
    # -------------------------------------------------------------------------

    def create_feedback(self, user_id: Optional[str], feedback: dict[str, Any]) -> dict[str, Any]:
        row = {**feedback, "user_id": user_id, "status": "open", "priority": "medium"}
        result = self._execute(self._db.table("feedback").insert(row), "create feedback")
        created = self._first(result)
        if created is None:
            raise ExternalServiceError("Failed to create feedback", service="supabase", code="DATABASE_ERROR")
        return created

    def list_feedback(
        self,
        user_id: str,
        status: Optional[str],
        feedback_type: Optional[FeedbackType],
        page: int,
        page_size: int,
    ) -> tuple[list[dict[str, Any]], int]:
        """One page of a user's own feedback, newest first."""
        query = (
            self._db.table("feedback")
            .select("*", count="exact")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
        )
        if status:
            query = query.eq("status", status)
        if feedback_type is not None:
            query = query.eq("type", feedback_type.value)

        start, end = self._page_range(page, page_size)
        result = self._execute(query.range(start, end), "load feedback")
        return result.data or [], result.count or 0

    def add_feedback_vote(self, user_id: str, feedback_id: str) -> dict[str, Any]:
        """
        Record a vote.

        Raises:
            DuplicateVoteError: The user already voted on the feedback
        """
        existing = (
            self._db.table("feedback_votes")
            .select("id")
            .eq("feedback_id", feedback_id)
            .eq("user_id", user_id)
        )
        if self._first(self._execute(existing, "check feedback vote")):
            raise DuplicateVoteError("feedback", feedback_id)

        row = {"feedback_id": feedback_id, "user_id": user_id}
        return self._insert_vote("feedback_votes", row, "feedback", feedback_id)

    def remove_feedback_vote(self, user_id: str, feedback_id: str) -> None:
        query = (
            self._db.table("feedback_votes")
            .delete()
            .eq("feedback_id", feedback_id)
            .eq("user_id", user_id)
        )
        self._execute(query, "remove feedback vote")

    def feedback_vote_count(self, feedback_id: str) -> int:
        query = self._db.table("feedback").select("vote_count").eq("id", feedback_id)
        row = self._first(self._execute(query, "load feedback vote count"))
        return int(row.get("vote_count") or 0) if row else 0

