"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access and the small helpers every table repository needs.
"""

import logging
from typing import Any, Optional, TypeVar, Generic
from supabase import Client

from .exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Query execution that turns client failures into ExternalServiceError
    - Pagination and first-row helpers

    Subclasses implement table-specific data access methods and map rows
    to Pydantic models where the API exposes a typed shape.

    Example:
        class ScoreRepository(BaseRepository[dict]):
            def get_by_id(self, score_id: str) -> Optional[dict]:
                query = self._db.table("player_scores").select("*").eq("id", score_id)
                return self._first(self._execute(query, "load score"))
    """

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

    @staticmethod
    def _execute(query: Any, action: str) -> Any:
        """
        Run a query builder.

        Raises:
            ExternalServiceError: If the request to Supabase fails
        """
        try:
            return query.execute()
        except Exception as e:
            logger.error("Supabase query failed (%s): %s", action, e)
            raise ExternalServiceError(
                f"Failed to {action}",
                service="supabase",
                code="DATABASE_ERROR",
            ) from e

    @staticmethod
    def _first(result: Any) -> Optional[dict[str, Any]]:
        """Return the first row of a query result, or None."""
        if not result.data:
            return None
        return result.data[0]

    @staticmethod
    def _page_range(page: int, page_size: int) -> tuple[int, int]:
        """Inclusive row range for a 1-indexed page."""
        start = (page - 1) * page_size
        return start, start + page_size - 1
