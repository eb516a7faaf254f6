"""
Inquiry repository.

Tables: career_applications, investor_inquiries.
"""

from typing import Any, Optional

from shared.repository import BaseRepository


class InquiryRepository(BaseRepository[dict]):
    """Repository for website contact submissions."""

    def _insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        result = self._execute(self._db.table(table).insert(row), f"store {table}")
        return self._first(result) or row

    def _list(
        self,
        table: str,
        filters: dict[str, Optional[str]],
        limit: int,
        offset: int,
    ) -> tuple[list[dict[str, Any]], int]:
        query = self._db.table(table).select("*", count="exact").order("created_at", desc=True)
        for column, value in filters.items():
            if value:
                query = query.eq(column, value)
        result = self._execute(query.range(offset, offset + limit - 1), f"load {table}")
        return result.data or [], result.count or 0

    def create_application(self, row: dict[str, Any]) -> dict[str, Any]:
        return self._insert("career_applications", row)

    def create_investor_inquiry(self, row: dict[str, Any]) -> dict[str, Any]:
        return self._insert("investor_inquiries", row)

    def list_applications(
        self,
        status: Optional[str],
        position: Optional[str],
        limit: int,
        offset: int,
    ) -> tuple[list[dict[str, Any]], int]:
        return self._list("career_applications", {"status": status, "position": position}, limit, offset)

    def list_investor_inquiries(
        self,
        status: Optional[str],
        investment_range: Optional[str],
        limit: int,
        offset: int,
    ) -> tuple[list[dict[str, Any]], int]:
        return self._list(
            "investor_inquiries",
            {"status": status, "investment_range": investment_range},
            limit,
            offset,
        )
