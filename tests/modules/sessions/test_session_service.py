"""Tests for session freshness checks."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from modules.sessions import Session, validate_session


@pytest.fixture
def session() -> Session:
    return Session(
        user_id="user-1",
        email="pilot@example.com",
        csrf_token="a" * 64,
        issued_at=datetime.now(timezone.utc),
    )


class TestValidateSession:
    """Tests for validate_session."""

    @pytest.mark.asyncio
    async def test_no_session(self):
        store = AsyncMock()
        result = await validate_session(None, store)
        assert result.valid is False
        store.get_user_by_id.assert_not_called()

    @pytest.mark.asyncio
    async def test_live_user(self, session):
        store = AsyncMock()
        store.get_user_by_id.return_value = {"id": "user-1", "username": "nova"}
        result = await validate_session(session, store)
        assert result.valid is True
        assert result.user["username"] == "nova"

    @pytest.mark.asyncio
    async def test_deleted_user(self, session):
        store = AsyncMock()
        store.get_user_by_id.return_value = None
        assert (await validate_session(session, store)).valid is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("flag", ["is_disabled", "banned"])
    async def test_disabled_user(self, session, flag):
        store = AsyncMock()
        store.get_user_by_id.return_value = {"id": "user-1", flag: True}
        assert (await validate_session(session, store)).valid is False

    @pytest.mark.asyncio
    async def test_store_failure_is_invalid(self, session):
        """Lookup errors fail closed without raising."""
        store = AsyncMock()
        store.get_user_by_id.side_effect = RuntimeError("connection reset")
        assert (await validate_session(session, store)).valid is False
