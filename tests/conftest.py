"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules:
settings with test secrets, a service container whose stores are mocks, a
TestClient, and helpers for signing in with a session cookie or a bearer token.
"""

import pytest
from datetime import datetime, timezone, timedelta
from typing import Any, Optional
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient
from jose import jwt

from api.dependencies import ServiceContainer, reset_container, set_container
from modules.sessions import Session
from shared.config import Settings
from shared.models import Role


# Test secrets (only for testing)
TEST_SESSION_SECRET = "test-session-secret-for-testing-only"
TEST_JWT_SECRET = "test-secret-key-for-testing-only"

TEST_USER_ID = "6f1c2a4e-1d2b-4c3d-9e8f-0a1b2c3d4e5f"
TEST_STAFF_ID = "0b9d8c7e-6f5a-4b3c-8d2e-1f0a9b8c7d6e"

QUERY_METHODS = (
    "select", "insert", "update", "delete",
    "eq", "neq", "gte", "is_", "or_", "order", "range", "limit",
)


def create_test_token(
    user_id: str = TEST_USER_ID,
    email: str = "pilot@example.com",
    expired: bool = False,
    role: Optional[str] = None,
    secret: str = TEST_JWT_SECRET,
) -> str:
    """
    Create a Supabase-style access token for bearer authentication.

    Args:
        user_id: User ID to include in the token
        email: Email to include in the token
        expired: If True, creates an expired token
        role: Optional app_metadata role
        secret: Signing secret

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload: dict[str, Any] = {
        "sub": user_id,
        "email": email,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
    }
    if role:
        payload["app_metadata"] = {"role": role}
    return jwt.encode(payload, secret, algorithm="HS256")


def make_query(data: Optional[list[dict[str, Any]]] = None, count: Optional[int] = None) -> MagicMock:
    """A Supabase query builder mock whose builder methods chain to itself."""
    query = MagicMock()
    for name in QUERY_METHODS:
        getattr(query, name).return_value = query
    query.execute.return_value = MagicMock(data=data if data is not None else [], count=count)
    return query


@pytest.fixture
def settings() -> Settings:
    """Settings with test secrets and no external services."""
    return Settings(
        _env_file=None,
        session_secret=TEST_SESSION_SECRET,
        supabase_jwt_secret=TEST_JWT_SECRET,
        cookie_secure=False,
        site_url="https://etu.test",
        resend_api_key="",
        steam_web_api_key="",
    )


@pytest.fixture
def container(settings: Settings):
    """Service container with mocked stores, installed for the app."""
    container = ServiceContainer(settings)
    container._user_store = AsyncMock()
    container._token_store = MagicMock()
    container._email = AsyncMock()

    steam = MagicMock()
    steam.verify_assertion = AsyncMock()
    steam.fetch_player_summary = AsyncMock(return_value=None)
    container._steam = steam

    container._leaderboard = MagicMock()
    container._community = MagicMock()
    container._profiles = MagicMock()
    container._inquiries = MagicMock()
    container._ships = MagicMock()
    container._admin_stats = MagicMock()

    set_container(container)
    yield container
    reset_container()


@pytest.fixture
def client(container: ServiceContainer) -> TestClient:
    """Fresh TestClient (and cookie jar) per test."""
    from api.app import app

    return TestClient(app)


@pytest.fixture
def sign_in(client: TestClient, container: ServiceContainer):
    """Put a session cookie on the client. Returns the parsed session."""

    def _sign_in(
        user_id: str = TEST_USER_ID,
        email: str = "pilot@example.com",
        role: Role = Role.USER,
    ) -> Session:
        codec = container.session_codec
        value = codec.create(user_id, email, role)
        client.cookies.set(codec.cookie_name, value)
        return codec.parse(value)

    return _sign_in


@pytest.fixture
def csrf_headers():
    """Headers carrying a session's CSRF token."""

    def _headers(session: Session) -> dict[str, str]:
        return {"x-csrf-token": session.csrf_token}

    return _headers


@pytest.fixture
def bearer_headers():
    """Authorization headers for a bearer token."""

    def _headers(**kwargs: Any) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_test_token(**kwargs)}"}

    return _headers


@pytest.fixture
def query_factory():
    """Factory for chained Supabase query mocks."""
    return make_query
