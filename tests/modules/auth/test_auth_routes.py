"""Tests for the authentication API endpoints."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock
from urllib.parse import parse_qs, urlparse

import pytest
from fastapi import BackgroundTasks

from modules.auth.models import AuthUser, EmailRequest
from modules.auth.routes import forgot_password, request_magic_link
from modules.ratelimit import RateLimiter
from shared.models import Role

USER = AuthUser(id="6f1c2a4e-1d2b-4c3d-9e8f-0a1b2c3d4e5f", email="pilot@example.com")
STRONG = "Nebula#Drift42x"
RESET_MESSAGE = "If an account exists with this email, a password reset link has been sent."


def future(minutes: int = 10) -> str:
    return (datetime.now(timezone.utc) + timedelta(minutes=minutes)).isoformat()


def magic_row(expires_at: str) -> dict:
    return {
        "token": "m" * 64,
        "token_type": "magic_link",
        "user_id": USER.id,
        "email": USER.email,
        "expires_at": expires_at,
    }


class TestLogin:
    """Tests for POST /api/auth/login."""

    def test_success_sets_session_cookie(self, client, container):
        container.user_store.authenticate.return_value = USER
        container.user_store.get_profile_role.return_value = Role.STAFF

        response = client.post("/api/auth/login", json={"email": "Pilot@Example.com ", "password": "x"})

        assert response.status_code == 200
        assert response.json()["user"] == {"id": USER.id, "email": USER.email, "role": "staff"}
        container.user_store.authenticate.assert_awaited_once_with("pilot@example.com", "x")
        session = container.session_codec.parse(response.cookies.get("etu_session"))
        assert session.user_id == USER.id
        assert session.role is Role.STAFF

    def test_invalid_credentials(self, client, container):
        container.user_store.authenticate.return_value = None
        response = client.post("/api/auth/login", json={"email": USER.email, "password": "bad"})
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid email or password"
        assert "etu_session" not in response.cookies

    def test_missing_fields(self, client):
        response = client.post("/api/auth/login", json={"email": USER.email})
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation Error"
        assert body["details"][0]["field"] == "password"

    def test_rate_limited_after_five_failures(self, client, container):
        """The sixth attempt in the window gets 429 with retry headers."""
        container.user_store.authenticate.return_value = None
        for _ in range(5):
            assert client.post("/api/auth/login", json={"email": USER.email, "password": "bad"}).status_code == 401

        response = client.post("/api/auth/login", json={"email": USER.email, "password": "bad"})

        assert response.status_code == 429
        body = response.json()
        assert body["error"] == "Too many login attempts. Please try again later."
        assert body["retryAfter"] > 0
        assert response.headers["Retry-After"] == str(body["retryAfter"])
        assert response.headers["X-RateLimit-Limit"] == "5"
        assert response.headers["X-RateLimit-Remaining"] == "0"
        assert response.headers["X-RateLimit-Reset"].endswith("Z")

    def test_success_resets_counter(self, client, container):
        container.user_store.authenticate.return_value = None
        for _ in range(4):
            client.post("/api/auth/login", json={"email": USER.email, "password": "bad"})
        container.user_store.authenticate.return_value = USER
        container.user_store.get_profile_role.return_value = Role.USER
        assert client.post("/api/auth/login", json={"email": USER.email, "password": "good"}).status_code == 200

        container.user_store.authenticate.return_value = None
        for _ in range(5):
            assert client.post("/api/auth/login", json={"email": USER.email, "password": "bad"}).status_code == 401


class TestSignupAndLogout:
    """Tests for signup and logout."""

    def test_signup_weak_password(self, client, container):
        response = client.post("/api/auth/signup", json={"email": "new@example.com", "password": "weak"})
        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "WEAK_PASSWORD"
        assert body["details"]["errors"]
        container.user_store.create_user.assert_not_called()

    def test_signup_invalid_email(self, client):
        response = client.post("/api/auth/signup", json={"email": "not-an-email", "password": STRONG})
        assert response.status_code == 400

    def test_signup_success(self, client, container):
        container.user_store.create_user.return_value = USER
        container.user_store.get_profile_role.return_value = Role.USER

        response = client.post(
            "/api/auth/signup",
            json={"email": USER.email, "password": STRONG, "username": "nova"},
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Account created successfully"
        assert response.cookies.get("etu_session")

    def test_signup_rate_limited(self, client, container):
        for _ in range(3):
            client.post("/api/auth/signup", json={"email": "x@example.com", "password": "weak"})
        response = client.post("/api/auth/signup", json={"email": "x@example.com", "password": "weak"})
        assert response.status_code == 429

    def test_logout_expires_cookie(self, client, sign_in):
        sign_in()
        response = client.post("/api/auth/logout")
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Logged out successfully"}
        assert "Max-Age=0" in response.headers["set-cookie"]


class TestSessionAndCSRF:
    """Tests for GET /api/auth/session and GET /api/csrf-token."""

    def test_session_without_cookie(self, client):
        assert client.get("/api/auth/session").json() == {"authenticated": False, "user": None}

    def test_session_with_live_user(self, client, container, sign_in):
        sign_in(role=Role.ADMIN)
        container.user_store.get_user_by_id.return_value = {
            "id": USER.id,
            "username": "nova",
            "steam_id": "76561198000000000",
        }

        body = client.get("/api/auth/session").json()

        assert body["authenticated"] is True
        assert body["user"]["username"] == "nova"
        assert body["user"]["role"] == "admin"
        assert body["user"]["steam_id"] == "76561198000000000"

    def test_session_for_deleted_user(self, client, container, sign_in):
        sign_in()
        container.user_store.get_user_by_id.return_value = None
        assert client.get("/api/auth/session").json()["authenticated"] is False

    def test_tampered_cookie(self, client):
        client.cookies.set("etu_session", "not.a.jwt")
        assert client.get("/api/auth/session").json()["authenticated"] is False

    def test_csrf_token_requires_session(self, client):
        response = client.get("/api/csrf-token")
        assert response.status_code == 401
        assert response.json()["error"] == "Unauthorized - Please log in"

    def test_csrf_token_matches_session(self, client, sign_in):
        session = sign_in()
        assert client.get("/api/csrf-token").json() == {"csrfToken": session.csrf_token}


class TestPasswordReset:
    """Tests for the password reset endpoints."""

    def test_forgot_password_is_uniform(self, client, container):
        """Known and unknown emails get the same answer."""
        container.user_store.find_user_by_email.return_value = None
        unknown = client.post("/api/auth/forgot-password", json={"email": "ghost@example.com"})

        container.user_store.find_user_by_email.return_value = USER
        known = client.post("/api/auth/forgot-password", json={"email": USER.email})

        assert unknown.status_code == known.status_code == 200
        assert unknown.json() == known.json() == {"success": True, "message": RESET_MESSAGE}
        container.email.send_password_reset_email.assert_awaited_once()

    def test_forgot_password_invalid_email(self, client):
        response = client.post("/api/auth/forgot-password", json={"email": "nope"})
        assert response.status_code == 400

    def test_forgot_password_rate_limited(self, client, container):
        container.user_store.find_user_by_email.return_value = None
        for _ in range(3):
            client.post("/api/auth/forgot-password", json={"email": "a@example.com"})
        response = client.post("/api/auth/forgot-password", json={"email": "a@example.com"})
        assert response.status_code == 429

    def test_verify_unknown_token(self, client, container):
        container.token_store.find_token.return_value = None
        response = client.get("/api/auth/reset-password", params={"token": "nope"})
        assert response.json() == {"valid": False, "error": "Invalid token"}

    def test_verify_valid_token(self, client, container):
        container.token_store.find_token.return_value = {"expires_at": future(), "used_at": None}
        body = client.get("/api/auth/reset-password", params={"token": "t"}).json()
        assert body["valid"] is True
        assert "expiresAt" in body

    def test_reset_password(self, client, container):
        container.token_store.find_active_token.return_value = {
            "token": "r" * 64,
            "token_type": "password_reset",
            "user_id": USER.id,
            "email": USER.email,
            "expires_at": future(),
        }
        response = client.post("/api/auth/reset-password", json={"token": "r" * 64, "password": STRONG})
        assert response.status_code == 200
        container.user_store.update_password.assert_awaited_once_with(USER.id, STRONG)

    def test_reset_password_unknown_token(self, client, container):
        container.token_store.find_active_token.return_value = None
        response = client.post("/api/auth/reset-password", json={"token": "x", "password": STRONG})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid or expired reset token"


class TestEmailDeferred:
    """Reset and magic-link handlers answer before any lookup or email happens."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("handler,method", [
        (forgot_password, "request_password_reset"),
        (request_magic_link, "request_magic_link"),
    ])
    async def test_work_is_scheduled_not_awaited(self, handler, method):
        request = MagicMock()
        request.headers = {"x-forwarded-for": "203.0.113.7", "user-agent": "pytest"}
        service = AsyncMock()
        tasks = BackgroundTasks()

        response = await handler(
            body=EmailRequest(email=USER.email),
            request=request,
            background_tasks=tasks,
            service=service,
            limiter=RateLimiter(),
        )

        assert response.success is True
        getattr(service, method).assert_not_awaited()
        assert len(tasks.tasks) == 1
        task = tasks.tasks[0]
        assert task.func is getattr(service, method)
        assert task.args[0] == USER.email
        assert task.args[1].ip_address == "203.0.113.7"


class TestMagicLink:
    """Tests for magic-link request and callback."""

    def test_request_is_uniform(self, client, container):
        container.user_store.find_user_by_email.return_value = None
        response = client.post("/api/auth/magic-link", json={"email": "ghost@example.com"})
        assert response.status_code == 200
        assert "magic sign-in link" in response.json()["message"]

    def test_callback_without_token(self, client):
        response = client.get("/api/auth/magic-link/callback", follow_redirects=False)
        assert response.status_code == 307
        assert response.headers["location"] == "https://etu.test/login?error=invalid_token"

    def test_callback_signs_in(self, client, container):
        container.token_store.find_active_token.return_value = magic_row(future())
        container.user_store.get_auth_user.return_value = USER
        container.user_store.get_profile_role.return_value = Role.USER

        response = client.get(
            "/api/auth/magic-link/callback",
            params={"token": "m" * 64, "redirect": "/ship-designer"},
            follow_redirects=False,
        )

        assert response.status_code == 307
        assert response.headers["location"] == "https://etu.test/ship-designer"
        assert container.session_codec.parse(response.cookies.get("etu_session")).user_id == USER.id
        container.token_store.mark_used.assert_called_once_with("m" * 64)

    @pytest.mark.parametrize("target", ["https://evil.example", "//evil.example", "/\\evil.example"])
    def test_callback_ignores_external_redirects(self, client, container, target):
        container.token_store.find_active_token.return_value = magic_row(future())
        container.user_store.get_auth_user.return_value = USER
        container.user_store.get_profile_role.return_value = Role.USER

        response = client.get(
            "/api/auth/magic-link/callback",
            params={"token": "m" * 64, "redirect": target},
            follow_redirects=False,
        )

        assert response.headers["location"] == "https://etu.test/dashboard"

    def test_callback_expired(self, client, container):
        container.token_store.find_active_token.return_value = magic_row(future(-1))
        response = client.get(
            "/api/auth/magic-link/callback", params={"token": "m" * 64}, follow_redirects=False
        )
        assert parse_qs(urlparse(response.headers["location"]).query) == {"error": ["expired_token"]}

    def test_callback_deleted_account(self, client, container):
        container.token_store.find_active_token.return_value = magic_row(future())
        container.user_store.get_auth_user.return_value = None
        response = client.get(
            "/api/auth/magic-link/callback", params={"token": "m" * 64}, follow_redirects=False
        )
        assert response.headers["location"].endswith("error=user_not_found")


class TestOAuthCallback:
    """Tests for GET /api/auth/callback."""

    def test_without_code(self, client):
        response = client.get("/api/auth/callback", follow_redirects=False)
        assert response.headers["location"] == "https://etu.test/login"

    def test_failed_exchange(self, client, container):
        container.user_store.exchange_code_for_session.return_value = None
        response = client.get("/api/auth/callback", params={"code": "abc"}, follow_redirects=False)
        assert response.headers["location"] == "https://etu.test/login?error=auth_failed"

    def test_success(self, client, container):
        container.user_store.exchange_code_for_session.return_value = USER
        container.user_store.get_profile_role.return_value = Role.USER
        response = client.get("/api/auth/callback", params={"code": "abc"}, follow_redirects=False)
        assert response.headers["location"] == "https://etu.test/dashboard"
        assert response.cookies.get("etu_session")
