"""Tests for AuthService."""

import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from modules.auth.exceptions import (
    AccountNotFoundError,
    ExpiredAuthTokenError,
    InvalidAuthTokenError,
    InvalidCredentialsError,
    WeakPasswordError,
)
from modules.auth.models import AuthUser, TokenIssue, TokenType
from modules.auth.service import AuthService, generate_auth_token
from shared.exceptions import ExternalServiceError
from shared.models import Role

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
USER = AuthUser(id="user-1", email="pilot@example.com")
ISSUE = TokenIssue(ip_address="203.0.113.7", user_agent="pytest")
STRONG = "Nebula#Drift42x"


def token_row(token_type: TokenType, expires_at: datetime, used_at=None) -> dict:
    return {
        "token": "t" * 64,
        "token_type": token_type.value,
        "user_id": USER.id,
        "email": USER.email,
        "expires_at": expires_at.isoformat(),
        "used_at": used_at,
    }


@pytest.fixture
def users():
    users = AsyncMock()
    users.get_profile_role.return_value = Role.USER
    return users


@pytest.fixture
def tokens():
    return MagicMock()


@pytest.fixture
def email():
    email = AsyncMock()
    email.send_password_reset_email.return_value = True
    email.send_magic_link_email.return_value = True
    return email


@pytest.fixture
def service(users, tokens, email) -> AuthService:
    return AuthService(
        users=users,
        tokens=tokens,
        email=email,
        password_reset_ttl=3600,
        magic_link_ttl=900,
        clock=lambda: NOW,
    )


class TestGenerateToken:

    def test_tokens_are_64_hex_and_unique(self):
        tokens = {generate_auth_token() for _ in range(20)}
        assert len(tokens) == 20
        assert all(len(t) == 64 and int(t, 16) >= 0 for t in tokens)


class TestLoginAndSignup:
    """Tests for password login and signup."""

    @pytest.mark.asyncio
    async def test_login_success(self, service, users):
        users.authenticate.return_value = USER
        users.get_profile_role.return_value = Role.STAFF

        user, role = await service.login(USER.email, "whatever")

        assert user == USER
        assert role is Role.STAFF

    @pytest.mark.asyncio
    async def test_login_bad_credentials(self, service, users):
        """Unknown email and wrong password look the same."""
        users.authenticate.return_value = None
        with pytest.raises(InvalidCredentialsError) as exc_info:
            await service.login(USER.email, "wrong")
        assert exc_info.value.message == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_signup_rejects_weak_password(self, service, users):
        """The policy runs before the account is created."""
        with pytest.raises(WeakPasswordError) as exc_info:
            await service.signup("new@example.com", "weak")
        assert exc_info.value.details["errors"]
        users.create_user.assert_not_called()

    @pytest.mark.asyncio
    async def test_signup_success(self, service, users):
        users.create_user.return_value = USER
        user, role = await service.signup(USER.email, STRONG, "nova")
        users.create_user.assert_awaited_once_with(USER.email, STRONG, "nova")
        assert user == USER
        assert role is Role.USER


class TestIssueTokens:
    """Tests for password reset and magic-link requests."""

    @pytest.mark.asyncio
    async def test_reset_for_unknown_email_does_nothing(self, service, users, tokens, email):
        users.find_user_by_email.return_value = None
        await service.request_password_reset("ghost@example.com", ISSUE)
        tokens.insert_token.assert_not_called()
        email.send_password_reset_email.assert_not_called()

    @pytest.mark.asyncio
    async def test_reset_invalidates_then_inserts(self, service, users, tokens, email):
        """Older active tokens are consumed before a new one is stored."""
        users.find_user_by_email.return_value = USER
        calls = []
        tokens.invalidate_all_active.side_effect = lambda *a, **k: calls.append("invalidate")
        tokens.insert_token.side_effect = lambda row: calls.append("insert") or row

        await service.request_password_reset(USER.email, ISSUE)

        assert calls == ["invalidate", "insert"]
        tokens.invalidate_all_active.assert_called_once_with(USER.id, TokenType.PASSWORD_RESET)
        row = tokens.insert_token.call_args.args[0]
        assert row["user_id"] == USER.id
        assert row["token_type"] == "password_reset"
        assert len(row["token"]) == 64
        assert row["expires_at"] == (NOW + timedelta(hours=1)).isoformat()
        assert row["ip_address"] == "203.0.113.7"
        email.send_password_reset_email.assert_awaited_once_with(USER.email, row["token"])

    @pytest.mark.asyncio
    async def test_magic_link_ttl(self, service, users, tokens, email):
        users.find_user_by_email.return_value = USER
        await service.request_magic_link(USER.email, ISSUE)
        row = tokens.insert_token.call_args.args[0]
        assert row["token_type"] == "magic_link"
        assert row["expires_at"] == (NOW + timedelta(minutes=15)).isoformat()
        email.send_magic_link_email.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_storage_failure_is_swallowed(self, service, users, tokens, email):
        """A database failure does not change the caller-visible outcome."""
        users.find_user_by_email.return_value = USER
        tokens.insert_token.side_effect = ExternalServiceError("boom", service="supabase")
        await service.request_password_reset(USER.email, ISSUE)
        email.send_password_reset_email.assert_not_called()

    @pytest.mark.asyncio
    async def test_email_failure_is_swallowed(self, service, users, email):
        users.find_user_by_email.return_value = USER
        email.send_password_reset_email.return_value = False
        await service.request_password_reset(USER.email, ISSUE)


class TestVerifyResetToken:
    """Tests for verify_reset_token."""

    def test_unknown(self, service, tokens):
        tokens.find_token.return_value = None
        status = service.verify_reset_token("nope")
        assert status.valid is False
        assert status.error == "Invalid token"

    def test_used(self, service, tokens):
        tokens.find_token.return_value = token_row(
            TokenType.PASSWORD_RESET, NOW + timedelta(minutes=5), used_at=NOW.isoformat()
        )
        assert service.verify_reset_token("t").error == "Token has already been used"

    def test_expired(self, service, tokens):
        tokens.find_token.return_value = token_row(TokenType.PASSWORD_RESET, NOW - timedelta(seconds=1))
        assert service.verify_reset_token("t").error == "Token has expired"

    def test_valid(self, service, tokens):
        expires = NOW + timedelta(minutes=30)
        tokens.find_token.return_value = token_row(TokenType.PASSWORD_RESET, expires)
        status = service.verify_reset_token("t")
        assert status.valid is True
        assert status.expires_at == expires

    def test_naive_timestamp_treated_as_utc(self, service, tokens):
        row = token_row(TokenType.PASSWORD_RESET, NOW)
        row["expires_at"] = (NOW + timedelta(minutes=1)).replace(tzinfo=None).isoformat()
        tokens.find_token.return_value = row
        assert service.verify_reset_token("t").valid is True


class TestResetPassword:
    """Tests for reset_password."""

    @pytest.mark.asyncio
    async def test_success_consumes_token(self, service, users, tokens):
        tokens.find_active_token.return_value = token_row(TokenType.PASSWORD_RESET, NOW + timedelta(minutes=5))

        await service.reset_password("t" * 64, STRONG)

        users.update_password.assert_awaited_once_with(USER.id, STRONG)
        tokens.mark_used.assert_called_once_with("t" * 64)
        tokens.invalidate_all_active.assert_called_once_with(
            USER.id, TokenType.PASSWORD_RESET, except_token="t" * 64
        )

    @pytest.mark.asyncio
    async def test_weak_password(self, service, tokens):
        with pytest.raises(WeakPasswordError):
            await service.reset_password("t", "short")
        tokens.find_active_token.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_or_used_token(self, service, tokens):
        tokens.find_active_token.return_value = None
        with pytest.raises(InvalidAuthTokenError) as exc_info:
            await service.reset_password("t", STRONG)
        assert exc_info.value.message == "Invalid or expired reset token"

    @pytest.mark.asyncio
    async def test_expired_token(self, service, users, tokens):
        tokens.find_active_token.return_value = token_row(TokenType.PASSWORD_RESET, NOW - timedelta(seconds=1))
        with pytest.raises(ExpiredAuthTokenError) as exc_info:
            await service.reset_password("t", STRONG)
        assert exc_info.value.message == "Reset token has expired"
        users.update_password.assert_not_called()
        tokens.mark_used.assert_not_called()


class TestConsumeMagicLink:
    """Tests for consume_magic_link."""

    @pytest.mark.asyncio
    async def test_success(self, service, users, tokens):
        tokens.find_active_token.return_value = token_row(TokenType.MAGIC_LINK, NOW + timedelta(minutes=5))
        users.get_auth_user.return_value = USER
        users.get_profile_role.return_value = Role.ADMIN

        user, role = await service.consume_magic_link("t" * 64)

        assert user == USER
        assert role is Role.ADMIN
        tokens.mark_used.assert_called_once_with("t" * 64)

    @pytest.mark.asyncio
    async def test_expired(self, service, tokens):
        tokens.find_active_token.return_value = token_row(TokenType.MAGIC_LINK, NOW - timedelta(minutes=1))
        with pytest.raises(ExpiredAuthTokenError):
            await service.consume_magic_link("t")

    @pytest.mark.asyncio
    async def test_account_deleted(self, service, users, tokens):
        tokens.find_active_token.return_value = token_row(TokenType.MAGIC_LINK, NOW + timedelta(minutes=5))
        users.get_auth_user.return_value = None
        with pytest.raises(AccountNotFoundError):
            await service.consume_magic_link("t")
        tokens.mark_used.assert_called_once_with("t" * 64)


class SingleUseTokenStore:
    """In-memory token store whose mark_used only succeeds on unused rows."""

    def __init__(self, row: dict):
        self.row = dict(row)

    def find_active_token(self, token, token_type):
        return dict(self.row) if self.row["used_at"] is None else None

    def mark_used(self, token):
        if self.row["used_at"] is not None:
            return False
        self.row["used_at"] = NOW.isoformat()
        return True

    def invalidate_all_active(self, user_id, token_type, except_token=None):
        pass


class TestTokenSingleUse:
    """A token can be exchanged once, even by concurrent requests."""

    @pytest.mark.asyncio
    async def test_concurrent_magic_link_callbacks(self, users, email):
        store = SingleUseTokenStore(token_row(TokenType.MAGIC_LINK, NOW + timedelta(minutes=5)))

        async def slow_lookup(user_id):
            await asyncio.sleep(0.01)
            return USER

        users.get_auth_user.side_effect = slow_lookup
        service = AuthService(users=users, tokens=store, email=email, clock=lambda: NOW)

        results = await asyncio.gather(
            service.consume_magic_link("t" * 64),
            service.consume_magic_link("t" * 64),
            return_exceptions=True,
        )

        assert sum(1 for r in results if isinstance(r, tuple)) == 1
        assert sum(1 for r in results if isinstance(r, InvalidAuthTokenError)) == 1

    @pytest.mark.asyncio
    async def test_reset_loses_race(self, service, users, tokens):
        """If another request consumed the token first, the password is untouched."""
        tokens.find_active_token.return_value = token_row(TokenType.PASSWORD_RESET, NOW + timedelta(minutes=5))
        tokens.mark_used.return_value = False

        with pytest.raises(InvalidAuthTokenError):
            await service.reset_password("t" * 64, STRONG)
        users.update_password.assert_not_called()
        tokens.invalidate_all_active.assert_not_called()
