"""
Authentication flows.

Password login and signup, password reset and magic-link sign-in over
the user store, the token store and the email service. Routes handle
cookies, rate limits and redirects; this service handles accounts and
tokens.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from modules.notifications.interfaces import IEmailService
from modules.passwords import validate_password
from shared.exceptions import EtuError
from shared.models import Role

from .exceptions import (
    AccountNotFoundError,
    ExpiredAuthTokenError,
    InvalidAuthTokenError,
    InvalidCredentialsError,
    WeakPasswordError,
)
from .interfaces import ITokenStore, IUserStore
from .models import AuthToken, AuthUser, TokenIssue, TokenStatusResponse, TokenType, as_utc

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_auth_token() -> str:
    """Generate a 256-bit hex token for reset and magic-link emails."""
    return secrets.token_hex(TOKEN_BYTES)


class AuthService:
    """
    Account and single-use token operations.

    Args:
        users: Account store
        tokens: Single-use token store
        email: Outbound email
        password_reset_ttl: Reset token lifetime in seconds
        magic_link_ttl: Magic-link token lifetime in seconds
        clock: Current UTC time (injectable for tests)
    """

    def __init__(
        self,
        users: IUserStore,
        tokens: ITokenStore,
        email: IEmailService,
        password_reset_ttl: int = 60 * 60,
        magic_link_ttl: int = 15 * 60,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._users = users
        self._tokens = tokens
        self._email = email
        self._ttl = {
            TokenType.PASSWORD_RESET: password_reset_ttl,
            TokenType.MAGIC_LINK: magic_link_ttl,
        }
        self._clock = clock

    @property
    def users(self) -> IUserStore:
        return self._users

    # -------------------------------------------------------------------------
    # Password login / signup
    # -------------------------------------------------------------------------

    async def login(self, email: str, password: str) -> tuple[AuthUser, Role]:
        """
        Check credentials and look up the account's role.

        Raises:
            InvalidCredentialsError: Same error for unknown email and wrong password
        """
        user = await self._users.authenticate(email, password)
        if user is None:
            raise InvalidCredentialsError()
        role = await self._users.get_profile_role(user.id)
        logger.info("User %s logged in", user.id)
        return user, role

    async def signup(
        self,
        email: str,
        password: str,
        username: Optional[str] = None,
    ) -> tuple[AuthUser, Role]:
        """
        Create an account after checking the password policy.

        Raises:
            WeakPasswordError: Password fails the policy
            AccountCreationError: Provider rejected the account
        """
        validation = validate_password(password)
        if not validation.valid:
            raise WeakPasswordError(validation.errors)

        user = await self._users.create_user(email, password, username)
        role = await self._users.get_profile_role(user.id)
        logger.info("Created account %s", user.id)
        return user, role

    # -------------------------------------------------------------------------
    # Single-use tokens
    # -------------------------------------------------------------------------

    async def _issue_token(
        self,
        email: str,
        token_type: TokenType,
        issue: TokenIssue,
    ) -> Optional[str]:
        """
        Issue a token for the account with this email.

        Returns None without raising when there is no such account or the
        token could not be stored, so callers answer identically either way.
        """
        try:
            user = await self._users.find_user_by_email(email)
            if user is None:
                logger.info("No account for %s request", token_type.value)
                return None

            token = generate_auth_token()
            expires_at = self._clock() + timedelta(seconds=self._ttl[token_type])

            self._tokens.invalidate_all_active(user.id, token_type)
            self._tokens.insert_token({
                "user_id": user.id,
                "token": token,
                "token_type": token_type.value,
                "email": email.lower(),
                "expires_at": expires_at.isoformat(),
                **issue.as_row(),
            })
        except EtuError as e:
            logger.error("Could not issue %s token: %s", token_type.value, e.message)
            return None

        return token

    async def request_password_reset(self, email: str, issue: TokenIssue) -> None:
        """Email a reset link if the account exists."""
        token = await self._issue_token(email, TokenType.PASSWORD_RESET, issue)
        if token and not await self._email.send_password_reset_email(email, token):
            logger.error("Failed to send password reset email")

    async def request_magic_link(self, email: str, issue: TokenIssue) -> None:
        """Email a magic sign-in link if the account exists."""
        token = await self._issue_token(email, TokenType.MAGIC_LINK, issue)
        if token and not await self._email.send_magic_link_email(email, token):
            logger.error("Failed to send magic link email")

    def _load_active(self, token: str, token_type: TokenType, invalid: str, expired: str) -> AuthToken:
        row = self._tokens.find_active_token(token, token_type)
        if row is None:
            raise InvalidAuthTokenError(invalid)

        try:
            record = AuthToken.model_validate(row)
        except PydanticValidationError:
            logger.error("Malformed %s token row", token_type.value)
            raise InvalidAuthTokenError(invalid)

        if record.is_expired(self._clock()):
            raise ExpiredAuthTokenError(expired)
        return record

    def _consume(self, record: AuthToken, invalid: str) -> None:
        """Claim the token before acting on it; only one caller can win."""
        if not self._tokens.mark_used(record.token):
            logger.warning("Concurrent use of %s token for user %s", record.token_type.value, record.user_id)
            raise InvalidAuthTokenError(invalid)
        self._tokens.invalidate_all_active(record.user_id, record.token_type, except_token=record.token)

    def verify_reset_token(self, token: str) -> TokenStatusResponse:
        """Report whether a reset token is usable without consuming it."""
        row = self._tokens.find_token(token, TokenType.PASSWORD_RESET)
        if row is None:
            return TokenStatusResponse(valid=False, error="Invalid token")

        if row.get("used_at"):
            return TokenStatusResponse(valid=False, error="Token has already been used")

        expires_at = as_utc(datetime.fromisoformat(row["expires_at"]))
        if self._clock() > expires_at:
            return TokenStatusResponse(valid=False, error="Token has expired")

        return TokenStatusResponse(valid=True, expires_at=expires_at)

    async def reset_password(self, token: str, password: str) -> None:
        """
        Set a new password with a reset token.

        Raises:
            WeakPasswordError: Password fails the policy
            InvalidAuthTokenError: Token unknown or already used
            ExpiredAuthTokenError: Token past its expiry
        """
        validation = validate_password(password)
        if not validation.valid:
            raise WeakPasswordError(validation.errors)

        record = self._load_active(
            token,
            TokenType.PASSWORD_RESET,
            invalid="Invalid or expired reset token",
            expired="Reset token has expired",
        )
        self._consume(record, "Invalid or expired reset token")
        await self._users.update_password(record.user_id, password)
        logger.info("Password reset for user %s", record.user_id)

    async def consume_magic_link(self, token: str) -> tuple[AuthUser, Role]:
        """
        Exchange a magic-link token for the account it was issued to.

        Raises:
            InvalidAuthTokenError: Token unknown or already used
            ExpiredAuthTokenError: Token past its expiry
            AccountNotFoundError: The account no longer exists
        """
        record = self._load_active(
            token,
            TokenType.MAGIC_LINK,
            invalid="Invalid or expired sign-in link",
            expired="Sign-in link has expired",
        )

        self._consume(record, "Invalid or expired sign-in link")

        user = await self._users.get_auth_user(record.user_id)
        if user is None:
            raise AccountNotFoundError(record.user_id)

        role = await self._users.get_profile_role(user.id)
        logger.info("User %s signed in with magic link", user.id)
        return user, role
