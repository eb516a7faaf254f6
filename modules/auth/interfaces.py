"""
Authentication module interfaces.

Routes and other modules depend on these protocols, not on the Supabase
implementations. This enables testing with mocks.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from shared.models import Role

from .models import AuthUser, TokenType


@runtime_checkable
class IUserStore(Protocol):
    """
    Interface for user account operations.

    Backed by Supabase Auth (credentials) and the profiles table
    (role, display data).
    """

    async def get_user_by_id(self, user_id: str) -> Optional[dict[str, Any]]:
        """
        Get a user's profile row by ID.

        Returns:
            Profile row if found, None otherwise
        """
        ...

    async def get_profile_role(self, user_id: str) -> Role:
        """Role stored on the user's profile, USER when unknown."""
        ...

    async def get_auth_user(self, user_id: str) -> Optional[AuthUser]:
        """Get the Supabase Auth account for a user ID."""
        ...

    async def find_user_by_email(self, email: str) -> Optional[AuthUser]:
        """Find an account by email (case-insensitive)."""
        ...

    async def authenticate(self, email: str, password: str) -> Optional[AuthUser]:
        """
        Check a password.

        Returns:
            The account on success, None for bad credentials
        """
        ...

    async def create_user(
        self,
        email: str,
        password: str,
        username: Optional[str] = None,
    ) -> AuthUser:
        """
        Create a confirmed account.

        Raises:
            AccountCreationError: If the provider rejects the account
        """
        ...

    async def update_password(self, user_id: str, password: str) -> None:
        """Set a new password for an account."""
        ...

    async def exchange_code_for_session(self, code: str) -> Optional[AuthUser]:
        """Exchange an OAuth authorization code for the signed-in account."""
        ...


@runtime_checkable
class ITokenStore(Protocol):
    """
    Interface for single-use auth tokens (password reset, magic link).
    """

    def insert_token(self, record: dict[str, Any]) -> dict[str, Any]:
        """Store a new token row."""
        ...

    def find_active_token(self, token: str, token_type: TokenType) -> Optional[dict[str, Any]]:
        """Unconsumed token row of the given type, or None."""
        ...

    def find_token(self, token: str, token_type: TokenType) -> Optional[dict[str, Any]]:
        """Token row of the given type regardless of consumption."""
        ...

    def mark_used(self, token: str) -> bool:
        """Consume a token if still unused. Returns whether this call consumed it."""
        ...

    def invalidate_all_active(
        self,
        user_id: str,
        token_type: TokenType,
        except_token: Optional[str] = None,
    ) -> None:
        """Consume every unconsumed token of a type for a user."""
        ...
