"""
Authentication module.

Password login and signup, password reset and magic-link tokens, and the
Supabase-backed user and token stores.

Public API:
- AuthService: login, signup, reset and magic-link flows
- IUserStore, ITokenStore: storage contracts
- SupabaseUserStore, AuthTokenRepository: Supabase implementations
- Auth exceptions: InvalidTokenError, InvalidCredentialsError, etc.
"""

from .interfaces import IUserStore, ITokenStore
from .models import AuthToken, AuthUser, TokenIssue, TokenType
from .service import AuthService, generate_auth_token
from .store import SupabaseUserStore
from .tokens import AuthTokenRepository
from .exceptions import (
    AccountCreationError,
    AccountNotFoundError,
    ExpiredAuthTokenError,
    ExpiredTokenError,
    InsufficientPermissionsError,
    InvalidAuthTokenError,
    InvalidCredentialsError,
    InvalidCSRFTokenError,
    InvalidTokenError,
    MissingTokenError,
    WeakPasswordError,
)

__all__ = [
    # Service
    "AuthService",
    "generate_auth_token",
    # Interfaces
    "IUserStore",
    "ITokenStore",
    # Stores
    "SupabaseUserStore",
    "AuthTokenRepository",
    # Models
    "AuthToken",
    "AuthUser",
    "TokenIssue",
    "TokenType",
    # Exceptions
    "AccountCreationError",
    "AccountNotFoundError",
    "ExpiredAuthTokenError",
    "ExpiredTokenError",
    "InsufficientPermissionsError",
    "InvalidAuthTokenError",
    "InvalidCredentialsError",
    "InvalidCSRFTokenError",
    "InvalidTokenError",
    "MissingTokenError",
    "WeakPasswordError",
]
