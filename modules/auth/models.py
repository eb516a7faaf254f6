"""
Authentication module data models.

Request bodies for the auth endpoints plus the small records passed
between the auth service and its stores.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator

from shared.models import Role

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps from the database as UTC."""
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class TokenType(str, Enum):
    """Kinds of single-use tokens stored in auth_tokens."""

    PASSWORD_RESET = "password_reset"
    MAGIC_LINK = "magic_link"


class AuthUser(BaseModel):
    """Minimal Supabase Auth account."""

    id: str
    email: str = ""

    model_config = {"frozen": True, "extra": "ignore"}


class AuthToken(BaseModel):
    """Row of the auth_tokens table."""

    token: str
    token_type: TokenType
    user_id: str
    email: str
    expires_at: datetime
    used_at: Optional[datetime] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

    model_config = {"extra": "ignore"}

    @field_validator("expires_at", "used_at")
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v) if v is not None else None

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


class LoginRequest(BaseModel):
    """Password login."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class SignupRequest(BaseModel):
    """New account with password."""

    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=1)
    username: Optional[str] = Field(None, max_length=50)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class EmailRequest(BaseModel):
    """Body of forgot-password and magic-link requests."""

    email: str = Field(..., pattern=EMAIL_PATTERN)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class ResetPasswordRequest(BaseModel):
    """Consume a reset token and set a new password."""

    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserSummary(BaseModel):
    """User block returned by login and signup."""

    id: str
    email: str
    role: Role


class AuthResponse(BaseModel):
    """Successful login or signup."""

    success: bool = True
    message: Optional[str] = None
    user: UserSummary


class MessageResponse(BaseModel):
    """Generic success message."""

    success: bool = True
    message: str


class SessionUser(BaseModel):
    """Fresh user data for the session endpoint."""

    id: str
    email: str
    username: Optional[str] = None
    role: Role = Role.USER
    avatar_url: Optional[str] = None
    steam_id: Optional[str] = None
    faction_choice: Optional[str] = None


class SessionStatusResponse(BaseModel):
    """Whether the caller holds a valid, fresh session."""

    authenticated: bool
    user: Optional[SessionUser] = None


class TokenStatusResponse(BaseModel):
    """Result of checking a reset token without consuming it."""

    valid: bool
    error: Optional[str] = None
    expires_at: Optional[datetime] = Field(None, serialization_alias="expiresAt")


class CSRFTokenResponse(BaseModel):
    """CSRF token of the current session."""

    csrf_token: str = Field(..., serialization_alias="csrfToken")


class TokenIssue(BaseModel):
    """Details recorded with a newly issued token."""

    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

    def as_row(self) -> dict[str, Any]:
        return {"ip_address": self.ip_address, "user_agent": self.user_agent}
