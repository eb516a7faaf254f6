"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field


class Role(str, Enum):
    """
    Closed set of account roles.

    Staff capability (admin pages, admin APIs, private profiles) is granted
    to STAFF and ADMIN only.
    """

    USER = "user"
    STAFF = "staff"
    ADMIN = "admin"

    @property
    def is_staff(self) -> bool:
        return self in (Role.STAFF, Role.ADMIN)

    @classmethod
    def parse(cls, value: Any) -> "Role":
        """Normalize a stored role string, defaulting to USER."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower()) if value else cls.USER
        except ValueError:
            return cls.USER


class AuthMethod(str, Enum):
    """How the current request proved its identity."""

    SESSION = "session"
    BEARER = "bearer"


class AuthenticatedUser(BaseModel):
    """
    Represents the authenticated caller of an API request.

    Populated either from the signed session cookie or from a Supabase
    bearer token, and made available to route handlers via dependencies.
    """

    id: str = Field(..., description="User ID (UUID from Supabase)")
    email: str = Field(default="", description="User's email address")
    role: Role = Field(default=Role.USER, description="Account role")
    auth_method: AuthMethod = Field(default=AuthMethod.SESSION)
    csrf_token: Optional[str] = Field(None, description="Session CSRF token")

    model_config = {
        "frozen": True,
        "extra": "ignore",
    }
