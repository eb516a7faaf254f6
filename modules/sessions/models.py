"""
Session data models.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field

from shared.models import Role


class Session(BaseModel):
    """
    Identity carried by the signed session cookie.

    Never persisted server side; the cookie is the only copy.
    """

    user_id: str = Field(..., min_length=1)
    email: str = ""
    role: Role = Role.USER
    csrf_token: str = Field(..., min_length=1)
    issued_at: datetime

    model_config = {"frozen": True}


class SessionValidation(BaseModel):
    """Result of re-checking a session against the live user record."""

    valid: bool
    user: Optional[dict[str, Any]] = None


class RouteClass(str, Enum):
    """Access class of a page path."""

    PUBLIC = "public"
    PROTECTED = "protected"
    ADMIN = "admin"


class GuardDecision(BaseModel):
    """What the route guard does with a request."""

    allow: bool
    redirect_to: Optional[str] = None

    model_config = {"frozen": True}
