"""
Password policy data models.
"""

from pydantic import BaseModel, Field


class PasswordValidationResult(BaseModel):
    """
    Outcome of validating a password against the policy.

    Suggestions are non-blocking advice and are only returned for valid
    passwords; errors take priority.
    """

    valid: bool
    score: int = Field(..., ge=0, le=100, description="Strength score")
    errors: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class PasswordMatchResult(BaseModel):
    """Outcome of comparing a password with its confirmation field."""

    valid: bool
    error: str | None = None
