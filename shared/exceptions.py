"""
Base exception classes for the Explore the Universe backend.

Each module should define its own exceptions that inherit from these bases.
The API layer maps each base class to an HTTP status code (see api/errors.py).
"""

from typing import Optional, Any


class EtuError(Exception):
    """
    Base exception for all backend errors.

    All custom exceptions should inherit from this class.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        body: dict[str, Any] = {
            "error": self.message,
            "code": self.code,
        }
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(EtuError):
    """Input validation failed."""

    status_code = 400


class AuthenticationError(EtuError):
    """Authentication failed (invalid or missing credentials)."""

    status_code = 401


class AuthorizationError(EtuError):
    """Authorization failed (insufficient permissions)."""

    status_code = 403


class NotFoundError(EtuError):
    """Resource not found."""

    status_code = 404


class ConflictError(EtuError):
    """Resource already exists or the action was already taken."""

    status_code = 409


class RateLimitExceededError(EtuError):
    """Too many attempts for an identifier within the current window."""

    status_code = 429

    def __init__(
        self,
        retry_after: int,
        reset_at: int,
        limit: int,
        message: str = "Too many requests. Please try again later.",
    ):
        super().__init__(message, code="RATE_LIMITED")
        self.retry_after = retry_after
        self.reset_at = reset_at
        self.limit = limit

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "retryAfter": self.retry_after}


class ExternalServiceError(EtuError):
    """Error communicating with an external service."""

    status_code = 500

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service

    def to_dict(self) -> dict[str, Any]:
        # Internal details stay in the logs
        return {"error": "Internal server error", "code": self.code}
