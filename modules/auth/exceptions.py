"""
Authentication module exceptions.

These exceptions are raised by the auth module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from shared.exceptions import AuthenticationError, AuthorizationError, ValidationError


class InvalidTokenError(AuthenticationError):
    """Raised when a bearer token is invalid or malformed."""

    def __init__(self, message: str = "Invalid or expired authentication token"):
        super().__init__(message, code="INVALID_TOKEN")


class ExpiredTokenError(AuthenticationError):
    """Raised when a bearer token has expired."""

    def __init__(self, message: str = "Authentication token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class MissingTokenError(AuthenticationError):
    """Raised when neither a session nor a bearer token is provided."""

    def __init__(self, message: str = "Unauthorized - Please log in"):
        super().__init__(message, code="MISSING_TOKEN")


class InvalidCredentialsError(AuthenticationError):
    """Raised for a failed password login, whatever the reason."""

    def __init__(self):
        super().__init__("Invalid email or password", code="INVALID_CREDENTIALS")


class InvalidCSRFTokenError(AuthorizationError):
    """Raised when a cookie-authenticated mutation lacks a matching CSRF token."""

    def __init__(self):
        super().__init__("Invalid CSRF token", code="INVALID_CSRF_TOKEN")


class InsufficientPermissionsError(AuthorizationError):
    """Raised when user lacks required permissions."""

    def __init__(self, required_role: str, user_role: str):
        super().__init__(
            "Forbidden - Admin access required",
            code="INSUFFICIENT_PERMISSIONS",
            details={"required_role": required_role, "user_role": user_role},
        )


class WeakPasswordError(ValidationError):
    """Raised when a new password fails the password policy."""

    def __init__(self, errors: list[str]):
        super().__init__(
            "Password does not meet requirements",
            code="WEAK_PASSWORD",
            details={"errors": errors},
        )


class AccountCreationError(ValidationError):
    """Raised when the identity provider refuses to create an account."""

    def __init__(self, message: str = "Failed to create account"):
        super().__init__(message, code="ACCOUNT_CREATION_FAILED")


class InvalidAuthTokenError(ValidationError):
    """Raised when a reset or magic-link token is unknown or already used."""

    def __init__(self, message: str = "Invalid or expired reset token"):
        super().__init__(message, code="INVALID_AUTH_TOKEN")


class ExpiredAuthTokenError(ValidationError):
    """Raised when a reset or magic-link token has passed its expiry."""

    def __init__(self, message: str = "Reset token has expired"):
        super().__init__(message, code="EXPIRED_AUTH_TOKEN")


class AccountNotFoundError(ValidationError):
    """Raised when a token refers to an account that no longer exists."""

    def __init__(self, user_id: str):
        super().__init__(
            "User not found",
            code="USER_NOT_FOUND",
            details={"user_id": user_id},
        )
