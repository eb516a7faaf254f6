"""
Profiles module exceptions.
"""

from shared.exceptions import AuthorizationError, NotFoundError


class ProfileNotFoundError(NotFoundError):
    """Raised when no profile exists for a user ID."""

    def __init__(self, user_id: str):
        super().__init__("Profile not found", code="PROFILE_NOT_FOUND", details={"user_id": user_id})


class PrivateProfileError(AuthorizationError):
    """Raised when a private profile is requested by someone other than its owner or staff."""

    def __init__(self):
        super().__init__("This profile is private", code="PROFILE_PRIVATE")
