"""
Steam module exceptions.
"""

from shared.exceptions import AuthenticationError


class SteamAuthError(AuthenticationError):
    """
    Raised when a Steam OpenID assertion is rejected.

    The code doubles as the message shown on the error page.
    """

    def __init__(self, code: str, message: str = "Steam sign-in failed"):
        super().__init__(message, code=code)
