"""
Signed session cookie codec.

The session is a compact HS256 JWT ({sub, email, role, csrf, iat, exp})
stored in an HTTP-only, SameSite=strict cookie. Nothing is kept server
side: logging out only expires the browser's cookie, so a copied cookie
stays valid until its exp claim passes.
"""

import binascii
import logging
import time
from datetime import datetime, timezone
from typing import Callable, Optional

import jwt
from jwt.utils import base64url_decode, base64url_encode
from fastapi import Request, Response
from pydantic import ValidationError as PydanticValidationError

from shared.models import Role

from .csrf import generate_csrf_token
from .models import Session

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
DEFAULT_COOKIE_NAME = "etu_session"
DEFAULT_MAX_AGE = 60 * 60 * 24 * 7  # 7 days


def _is_canonical(token: str) -> bool:
    """
    Reject tokens whose segments are not canonical base64url.

    The decoder ignores unused trailing bits, so two spellings of the
    final character can decode to the same signature bytes.
    """
    parts = token.split(".")
    if len(parts) != 3:
        return False
    try:
        return all(base64url_encode(base64url_decode(part)).decode("ascii") == part for part in parts)
    except (binascii.Error, ValueError, UnicodeError):
        return False


class SessionCodec:
    """
    Creates, parses and clears the session cookie.

    Args:
        secret: HMAC key for signing
        max_age: Cookie and token lifetime in seconds
        cookie_name: Name of the cookie
        secure: Whether to set the Secure attribute
        clock: Seconds since the epoch (injectable for tests)
    """

    def __init__(
        self,
        secret: str,
        max_age: int = DEFAULT_MAX_AGE,
        cookie_name: str = DEFAULT_COOKIE_NAME,
        secure: bool = True,
        clock: Callable[[], float] = time.time,
    ):
        if not secret:
            raise ValueError("Session secret must be configured")
        self._secret = secret
        self._max_age = max_age
        self._clock = clock
        self.cookie_name = cookie_name
        self.secure = secure

    @property
    def max_age(self) -> int:
        return self._max_age

    def create(self, user_id: str, email: str, role: Role | str | None = None) -> str:
        """
        Build a signed cookie value for a freshly authenticated user.

        A new CSRF token is generated for every session.
        """
        now = int(self._clock())
        payload = {
            "sub": user_id,
            "email": email or "",
            "role": Role.parse(role).value,
            "csrf": generate_csrf_token(),
            "iat": now,
            "exp": now + self._max_age,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def parse(self, value: Optional[str]) -> Optional[Session]:
        """
        Verify and decode a cookie value.

        Returns None for any tampered, expired or malformed value.
        """
        if not value or not _is_canonical(value):
            return None

        try:
            claims = jwt.decode(
                value,
                self._secret,
                algorithms=[ALGORITHM],
                # Time claims are checked against the codec's own clock below
                options={"require": ["sub", "exp", "iat"], "verify_exp": False, "verify_iat": False},
            )
        except jwt.PyJWTError as e:
            logger.debug("Rejected session cookie: %s", e)
            return None

        try:
            if int(claims["exp"]) <= self._clock():
                logger.debug("Rejected expired session cookie")
                return None
            return Session(
                user_id=claims["sub"],
                email=claims.get("email") or "",
                # Sessions issued before roles were tracked have no role claim
                role=Role.parse(claims.get("role")),
                csrf_token=claims.get("csrf") or "",
                issued_at=datetime.fromtimestamp(claims["iat"], tz=timezone.utc),
            )
        except (PydanticValidationError, TypeError, ValueError, OverflowError):
            logger.debug("Rejected session cookie with malformed claims")
            return None

    def from_request(self, request: Request) -> Optional[Session]:
        """Read and verify the session cookie of a request."""
        return self.parse(request.cookies.get(self.cookie_name))

    def set_cookie(self, response: Response, user_id: str, email: str, role: Role | str | None = None) -> str:
        """Create a session and attach it to a response. Returns the cookie value."""
        value = self.create(user_id, email, role)
        response.set_cookie(
            key=self.cookie_name,
            value=value,
            max_age=self._max_age,
            path="/",
            httponly=True,
            secure=self.secure,
            samesite="strict",
        )
        return value

    def delete_cookie(self, response: Response) -> None:
        """Overwrite the session cookie with an already-expired one."""
        response.delete_cookie(
            key=self.cookie_name,
            path="/",
            httponly=True,
            secure=self.secure,
            samesite="strict",
        )
