"""
CSRF token generation and validation.

Each session carries a random token. State-changing requests that rely on
the session cookie must echo it back in the x-csrf-token header (or the
csrf_token form field); bearer-token requests are exempt.
"""

import hmac
import logging
import re
import secrets
from typing import TYPE_CHECKING, Optional

from fastapi import Request

if TYPE_CHECKING:
    from .codec import SessionCodec

logger = logging.getLogger(__name__)

CSRF_TOKEN_BYTES = 32
CSRF_HEADER_NAME = "x-csrf-token"
CSRF_FORM_FIELD = "csrf_token"

_TOKEN_RE = re.compile(rf"^[0-9a-fA-F]{{{CSRF_TOKEN_BYTES * 2}}}$")

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def generate_csrf_token() -> str:
    """Generate a 256-bit hex CSRF token."""
    return secrets.token_hex(CSRF_TOKEN_BYTES)


def validate_csrf_token(token: Optional[str], session_token: Optional[str]) -> bool:
    """
    Compare a presented token with the session's token.

    Both must be well-formed hex tokens; comparison is constant time.
    """
    if not token or not session_token:
        return False

    if not _TOKEN_RE.match(token) or not _TOKEN_RE.match(session_token):
        return False

    return hmac.compare_digest(token.lower(), session_token.lower())


async def get_csrf_token_from_request(request: Request) -> Optional[str]:
    """Token from the header, falling back to the form field on form posts."""
    token = request.headers.get(CSRF_HEADER_NAME)
    if token:
        return token

    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        value = form.get(CSRF_FORM_FIELD)
        return value if isinstance(value, str) else None

    return None


async def validate_csrf_from_request(request: Request, codec: "SessionCodec") -> bool:
    """
    Validate the request's CSRF token against its session cookie.

    Returns False when there is no valid session, no token, or a mismatch.
    Never raises.
    """
    session = codec.from_request(request)
    if session is None:
        return False

    try:
        token = await get_csrf_token_from_request(request)
    except Exception:
        logger.warning("Could not read CSRF token from request body", exc_info=True)
        return False

    return validate_csrf_token(token, session.csrf_token)
