"""
Authentication dependencies.

Two ways to prove identity:

- the signed session cookie (browser), which also requires a CSRF token
  on state-changing requests;
- a Supabase access token in the Authorization header (game client),
  which is exempt from CSRF.
"""

import logging
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError

from modules.auth.exceptions import (
    ExpiredTokenError,
    InsufficientPermissionsError,
    InvalidCSRFTokenError,
    InvalidTokenError,
    MissingTokenError,
)
from modules.sessions import Session, SessionCodec, validate_csrf_from_request
from shared.config import Settings
from shared.models import AuthenticatedUser, AuthMethod, Role

from ..dependencies import get_app_settings, get_session_codec

logger = logging.getLogger(__name__)

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


def decode_bearer_token(token: str, settings: Settings) -> AuthenticatedUser:
    """
    Decode and validate a Supabase access token.

    Raises:
        InvalidTokenError: Token malformed, badly signed or server unconfigured
        ExpiredTokenError: Token expired
    """
    if not settings.supabase_jwt_secret:
        raise InvalidTokenError("Server authentication not configured")

    try:
        payload = jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=["HS256"],
            audience="authenticated",
        )
    except ExpiredSignatureError:
        raise ExpiredTokenError()
    except JWTError as e:
        logger.debug("Rejected bearer token: %s", e)
        raise InvalidTokenError()

    if not payload.get("sub"):
        raise InvalidTokenError()

    return AuthenticatedUser(
        id=payload["sub"],
        email=payload.get("email") or "",
        role=Role.parse((payload.get("app_metadata") or {}).get("role")),
        auth_method=AuthMethod.BEARER,
    )


def _session_user(session: Session) -> AuthenticatedUser:
    return AuthenticatedUser(
        id=session.user_id,
        email=session.email,
        role=session.role,
        auth_method=AuthMethod.SESSION,
        csrf_token=session.csrf_token,
    )


async def get_session(
    request: Request,
    codec: SessionCodec = Depends(get_session_codec),
) -> Optional[Session]:
    """The request's verified session, or None."""
    return codec.from_request(request)


async def require_session(
    session: Optional[Session] = Depends(get_session),
) -> Session:
    """
    Dependency that requires a session cookie.

    Usage:
        @router.get("/csrf-token")
        async def csrf(session: Session = Depends(require_session)): ...
    """
    if session is None:
        raise MissingTokenError()
    return session


async def require_staff_session(
    session: Session = Depends(require_session),
) -> Session:
    """Dependency that requires a session with staff capability."""
    if not session.role.is_staff:
        logger.warning("User %s denied staff access", session.user_id)
        raise InsufficientPermissionsError(Role.STAFF.value, session.role.value)
    return session


async def get_current_user(
    session: Optional[Session] = Depends(get_session),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_app_settings),
) -> AuthenticatedUser:
    """
    Dependency that requires authentication by bearer token or session.

    A bearer token, when present, takes precedence and must be valid.
    """
    if credentials is not None:
        return decode_bearer_token(credentials.credentials, settings)
    if session is not None:
        return _session_user(session)
    raise MissingTokenError()


async def get_optional_user(
    session: Optional[Session] = Depends(get_session),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_app_settings),
) -> Optional[AuthenticatedUser]:
    """
    Dependency that optionally extracts the caller.

    An invalid bearer token is treated as anonymous.
    """
    if credentials is not None:
        try:
            return decode_bearer_token(credentials.credentials, settings)
        except (InvalidTokenError, ExpiredTokenError):
            return None
    if session is not None:
        return _session_user(session)
    return None


async def _check_csrf(
    request: Request,
    user: Optional[AuthenticatedUser],
    codec: SessionCodec,
) -> None:
    if user is None or user.auth_method is not AuthMethod.SESSION:
        return
    if request.method in SAFE_METHODS:
        return
    if not await validate_csrf_from_request(request, codec):
        logger.warning("CSRF validation failed for %s %s", request.method, request.url.path)
        raise InvalidCSRFTokenError()


async def require_csrf_user(
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    codec: SessionCodec = Depends(get_session_codec),
) -> AuthenticatedUser:
    """
    Dependency for state-changing endpoints.

    Cookie-authenticated callers must send the session's CSRF token;
    bearer callers are exempt.
    """
    await _check_csrf(request, user, codec)
    return user


async def optional_csrf_user(
    request: Request,
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    codec: SessionCodec = Depends(get_session_codec),
) -> Optional[AuthenticatedUser]:
    """Like require_csrf_user, but anonymous callers pass through as None."""
    await _check_csrf(request, user, codec)
    return user


# Type aliases for cleaner route definitions
RequireAuth = Depends(get_current_user)
OptionalAuth = Depends(get_optional_user)
RequireCSRF = Depends(require_csrf_user)
