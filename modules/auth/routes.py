"""
Authentication API endpoints.

Password login and signup, logout, session status, password reset,
magic-link sign-in and the OAuth code callback. JSON endpoints raise
module exceptions (rendered by api/errors.py); browser callbacks answer
with redirects instead.
"""

import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, Response
from fastapi.responses import RedirectResponse

from api.dependencies import (
    get_app_settings,
    get_auth_service,
    get_rate_limiter,
    get_session_codec,
    get_user_store,
)
from api.middleware.auth import get_session, require_session
from modules.ratelimit import RateLimiter, client_identifier, client_ip, email_identifier
from modules.sessions import Session, SessionCodec, validate_session
from shared.config import Settings
from shared.exceptions import EtuError

from .exceptions import AccountNotFoundError, ExpiredAuthTokenError, InvalidAuthTokenError
from .interfaces import IUserStore
from .models import (
    AuthResponse,
    CSRFTokenResponse,
    EmailRequest,
    LoginRequest,
    MessageResponse,
    ResetPasswordRequest,
    SessionStatusResponse,
    SessionUser,
    SignupRequest,
    TokenIssue,
    TokenStatusResponse,
    UserSummary,
)
from .service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter()
csrf_router = APIRouter()

DEFAULT_REDIRECT = "/dashboard"
RESET_LINK_SENT = "If an account exists with this email, a password reset link has been sent."
MAGIC_LINK_SENT = "If an account exists with this email, a magic sign-in link has been sent."


def _token_issue(request: Request) -> TokenIssue:
    return TokenIssue(
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent") or "unknown",
    )


def _safe_redirect(target: Optional[str]) -> str:
    """Only same-site relative paths are followed after sign-in."""
    if target and target.startswith("/") and not target.startswith("//") and "\\" not in target:
        return target
    return DEFAULT_REDIRECT


def _site_redirect(settings: Settings, path: str) -> RedirectResponse:
    return RedirectResponse(f"{settings.site_url.rstrip('/')}{path}", status_code=307)


def _login_error(settings: Settings, error: str) -> RedirectResponse:
    return _site_redirect(settings, f"/login?{urlencode({'error': error})}")


# -----------------------------------------------------------------------------
# Password login / signup / logout
# -----------------------------------------------------------------------------


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    service: AuthService = Depends(get_auth_service),
    limiter: RateLimiter = Depends(get_rate_limiter),
    codec: SessionCodec = Depends(get_session_codec),
) -> AuthResponse:
    """
    Sign in with email and password.

    Attempts are limited per email and client; a successful login clears
    the counter.
    """
    identifier = f"login:{email_identifier(body.email, request)}"
    limiter.enforce("auth", identifier, "Too many login attempts. Please try again later.")

    user, role = await service.login(body.email, body.password)
    limiter.reset(identifier)

    codec.set_cookie(response, user.id, user.email, role)
    return AuthResponse(user=UserSummary(id=user.id, email=user.email, role=role))


@router.post("/signup", response_model=AuthResponse)
async def signup(
    body: SignupRequest,
    request: Request,
    response: Response,
    service: AuthService = Depends(get_auth_service),
    limiter: RateLimiter = Depends(get_rate_limiter),
    codec: SessionCodec = Depends(get_session_codec),
) -> AuthResponse:
    """Create an account and sign it in."""
    limiter.enforce(
        "signup",
        f"signup:{client_identifier(request)}",
        "Too many signup attempts. Please try again later.",
    )

    user, role = await service.signup(body.email, body.password, body.username)

    codec.set_cookie(response, user.id, user.email, role)
    return AuthResponse(
        message="Account created successfully",
        user=UserSummary(id=user.id, email=user.email, role=role),
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    codec: SessionCodec = Depends(get_session_codec),
) -> MessageResponse:
    """Expire the session cookie. The cookie value itself stays valid until exp."""
    codec.delete_cookie(response)
    return MessageResponse(message="Logged out successfully")


@router.get("/session", response_model=SessionStatusResponse)
async def session_status(
    session: Optional[Session] = Depends(get_session),
    users: IUserStore = Depends(get_user_store),
) -> SessionStatusResponse:
    """Report the current session, re-checked against the live profile."""
    validation = await validate_session(session, users)
    if not validation.valid or session is None:
        return SessionStatusResponse(authenticated=False)

    profile = validation.user or {}
    return SessionStatusResponse(
        authenticated=True,
        user=SessionUser(
            id=session.user_id,
            email=session.email,
            username=profile.get("username"),
            role=session.role,
            avatar_url=profile.get("avatar_url"),
            steam_id=profile.get("steam_id"),
            faction_choice=profile.get("faction_choice"),
        ),
    )


@csrf_router.get("/csrf-token", response_model=CSRFTokenResponse)
async def csrf_token(session: Session = Depends(require_session)) -> CSRFTokenResponse:
    """CSRF token to echo in the x-csrf-token header."""
    return CSRFTokenResponse(csrf_token=session.csrf_token)


# -----------------------------------------------------------------------------
# Password reset
# -----------------------------------------------------------------------------


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    body: EmailRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    service: AuthService = Depends(get_auth_service),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> MessageResponse:
    """
    Email a password reset link.

    The answer is the same whether or not the account exists. The account
    lookup and the email run after the response is sent, so response time
    does not depend on the account either.
    """
    limiter.enforce(
        "forgot_password",
        f"forgot-password:{client_identifier(request)}",
        "Too many password reset requests. Please try again later.",
    )
    background_tasks.add_task(service.request_password_reset, body.email, _token_issue(request))
    return MessageResponse(message=RESET_LINK_SENT)


@router.get("/reset-password", response_model=TokenStatusResponse, response_model_exclude_none=True)
async def verify_reset_token(
    token: str = Query(..., min_length=1),
    service: AuthService = Depends(get_auth_service),
) -> TokenStatusResponse:
    """Check a reset token without consuming it."""
    return service.verify_reset_token(token)


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    body: ResetPasswordRequest,
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Set a new password with a reset token."""
    await service.reset_password(body.token, body.password)
    return MessageResponse(message="Password has been reset successfully")


# -----------------------------------------------------------------------------
# Magic link
# -----------------------------------------------------------------------------


@router.post("/magic-link", response_model=MessageResponse)
async def request_magic_link(
    body: EmailRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    service: AuthService = Depends(get_auth_service),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> MessageResponse:
    """
    Email a magic sign-in link.

    Like forgot-password, the work happens after the response.
    """
    limiter.enforce(
        "magic_link",
        f"magic-link:{client_identifier(request)}",
        "Too many magic link requests. Please try again later.",
    )
    background_tasks.add_task(service.request_magic_link, body.email, _token_issue(request))
    return MessageResponse(message=MAGIC_LINK_SENT)


@router.get("/magic-link/callback")
async def magic_link_callback(
    token: Optional[str] = Query(None),
    redirect: Optional[str] = Query(None),
    service: AuthService = Depends(get_auth_service),
    codec: SessionCodec = Depends(get_session_codec),
    settings: Settings = Depends(get_app_settings),
) -> RedirectResponse:
    """Landing page of the magic-link email: consume the token and sign in."""
    if not token:
        return _login_error(settings, "invalid_token")

    try:
        user, role = await service.consume_magic_link(token)
    except InvalidAuthTokenError:
        return _login_error(settings, "invalid_token")
    except ExpiredAuthTokenError:
        return _login_error(settings, "expired_token")
    except AccountNotFoundError:
        return _login_error(settings, "user_not_found")
    except EtuError as e:
        logger.error("Magic link callback failed: %s", e.message)
        return _login_error(settings, "server_error")

    response = _site_redirect(settings, _safe_redirect(redirect))
    codec.set_cookie(response, user.id, user.email, role)
    return response


# -----------------------------------------------------------------------------
# OAuth
# -----------------------------------------------------------------------------


@router.get("/callback")
async def oauth_callback(
    code: Optional[str] = Query(None),
    users: IUserStore = Depends(get_user_store),
    codec: SessionCodec = Depends(get_session_codec),
    settings: Settings = Depends(get_app_settings),
) -> RedirectResponse:
    """Exchange an OAuth authorization code and sign the account in."""
    if not code:
        return _site_redirect(settings, "/login")

    try:
        user = await users.exchange_code_for_session(code)
        if user is None:
            return _login_error(settings, "auth_failed")
        role = await users.get_profile_role(user.id)
    except EtuError as e:
        logger.error("OAuth callback failed: %s", e.message)
        return _login_error(settings, "server_error")

    response = _site_redirect(settings, DEFAULT_REDIRECT)
    codec.set_cookie(response, user.id, user.email, role)
    return response
