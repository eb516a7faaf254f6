"""
Steam sign-in endpoints.

A Steam account already linked to a profile is signed in; an unknown
Steam account is sent to the site to create or link an account.
"""

import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from api.dependencies import get_app_settings, get_session_codec, get_steam_service, get_user_store
from modules.auth.interfaces import IUserStore
from modules.sessions import SessionCodec
from shared.config import Settings
from shared.exceptions import EtuError
from shared.models import Role

from .exceptions import SteamAuthError
from .service import SteamService

logger = logging.getLogger(__name__)

router = APIRouter()


def _site(settings: Settings, path: str, **params: str) -> RedirectResponse:
    query = f"?{urlencode(params)}" if params else ""
    return RedirectResponse(f"{settings.site_url.rstrip('/')}{path}{query}", status_code=307)


@router.get("/auth")
async def steam_login(steam: SteamService = Depends(get_steam_service)) -> RedirectResponse:
    """Send the browser to Steam's login page."""
    return RedirectResponse(steam.login_url(), status_code=307)


@router.get("/callback")
async def steam_callback(
    request: Request,
    steam: SteamService = Depends(get_steam_service),
    users: IUserStore = Depends(get_user_store),
    codec: SessionCodec = Depends(get_session_codec),
    settings: Settings = Depends(get_app_settings),
) -> RedirectResponse:
    """Verify Steam's assertion and sign in the linked profile."""
    try:
        steam_id = await steam.verify_assertion(request.query_params)
    except SteamAuthError as e:
        return _site(settings, "/error", message=e.code)

    try:
        summary = await steam.fetch_player_summary(steam_id)
        profile = steam.find_profile(steam_id)

        if profile is None:
            username = (summary or {}).get("personaname") or "Commander"
            return _site(settings, "/", message="steam_new_user", steam_id=steam_id, username=username)

        steam.refresh_profile(profile, summary)
        account = await users.get_auth_user(profile["id"])
    except EtuError as e:
        logger.error("Steam callback failed: %s", e.message)
        return _site(settings, "/error", message="steam_callback_error")

    response = _site(settings, "/dashboard")
    codec.set_cookie(
        response,
        profile["id"],
        account.email if account else "",
        Role.parse(profile.get("role")),
    )
    logger.info("User %s signed in with Steam", profile["id"])
    return response
