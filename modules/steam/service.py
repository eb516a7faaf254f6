"""
Steam OpenID 2.0 sign-in.

Flow: redirect to Steam with checkid_setup; Steam redirects back with an
id_res assertion; the assertion is posted back to Steam with
check_authentication and trusted only if Steam answers is_valid:true.
"""

import logging
import re
from typing import Any, Mapping, Optional
from urllib.parse import urlencode

import httpx
from supabase import Client

from shared.config import Settings
from shared.repository import BaseRepository

from .exceptions import SteamAuthError

logger = logging.getLogger(__name__)

STEAM_OPENID_URL = "https://steamcommunity.com/openid/login"
STEAM_PLAYER_SUMMARIES_URL = "https://api.steampowered.com/ISteamUser/GetPlayerSummaries/v2/"
STEAM_ID_PREFIX = "https://steamcommunity.com/openid/id/"
OPENID_NS = "http://specs.openid.net/auth/2.0"
IDENTIFIER_SELECT = "http://specs.openid.net/auth/2.0/identifier_select"

_STEAM_ID = re.compile(r"^\d{17}$")


def is_valid_steam_id(steam_id: Optional[str]) -> bool:
    """Steam IDs are 17-digit numbers."""
    return bool(steam_id and _STEAM_ID.match(steam_id))


def parse_steam_id(claimed_id: str) -> Optional[str]:
    """Steam ID from a claimed_id URL, or None if it is not a Steam identity."""
    if not claimed_id.startswith(STEAM_ID_PREFIX):
        return None
    steam_id = claimed_id[len(STEAM_ID_PREFIX):].rstrip("/")
    return steam_id if is_valid_steam_id(steam_id) else None


class SteamService(BaseRepository[dict]):
    """
    Steam sign-in helpers plus the profile lookups the callback needs.

    Args:
        db: Service-role Supabase client
        settings: Application settings (site URL, Steam Web API key)
    """

    TIMEOUT_SECONDS = 10.0

    def __init__(self, db: Client, settings: Settings):
        super().__init__(db)
        self._site_url = settings.site_url.rstrip("/")
        self._api_key = settings.steam_web_api_key

    @property
    def return_url(self) -> str:
        return f"{self._site_url}/api/steam/callback"

    def login_url(self) -> str:
        """Steam login page URL for this site."""
        params = {
            "openid.ns": OPENID_NS,
            "openid.mode": "checkid_setup",
            "openid.return_to": self.return_url,
            "openid.realm": self._site_url,
            "openid.identity": IDENTIFIER_SELECT,
            "openid.claimed_id": IDENTIFIER_SELECT,
        }
        return f"{STEAM_OPENID_URL}?{urlencode(params)}"

    async def verify_assertion(self, params: Mapping[str, str]) -> str:
        """
        Validate a callback's OpenID parameters and return the Steam ID.

        Raises:
            SteamAuthError: With a code naming the failed check
        """
        mode = params.get("openid.mode")
        if mode != "id_res":
            logger.warning("Steam callback with invalid OpenID mode: %s", mode)
            raise SteamAuthError("steam_auth_invalid_mode")

        claimed_id = params.get("openid.claimed_id")
        identity = params.get("openid.identity")
        if not claimed_id or not identity or claimed_id != identity:
            logger.warning("Steam callback claimed_id and identity mismatch")
            raise SteamAuthError("steam_auth_failed")

        if not claimed_id.startswith(STEAM_ID_PREFIX):
            logger.warning("Steam callback with foreign claimed_id: %s", claimed_id)
            raise SteamAuthError("steam_auth_invalid_domain")

        if not await self._check_authentication(params):
            logger.warning("Steam OpenID signature verification failed")
            raise SteamAuthError("steam_auth_signature_invalid")

        steam_id = parse_steam_id(claimed_id)
        if steam_id is None:
            logger.warning("Invalid Steam ID in claimed_id: %s", claimed_id)
            raise SteamAuthError("invalid_steam_id")
        return steam_id

    async def _check_authentication(self, params: Mapping[str, str]) -> bool:
        """Ask Steam whether it issued this assertion."""
        payload = {k: v for k, v in params.items() if k.startswith("openid.")}
        payload["openid.mode"] = "check_authentication"

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    STEAM_OPENID_URL,
                    data=payload,
                    timeout=self.TIMEOUT_SECONDS,
                )
        except httpx.HTTPError as e:
            logger.error("Steam OpenID verification request failed: %s", e)
            return False

        return "is_valid:true" in response.text

    async def fetch_player_summary(self, steam_id: str) -> Optional[dict[str, Any]]:
        """Public Steam profile (personaname, avatarfull, ...), if an API key is set."""
        if not self._api_key:
            return None

        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    STEAM_PLAYER_SUMMARIES_URL,
                    params={"key": self._api_key, "steamids": steam_id},
                    timeout=self.TIMEOUT_SECONDS,
                )
                response.raise_for_status()
                players = response.json().get("response", {}).get("players") or []
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Failed to fetch Steam player summary: %s", e)
            return None

        return players[0] if players else None

    def find_profile(self, steam_id: str) -> Optional[dict[str, Any]]:
        query = self._db.table("profiles").select("*").eq("steam_id", steam_id)
        return self._first(self._execute(query, "look up Steam profile"))

    def refresh_profile(self, profile: dict[str, Any], summary: Optional[dict[str, Any]]) -> None:
        """Copy the latest Steam name and avatar onto a linked profile."""
        if not summary:
            return
        changes = {
            "username": summary.get("personaname") or profile.get("username"),
            "avatar_url": summary.get("avatarfull") or profile.get("avatar_url"),
        }
        query = self._db.table("profiles").update(changes).eq("id", profile["id"])
        self._execute(query, "update Steam profile")
