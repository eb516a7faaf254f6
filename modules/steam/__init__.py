"""
Steam module.

Steam sign-in over OpenID 2.0. The assertion returned to the callback is
re-verified with Steam (check_authentication) before its Steam ID is
trusted.

Public API:
- SteamService: login URL, assertion verification, profile lookup
- parse_steam_id, is_valid_steam_id
"""

from .service import SteamService, parse_steam_id, is_valid_steam_id
from .exceptions import SteamAuthError

__all__ = [
    "SteamService",
    "parse_steam_id",
    "is_valid_steam_id",
    "SteamAuthError",
]
