"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its stores and services through
interfaces, and this file creates the concrete implementations.
"""

import logging
import secrets
from typing import TYPE_CHECKING

from shared.config import Settings, get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.interfaces import ITokenStore, IUserStore
    from modules.auth.service import AuthService
    from modules.notifications.interfaces import IEmailService
    from modules.ratelimit import RateLimiter
    from modules.sessions import SessionCodec
    from modules.steam.service import SteamService
    from modules.leaderboard.repository import LeaderboardRepository
    from modules.community.repository import CommunityRepository
    from modules.profiles.repository import ProfileRepository
    from modules.inquiries.repository import InquiryRepository
    from modules.ships.repository import ShipRepository
    from modules.admin.repository import AdminStatsRepository

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing. Tests may also
    assign the private attributes directly to inject mocks.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings
        self._rate_limiter: "RateLimiter | None" = None
        self._session_codec: "SessionCodec | None" = None
        self._user_store: "IUserStore | None" = None
        self._token_store: "ITokenStore | None" = None
        self._email: "IEmailService | None" = None
        self._auth: "AuthService | None" = None
        self._steam: "SteamService | None" = None
        self._leaderboard: "LeaderboardRepository | None" = None
        self._community: "CommunityRepository | None" = None
        self._profiles: "ProfileRepository | None" = None
        self._inquiries: "InquiryRepository | None" = None
        self._ships: "ShipRepository | None" = None
        self._admin_stats: "AdminStatsRepository | None" = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def rate_limiter(self) -> "RateLimiter":
        """Get the process-wide rate limiter."""
        if self._rate_limiter is None:
            from modules.ratelimit import RateLimiter, InMemoryRateLimitStore
            self._rate_limiter = RateLimiter(InMemoryRateLimitStore())
        return self._rate_limiter

    @property
    def session_codec(self) -> "SessionCodec":
        """Get the session cookie codec."""
        if self._session_codec is None:
            from modules.sessions import SessionCodec
            secret = self.settings.session_secret
            if not secret:
                if not self.settings.debug:
                    raise RuntimeError(
                        "Session secret missing. Set the ETU_SESSION_SECRET environment variable."
                    )
                logger.warning("ETU_SESSION_SECRET not set; using a throwaway secret (debug mode)")
                secret = secrets.token_hex(32)
            self._session_codec = SessionCodec(
                secret,
                max_age=self.settings.session_max_age,
                cookie_name=self.settings.session_cookie_name,
                secure=self.settings.cookie_secure,
            )
        return self._session_codec

    @property
    def user_store(self) -> "IUserStore":
        """Get the user store instance."""
        if self._user_store is None:
            from modules.auth.store import SupabaseUserStore
            from shared.database import get_supabase_client
            self._user_store = SupabaseUserStore(get_supabase_client())
        return self._user_store

    @property
    def token_store(self) -> "ITokenStore":
        """Get the auth token store instance."""
        if self._token_store is None:
            from modules.auth.tokens import AuthTokenRepository
            from shared.database import get_supabase_client
            self._token_store = AuthTokenRepository(get_supabase_client())
        return self._token_store

    @property
    def email(self) -> "IEmailService":
        """Get the email service instance."""
        if self._email is None:
            from modules.notifications import EmailService
            self._email = EmailService(self.settings)
        return self._email

    @property
    def auth(self) -> "AuthService":
        """Get the auth service instance."""
        if self._auth is None:
            from modules.auth.service import AuthService
            self._auth = AuthService(
                users=self.user_store,
                tokens=self.token_store,
                email=self.email,
                password_reset_ttl=self.settings.password_reset_ttl,
                magic_link_ttl=self.settings.magic_link_ttl,
            )
        return self._auth

    @property
    def steam(self) -> "SteamService":
        """Get the Steam sign-in service instance."""
        if self._steam is None:
            from modules.steam.service import SteamService
            from shared.database import get_supabase_client
            self._steam = SteamService(get_supabase_client(), self.settings)
        return self._steam

    @property
    def leaderboard(self) -> "LeaderboardRepository":
        if self._leaderboard is None:
            from modules.leaderboard.repository import LeaderboardRepository
            from shared.database import get_supabase_client
            self._leaderboard = LeaderboardRepository(get_supabase_client())
        return self._leaderboard

    @property
    def community(self) -> "CommunityRepository":
        if self._community is None:
            from modules.community.repository import CommunityRepository
            from shared.database import get_supabase_client
            self._community = CommunityRepository(get_supabase_client())
        return self._community

    @property
    def profiles(self) -> "ProfileRepository":
        if self._profiles is None:
            from modules.profiles.repository import ProfileRepository
            from shared.database import get_supabase_client
            self._profiles = ProfileRepository(get_supabase_client())
        return self._profiles

    @property
    def inquiries(self) -> "InquiryRepository":
        if self._inquiries is None:
            from modules.inquiries.repository import InquiryRepository
            from shared.database import get_supabase_client
            self._inquiries = InquiryRepository(get_supabase_client())
        return self._inquiries

    @property
    def ships(self) -> "ShipRepository":
        if self._ships is None:
            from modules.ships.repository import ShipRepository
            from shared.database import get_supabase_client
            self._ships = ShipRepository(get_supabase_client())
        return self._ships

    @property
    def admin_stats(self) -> "AdminStatsRepository":
        if self._admin_stats is None:
            from modules.admin.repository import AdminStatsRepository
            from shared.database import get_supabase_client
            self._admin_stats = AdminStatsRepository(get_supabase_client())
        return self._admin_stats

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self.__init__(self._settings)


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def set_container(container: ServiceContainer) -> None:
    """Install a pre-built container (tests)."""
    global _container
    _container = container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_app_settings() -> Settings:
    return get_container().settings


def get_rate_limiter() -> "RateLimiter":
    return get_container().rate_limiter


def get_session_codec() -> "SessionCodec":
    return get_container().session_codec


def get_user_store() -> "IUserStore":
    return get_container().user_store


def get_auth_service() -> "AuthService":
    return get_container().auth


def get_steam_service() -> "SteamService":
    return get_container().steam


def get_leaderboard_repository() -> "LeaderboardRepository":
    return get_container().leaderboard


def get_community_repository() -> "CommunityRepository":
    return get_container().community


def get_profile_repository() -> "ProfileRepository":
    return get_container().profiles


def get_inquiry_repository() -> "InquiryRepository":
    return get_container().inquiries


def get_ship_repository() -> "ShipRepository":
    return get_container().ships


def get_admin_stats_repository() -> "AdminStatsRepository":
    return get_container().admin_stats
