"""
Centralized configuration for the Explore the Universe backend.

All settings are loaded from environment variables (prefixed with ETU_)
with sensible defaults for local development.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ETU_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Explore the Universe API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""
    supabase_jwt_secret: str = ""
    supabase_db_url: str = ""

    # Session cookie
    session_secret: str = ""
    session_cookie_name: str = "etu_session"
    session_max_age: int = 60 * 60 * 24 * 7  # seconds
    cookie_secure: bool = True

    # Site (used for redirects and email links)
    site_url: str = "http://localhost:3000"
    site_name: str = "Explore the Universe 2175"

    # Email (Resend)
    resend_api_key: str = ""
    from_email: str = "noreply@exploretheuniverse2175.com"

    # Steam
    steam_web_api_key: str = ""

    # Rate limiting
    rate_limit_sweep_interval: int = 60 * 60  # seconds

    # Auth token lifetimes
    password_reset_ttl: int = 60 * 60  # seconds
    magic_link_ttl: int = 15 * 60  # seconds


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
