"""Application settings loaded from environment variables."""

import functools

from pydantic_settings import BaseSettings

from beatdrops.constants import (
    DEFAULT_DATABASE_URL,
    DEFAULT_OUTBOUND_MIN_INTERVAL_MS,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_SESSION_EXPIRE_SECONDS,
    DEFAULT_SPOTIFY_REDIRECT_URI,
)


class AppSettings(BaseSettings):
    """API service configuration."""

    # Spotify app credentials
    SPOTIFY_CLIENT_ID: str = ""
    SPOTIFY_CLIENT_SECRET: str = ""
    SPOTIFY_REDIRECT_URI: str = DEFAULT_SPOTIFY_REDIRECT_URI
    SPOTIFY_REQUEST_TIMEOUT: float = DEFAULT_REQUEST_TIMEOUT

    # Outbound call spacing for every Spotify request
    OUTBOUND_MIN_INTERVAL_MS: int = DEFAULT_OUTBOUND_MIN_INTERVAL_MS

    # Session cookie
    JWT_SECRET: str = ""
    JWT_EXPIRE_SECONDS: int = DEFAULT_SESSION_EXPIRE_SECONDS
    JWT_COOKIE_SECURE: bool = False  # Set True when served over HTTPS

    # Fernet key for stored Spotify refresh tokens; empty disables storage
    TOKEN_ENCRYPTION_KEY: str = ""

    # CORS
    CORS_ALLOWED_ORIGINS: str = "http://localhost:3000"  # comma-separated origins

    model_config = {"env_prefix": ""}


class DatabaseSettings(BaseSettings):
    """Database connection settings loaded from environment variables."""

    database_url: str = DEFAULT_DATABASE_URL
    echo: bool = False
    use_null_pool: bool = True
    pool_pre_ping: bool = True

    model_config = {"env_prefix": ""}


@functools.lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return cached application settings singleton."""
    return AppSettings()
