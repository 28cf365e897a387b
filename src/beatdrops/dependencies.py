"""Shared FastAPI dependency providers."""

import functools
from typing import Annotated

from fastapi import Depends, Request

from beatdrops.auth.crypto import RefreshTokenVault
from beatdrops.auth.passwords import PasswordHasher
from beatdrops.db.posts import PostRepository
from beatdrops.db.session import DatabaseManager
from beatdrops.db.users import UserRepository
from beatdrops.settings import AppSettings, get_settings
from beatdrops.spotify.limiter import OutboundCallLimiter
from beatdrops.spotify.lookup import SongLookupService
from beatdrops.spotify.tokens import SpotifyTokenBroker

db_manager = DatabaseManager.from_env()


def get_call_limiter(request: Request) -> OutboundCallLimiter:
    """Return the process-wide limiter created with the application."""
    limiter: OutboundCallLimiter = request.app.state.call_limiter
    return limiter


def get_token_broker(
    settings: Annotated[AppSettings, Depends(get_settings)],
    limiter: Annotated[OutboundCallLimiter, Depends(get_call_limiter)],
) -> SpotifyTokenBroker:
    """Provide a token broker bound to the shared limiter."""
    return SpotifyTokenBroker(settings, limiter)


def get_lookup_service(
    settings: Annotated[AppSettings, Depends(get_settings)],
    broker: Annotated[SpotifyTokenBroker, Depends(get_token_broker)],
    limiter: Annotated[OutboundCallLimiter, Depends(get_call_limiter)],
) -> SongLookupService:
    """Provide a song lookup service bound to the shared limiter."""
    return SongLookupService(broker, limiter, request_timeout=settings.SPOTIFY_REQUEST_TIMEOUT)


@functools.lru_cache(maxsize=1)
def get_password_hasher() -> PasswordHasher:
    """Return the cached password hasher."""
    return PasswordHasher()


def get_user_repository(
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
) -> UserRepository:
    return UserRepository(hasher)


def get_post_repository() -> PostRepository:
    return PostRepository()


def get_refresh_vault(
    settings: Annotated[AppSettings, Depends(get_settings)],
) -> RefreshTokenVault | None:
    """Provide the refresh-token vault, or None when no key is configured."""
    return RefreshTokenVault.from_settings(settings)
