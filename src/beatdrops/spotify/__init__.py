"""Spotify API client, token broker, call limiter and song lookup."""

from beatdrops.spotify.client import SpotifyClient
from beatdrops.spotify.exceptions import (
    SpotifyAuthError,
    SpotifyClientError,
    SpotifyRateLimitError,
    SpotifyRequestError,
    SpotifyServerError,
    SpotifyTransportError,
)
from beatdrops.spotify.limiter import OutboundCallLimiter
from beatdrops.spotify.lookup import PostDraft, SongLookupService
from beatdrops.spotify.tokens import SpotifyTokenBroker, TokenGrant

__all__ = [
    "OutboundCallLimiter",
    "PostDraft",
    "SongLookupService",
    "SpotifyAuthError",
    "SpotifyClient",
    "SpotifyClientError",
    "SpotifyRateLimitError",
    "SpotifyRequestError",
    "SpotifyServerError",
    "SpotifyTokenBroker",
    "SpotifyTransportError",
    "TokenGrant",
]
