"""Centralized constants for the beatdrops service."""

import enum
from dataclasses import dataclass

# --- Service identity ---


class ServiceName(enum.StrEnum):
    """Service names used for logging and identification."""

    API = "beatdrops-api"


# --- Application metadata ---

APP_TITLE = "beatdrops API"
APP_DESCRIPTION = "Song posts, likes and Spotify lookups"
APP_VERSION = "0.1.0"


# --- Route configuration ---


@dataclass(frozen=True, slots=True)
class _Route:
    """A route prefix paired with its OpenAPI tag."""

    prefix: str
    tag: str


class Routes:
    """API route prefixes and tags."""

    POSTS = _Route("", "posts")
    USERS = _Route("", "users")
    AUTH = _Route("/auth", "auth")
    PLAYER = _Route("", "player")
    HEALTH = "/healthz"


# --- Session cookie ---

SESSION_COOKIE_NAME = "jwt"

# --- Defaults ---

DEFAULT_SPOTIFY_REDIRECT_URI = "http://localhost:3000/home"
DEFAULT_SESSION_EXPIRE_SECONDS = 3600
DEFAULT_OUTBOUND_MIN_INTERVAL_MS = 333
DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./beatdrops.db"
DEFAULT_REQUEST_TIMEOUT = 30.0  # seconds, per outbound Spotify request

# --- Signup validation ---

MIN_PASSWORD_LENGTH = 6

# --- Identifiers ---

MAX_ID = 2**63 - 1  # largest value a BIGINT / SQLite INTEGER column holds
