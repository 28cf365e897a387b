"""Session token creation and validation."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from fastapi import Response

from beatdrops.constants import SESSION_COOKIE_NAME
from beatdrops.settings import AppSettings

logger = logging.getLogger(__name__)


class SessionTokenError(Exception):
    """Base exception for session token operations."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


class SessionTokenExpiredError(SessionTokenError):
    """Token has expired."""


class SessionTokenInvalidError(SessionTokenError):
    """Token is invalid (bad signature, malformed, missing claims)."""


class SessionTokenService:
    """Creates and validates the signed session token kept in the ``jwt`` cookie.

    Tokens are HS256-signed with ``JWT_SECRET`` and carry the user id in
    ``sub``. They expire after ``JWT_EXPIRE_SECONDS``.
    """

    ALGORITHM = "HS256"

    def __init__(self, settings: AppSettings) -> None:
        secret = settings.JWT_SECRET
        if not secret or not secret.strip():
            raise ValueError("JWT_SECRET must be set to a non-empty value for session signing")
        self._secret = secret
        self._expire_seconds = settings.JWT_EXPIRE_SECONDS
        self._cookie_secure = settings.JWT_COOKIE_SECURE

    def create_token(self, user_id: int) -> str:
        """Create a session token for the given user."""
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + timedelta(seconds=self._expire_seconds),
        }
        return jwt.encode(payload, self._secret, algorithm=self.ALGORITHM)

    def decode_token(self, token: str) -> int:
        """Decode and validate a session token. Returns user_id.

        Raises:
            SessionTokenExpiredError: If the token has expired.
            SessionTokenInvalidError: If the token is malformed or has a bad signature.
        """
        try:
            payload: dict[str, Any] = jwt.decode(token, self._secret, algorithms=[self.ALGORITHM])
        except jwt.ExpiredSignatureError as exc:
            raise SessionTokenExpiredError("Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise SessionTokenInvalidError(f"Invalid token: {exc}") from exc

        if "sub" not in payload:
            raise SessionTokenInvalidError("Token missing 'sub' claim")
        try:
            return int(payload["sub"])
        except (ValueError, TypeError) as exc:
            raise SessionTokenInvalidError(f"Invalid 'sub' claim: {payload['sub']!r}") from exc

    @property
    def expire_seconds(self) -> int:
        """Session lifetime in seconds (for cookie max-age)."""
        return self._expire_seconds

    def set_cookie(self, response: Response, user_id: int) -> None:
        """Issue a session token for *user_id* as an HTTP-only cookie."""
        response.set_cookie(
            key=SESSION_COOKIE_NAME,
            value=self.create_token(user_id),
            max_age=self._expire_seconds,
            httponly=True,
            secure=self._cookie_secure,
            samesite="lax",
            path="/",
        )

    @staticmethod
    def clear_cookie(response: Response) -> None:
        """Remove the session cookie."""
        response.delete_cookie(SESSION_COOKIE_NAME, path="/")
