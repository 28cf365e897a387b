"""Spotify token exchange: client-credentials, authorization-code and refresh grants."""

import base64
import logging
from dataclasses import dataclass
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from beatdrops.errors import UpstreamAuthError
from beatdrops.settings import AppSettings
from beatdrops.spotify.constants import SPOTIFY_AUTHORIZE_URL, SPOTIFY_SCOPES, SPOTIFY_TOKEN_URL
from beatdrops.spotify.limiter import OutboundCallLimiter
from beatdrops.spotify.models import SpotifyTokenResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TokenGrant:
    """Access token issued by Spotify, with its refresh token when one was issued."""

    access_token: str
    expires_in: int
    refresh_token: str | None = None


class SpotifyTokenBroker:
    """Obtains Spotify access tokens for this app and for its users.

    Each call is an independent POST to the accounts service, authenticated
    with the app's client id/secret as an HTTP Basic credential and queued on
    the shared :class:`OutboundCallLimiter`. No tokens are cached.
    """

    def __init__(self, settings: AppSettings, limiter: OutboundCallLimiter) -> None:
        self._settings = settings
        self._limiter = limiter

    def authorization_url(self) -> str:
        """Build the Spotify authorization URL the browser is sent to."""
        params = {
            "client_id": self._settings.SPOTIFY_CLIENT_ID,
            "response_type": "code",
            "redirect_uri": self._settings.SPOTIFY_REDIRECT_URI,
            "scope": SPOTIFY_SCOPES,
        }
        return f"{SPOTIFY_AUTHORIZE_URL}?{urlencode(params)}"

    async def get_client_credentials_token(self) -> str:
        """Exchange the app's own credentials for a bearer token.

        Raises:
            UpstreamAuthError: If the exchange fails for any reason.
        """
        grant = await self._request_token({"grant_type": "client_credentials"}, "client credentials grant")
        return grant.access_token

    async def exchange_auth_code(self, code: str) -> TokenGrant:
        """Exchange a user's authorization code for access and refresh tokens.

        Raises:
            UpstreamAuthError: If Spotify rejects the code or is unreachable.
        """
        grant = await self._request_token(
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self._settings.SPOTIFY_REDIRECT_URI,
            },
            "exchange authorization code",
        )
        if grant.refresh_token is None:
            raise UpstreamAuthError("exchange authorization code", "Spotify did not return a refresh token.")
        return grant

    async def refresh(self, refresh_token: str) -> TokenGrant:
        """Exchange a refresh token for a new access token.

        Spotify keeps the existing refresh token valid, so the returned grant
        carries ``refresh_token=None`` unless Spotify chose to rotate it.

        Raises:
            UpstreamAuthError: If Spotify rejects the refresh token or is unreachable.
        """
        return await self._request_token(
            {"grant_type": "refresh_token", "refresh_token": refresh_token},
            "refresh access token",
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _basic_credential(self) -> str:
        raw = f"{self._settings.SPOTIFY_CLIENT_ID}:{self._settings.SPOTIFY_CLIENT_SECRET}"
        return base64.b64encode(raw.encode("utf-8")).decode("ascii")

    async def _request_token(self, data: dict[str, str], action: str) -> TokenGrant:
        """POST *data* to the token endpoint and parse the grant."""

        async def _send() -> httpx.Response:
            async with httpx.AsyncClient(timeout=self._settings.SPOTIFY_REQUEST_TIMEOUT) as client:
                return await client.post(
                    SPOTIFY_TOKEN_URL,
                    data=data,
                    headers={"Authorization": f"Basic {self._basic_credential()}"},
                )

        try:
            response = await self._limiter.schedule(_send)
        except httpx.TransportError as exc:
            logger.warning("Spotify token endpoint unreachable during %s: %s", action, exc)
            raise UpstreamAuthError(action, f"Could not reach Spotify: {type(exc).__name__}") from exc

        self._check_spotify_response(response, action)

        try:
            token_data = SpotifyTokenResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise UpstreamAuthError(action, "Spotify returned a malformed token response.") from exc

        return TokenGrant(
            access_token=token_data.access_token,
            expires_in=token_data.expires_in,
            refresh_token=token_data.refresh_token,
        )

    @staticmethod
    def _check_spotify_response(response: httpx.Response, action: str) -> None:
        """Raise UpstreamAuthError with a descriptive message if the response is not OK."""
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            if status == 429:
                detail = f"Rate limited by Spotify while trying to {action}. Please try again later."
            elif status >= 500:
                detail = f"Spotify server error while trying to {action}. This is likely a transient issue."
            elif status == 401:
                detail = f"Spotify authentication failed while trying to {action}. Check client credentials."
            elif status == 400:
                detail = f"Spotify rejected the request to {action}. The code or token may have expired."
            else:
                detail = f"Spotify returned HTTP {status} while trying to {action}."
            logger.warning("Spotify token request failed: %s", detail)
            raise UpstreamAuthError(action, detail) from exc
