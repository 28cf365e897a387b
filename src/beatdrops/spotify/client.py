"""Spotify Web API async client routed through the outbound call limiter."""

import logging
from urllib.parse import quote, urlencode

import httpx
from pydantic import ValidationError

from beatdrops.constants import DEFAULT_REQUEST_TIMEOUT
from beatdrops.spotify.constants import (
    CURRENTLY_PLAYING_URL,
    SEARCH_RESULT_LIMIT,
    SEARCH_URL,
)
from beatdrops.spotify.exceptions import (
    SpotifyAuthError,
    SpotifyRateLimitError,
    SpotifyRequestError,
    SpotifyServerError,
    SpotifyTransportError,
)
from beatdrops.spotify.limiter import OutboundCallLimiter
from beatdrops.spotify.models import CurrentlyPlayingResponse, SpotifySearchResponse

logger = logging.getLogger(__name__)


class SpotifyClient:
    """Async Spotify Web API client.

    Takes an access_token per-instance (stateless re: auth). Every request is
    queued on the shared :class:`OutboundCallLimiter`. Failures are raised
    immediately; there is no retry.
    """

    def __init__(
        self,
        access_token: str,
        limiter: OutboundCallLimiter,
        *,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self._access_token = access_token
        self._limiter = limiter
        self._request_timeout = request_timeout

    async def _request(self, method: str, url: str) -> httpx.Response:
        """Send one request through the limiter and map error statuses.

        - 2xx: returned as-is
        - 401: :class:`SpotifyAuthError`
        - 429: :class:`SpotifyRateLimitError`
        - 5xx: :class:`SpotifyServerError`
        - other 4xx: :class:`SpotifyRequestError`
        - no response at all: :class:`SpotifyTransportError`
        """

        async def _send() -> httpx.Response:
            async with httpx.AsyncClient(timeout=self._request_timeout) as client:
                return await client.request(
                    method,
                    url,
                    headers={"Authorization": f"Bearer {self._access_token}"},
                )

        try:
            response = await self._limiter.schedule(_send)
        except httpx.TransportError as exc:
            raise SpotifyTransportError(f"{type(exc).__name__}: {exc}") from exc

        if 200 <= response.status_code < 300:
            return response

        if response.status_code == 401:
            raise SpotifyAuthError("Spotify returned 401 Unauthorized")

        if response.status_code == 429:
            retry_after = _parse_retry_after(response.headers.get("Retry-After"))
            logger.warning("Spotify rate limited (429), retry-after=%s", retry_after)
            raise SpotifyRateLimitError(retry_after=retry_after)

        detail = _error_detail(response)

        if response.status_code >= 500:
            raise SpotifyServerError(status_code=response.status_code, detail=detail)
        raise SpotifyRequestError(status_code=response.status_code, detail=detail)

    # -------------------------------------------------------------------
    # Public API methods
    # -------------------------------------------------------------------

    async def search(
        self,
        query: str,
        *,
        search_type: str = "track",
        limit: int = SEARCH_RESULT_LIMIT,
    ) -> SpotifySearchResponse:
        """GET /search.

        The query is percent-escaped with spaces as ``%20`` and field filters
        (``track:``, ``artist:``) left readable.
        """
        params = {"q": query, "type": search_type, "limit": limit}
        url = f"{SEARCH_URL}?{urlencode(params, quote_via=quote, safe=':')}"
        response = await self._request("GET", url)
        try:
            return SpotifySearchResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise _malformed(response, exc) from exc

    async def get_currently_playing(self) -> CurrentlyPlayingResponse | None:
        """GET /me/player/currently-playing. Returns None when nothing is playing."""
        response = await self._request("GET", CURRENTLY_PLAYING_URL)
        if response.status_code == 204 or not response.content:
            return None
        try:
            return CurrentlyPlayingResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise _malformed(response, exc) from exc


def _malformed(response: httpx.Response, exc: Exception) -> SpotifyRequestError:
    """A 2xx body that is not JSON or does not fit the expected model."""
    logger.warning("Malformed Spotify response (HTTP %d): %s", response.status_code, exc)
    return SpotifyRequestError(status_code=response.status_code, detail="malformed response")


def _parse_retry_after(value: str | None) -> float | None:
    """Seconds from a Retry-After header. The HTTP-date form is ignored."""
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _error_detail(response: httpx.Response) -> str:
    """Pull Spotify's error message out of a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return body.get("error_description") or error
    if response.text:
        return response.text[:200]
    return f"HTTP {response.status_code}"
