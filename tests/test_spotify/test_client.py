"""Tests for SpotifyClient."""

import httpx
import pytest
import respx

from beatdrops.spotify.client import SpotifyClient
from beatdrops.spotify.constants import CURRENTLY_PLAYING_URL, SEARCH_URL
from beatdrops.spotify.exceptions import (
    SpotifyAuthError,
    SpotifyRateLimitError,
    SpotifyRequestError,
    SpotifyServerError,
    SpotifyTransportError,
)
from beatdrops.spotify.limiter import OutboundCallLimiter


@pytest.fixture
def client() -> SpotifyClient:
    return SpotifyClient("test-token", OutboundCallLimiter(0))


@respx.mock
async def test_search_sends_bearer_and_encoded_query(client: SpotifyClient) -> None:
    route = respx.get(SEARCH_URL).mock(return_value=httpx.Response(200, json={"tracks": {"items": []}}))

    result = await client.search("track:Here Comes the Sun artist:The Beatles", limit=10)

    assert result.tracks is not None
    assert result.tracks.items == []
    request = route.calls[0].request
    assert request.headers["Authorization"] == "Bearer test-token"
    raw_query = request.url.query.decode()
    assert "q=track:Here%20Comes%20the%20Sun%20artist:The%20Beatles" in raw_query
    assert "type=track" in raw_query
    assert "limit=10" in raw_query


@respx.mock
async def test_401_raises_auth_error(client: SpotifyClient) -> None:
    respx.get(SEARCH_URL).mock(return_value=httpx.Response(401, json={"error": {"message": "The access token expired"}}))

    with pytest.raises(SpotifyAuthError, match="401"):
        await client.search("track:x artist:y")


@respx.mock
async def test_429_raises_rate_limit_error(client: SpotifyClient) -> None:
    respx.get(SEARCH_URL).mock(return_value=httpx.Response(429, headers={"Retry-After": "2"}))

    with pytest.raises(SpotifyRateLimitError) as exc_info:
        await client.search("track:x artist:y")
    assert exc_info.value.retry_after == 2.0


@respx.mock
async def test_429_with_http_date_retry_after(client: SpotifyClient) -> None:
    respx.get(SEARCH_URL).mock(
        return_value=httpx.Response(429, headers={"Retry-After": "Wed, 21 Oct 2026 07:28:00 GMT"})
    )

    with pytest.raises(SpotifyRateLimitError) as exc_info:
        await client.search("track:x artist:y")
    assert exc_info.value.retry_after is None


@respx.mock
async def test_5xx_raises_server_error(client: SpotifyClient) -> None:
    respx.get(SEARCH_URL).mock(return_value=httpx.Response(503, json={"error": {"message": "Service unavailable"}}))

    with pytest.raises(SpotifyServerError) as exc_info:
        await client.search("track:x artist:y")
    assert exc_info.value.status_code == 503
    assert exc_info.value.detail == "Service unavailable"


@respx.mock
async def test_other_4xx_raises_request_error(client: SpotifyClient) -> None:
    respx.get(SEARCH_URL).mock(return_value=httpx.Response(400, json={"error": {"message": "No search query"}}))

    with pytest.raises(SpotifyRequestError) as exc_info:
        await client.search("")
    assert exc_info.value.status_code == 400


@respx.mock
async def test_transport_error(client: SpotifyClient) -> None:
    respx.get(SEARCH_URL).mock(side_effect=httpx.ConnectTimeout("timed out"))

    with pytest.raises(SpotifyTransportError, match="ConnectTimeout"):
        await client.search("track:x artist:y")


@respx.mock
async def test_currently_playing(client: SpotifyClient) -> None:
    respx.get(CURRENTLY_PLAYING_URL).mock(
        return_value=httpx.Response(
            200,
            json={"is_playing": True, "progress_ms": 1000, "item": {"name": "Something", "artists": []}},
        )
    )

    playing = await client.get_currently_playing()

    assert playing is not None
    assert playing.is_playing is True
    assert playing.item is not None
    assert playing.item.name == "Something"


@respx.mock
async def test_currently_playing_nothing(client: SpotifyClient) -> None:
    respx.get(CURRENTLY_PLAYING_URL).mock(return_value=httpx.Response(204))

    assert await client.get_currently_playing() is None


@respx.mock
async def test_search_non_json_body_raises_request_error(client: SpotifyClient) -> None:
    respx.get(SEARCH_URL).mock(return_value=httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(SpotifyRequestError) as exc_info:
        await client.search("track:x artist:y")
    assert exc_info.value.status_code == 200
    assert exc_info.value.detail == "malformed response"


@respx.mock
async def test_search_track_without_name_raises_request_error(client: SpotifyClient) -> None:
    respx.get(SEARCH_URL).mock(return_value=httpx.Response(200, json={"tracks": {"items": [{"id": "x"}]}}))

    with pytest.raises(SpotifyRequestError, match="malformed response"):
        await client.search("track:x artist:y")


@respx.mock
async def test_currently_playing_malformed_body(client: SpotifyClient) -> None:
    respx.get(CURRENTLY_PLAYING_URL).mock(return_value=httpx.Response(200, text="not json"))

    with pytest.raises(SpotifyRequestError, match="malformed response"):
        await client.get_currently_playing()
