"""Tests for SongLookupService."""

from typing import Any

import httpx
import pytest
import respx

from beatdrops.errors import LookupFailed, UpstreamAuthError
from beatdrops.settings import AppSettings
from beatdrops.spotify.constants import SEARCH_URL, SPOTIFY_TOKEN_URL
from beatdrops.spotify.limiter import OutboundCallLimiter
from beatdrops.spotify.lookup import SongLookupService, build_track_query
from beatdrops.spotify.tokens import SpotifyTokenBroker

APP_TOKEN_RESPONSE = {"access_token": "app-token", "token_type": "Bearer", "expires_in": 3600}


def _track(
    name: str = "Yesterday - Remastered 2009",
    artist: str = "The Beatles",
    url: str | None = "https://open.spotify.com/track/3BQHpFgAp4l80e1XslIjNI",
) -> dict[str, Any]:
    return {
        "id": "3BQHpFgAp4l80e1XslIjNI",
        "name": name,
        "uri": "spotify:track:3BQHpFgAp4l80e1XslIjNI",
        "artists": [{"id": "3WrFJ7ztbogyGnTHbHJFl2", "name": artist}, {"name": "George Martin"}],
        "album": {
            "name": "Help! (Remastered)",
            "images": [
                {"url": "https://i.scdn.co/image/large", "height": 640, "width": 640},
                {"url": "https://i.scdn.co/image/small", "height": 64, "width": 64},
                {"url": "https://i.scdn.co/image/medium", "height": 300, "width": 300},
            ],
        },
        "external_urls": {"spotify": url} if url else {},
    }


@pytest.fixture
def service(settings: AppSettings) -> SongLookupService:
    limiter = OutboundCallLimiter(0)
    return SongLookupService(SpotifyTokenBroker(settings, limiter), limiter, request_timeout=5.0)


@respx.mock
async def test_lookup_normalizes_top_match(service: SongLookupService) -> None:
    respx.post(SPOTIFY_TOKEN_URL).mock(return_value=httpx.Response(200, json=APP_TOKEN_RESPONSE))
    search = respx.get(SEARCH_URL).mock(
        return_value=httpx.Response(200, json={"tracks": {"items": [_track(), _track(name="Yesterday - Live")]}})
    )

    draft = await service.lookup("Yesterday", "Beatles", "Liverpool")

    assert draft.title == "Yesterday - Remastered 2009"
    assert draft.artist == "The Beatles"
    assert draft.likes == 0
    assert draft.url == "https://open.spotify.com/track/3BQHpFgAp4l80e1XslIjNI"
    assert draft.location == "Liverpool"
    assert draft.image_url == "https://i.scdn.co/image/small"
    assert draft.uri == "spotify:track:3BQHpFgAp4l80e1XslIjNI"
    assert search.calls[0].request.headers["Authorization"] == "Bearer app-token"


@respx.mock
async def test_lookup_no_matches(service: SongLookupService) -> None:
    respx.post(SPOTIFY_TOKEN_URL).mock(return_value=httpx.Response(200, json=APP_TOKEN_RESPONSE))
    respx.get(SEARCH_URL).mock(return_value=httpx.Response(200, json={"tracks": {"items": []}}))

    with pytest.raises(LookupFailed) as exc_info:
        await service.lookup("Nonexistent Song", "Nobody")
    assert exc_info.value.title == "Nonexistent Song"
    assert exc_info.value.artist == "Nobody"


@respx.mock
async def test_lookup_search_network_error(service: SongLookupService) -> None:
    respx.post(SPOTIFY_TOKEN_URL).mock(return_value=httpx.Response(200, json=APP_TOKEN_RESPONSE))
    respx.get(SEARCH_URL).mock(side_effect=httpx.ConnectError("unreachable"))

    with pytest.raises(LookupFailed):
        await service.lookup("Yesterday", "Beatles")


@respx.mock
async def test_lookup_non_json_search_body(service: SongLookupService) -> None:
    respx.post(SPOTIFY_TOKEN_URL).mock(return_value=httpx.Response(200, json=APP_TOKEN_RESPONSE))
    respx.get(SEARCH_URL).mock(return_value=httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(LookupFailed, match="malformed response"):
        await service.lookup("Yesterday", "Beatles")


@respx.mock
async def test_lookup_track_missing_name(service: SongLookupService) -> None:
    respx.post(SPOTIFY_TOKEN_URL).mock(return_value=httpx.Response(200, json=APP_TOKEN_RESPONSE))
    respx.get(SEARCH_URL).mock(return_value=httpx.Response(200, json={"tracks": {"items": [{"id": "x"}]}}))

    with pytest.raises(LookupFailed):
        await service.lookup("Yesterday", "Beatles")


@respx.mock
async def test_lookup_rate_limited_with_http_date(service: SongLookupService) -> None:
    respx.post(SPOTIFY_TOKEN_URL).mock(return_value=httpx.Response(200, json=APP_TOKEN_RESPONSE))
    respx.get(SEARCH_URL).mock(
        return_value=httpx.Response(429, headers={"Retry-After": "Wed, 21 Oct 2026 07:28:00 GMT"})
    )

    with pytest.raises(LookupFailed, match="rate limit"):
        await service.lookup("Yesterday", "Beatles")


@respx.mock
async def test_lookup_track_without_link(service: SongLookupService) -> None:
    respx.post(SPOTIFY_TOKEN_URL).mock(return_value=httpx.Response(200, json=APP_TOKEN_RESPONSE))
    respx.get(SEARCH_URL).mock(return_value=httpx.Response(200, json={"tracks": {"items": [_track(url=None)]}}))

    with pytest.raises(LookupFailed, match="no Spotify link"):
        await service.lookup("Yesterday", "Beatles")


@respx.mock
async def test_lookup_token_failure(service: SongLookupService) -> None:
    respx.post(SPOTIFY_TOKEN_URL).mock(return_value=httpx.Response(500))
    search = respx.get(SEARCH_URL)

    with pytest.raises(UpstreamAuthError):
        await service.lookup("Yesterday", "Beatles")
    assert not search.called


@respx.mock
async def test_lookup_query_uses_field_filters(service: SongLookupService) -> None:
    respx.post(SPOTIFY_TOKEN_URL).mock(return_value=httpx.Response(200, json=APP_TOKEN_RESPONSE))
    search = respx.get(SEARCH_URL).mock(return_value=httpx.Response(200, json={"tracks": {"items": [_track()]}}))

    await service.lookup("Let It Be", "The Beatles")

    raw_query = search.calls[0].request.url.query.decode()
    assert "q=track:Let%20It%20Be%20artist:The%20Beatles" in raw_query


def test_build_track_query() -> None:
    assert build_track_query("Yesterday", "Beatles") == "track:Yesterday artist:Beatles"
