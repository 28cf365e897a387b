"""Currently-playing endpoint backed by the user's Spotify access token."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from beatdrops.auth.schemas import CurrentSongRequest, CurrentSongResponse
from beatdrops.dependencies import get_call_limiter
from beatdrops.settings import AppSettings, get_settings
from beatdrops.spotify.client import SpotifyClient
from beatdrops.spotify.exceptions import SpotifyClientError
from beatdrops.spotify.limiter import OutboundCallLimiter

logger = logging.getLogger(__name__)


class PlayerRouter:
    def __init__(self) -> None:
        self.router = APIRouter()
        self.router.add_api_route("/current", self.current_song, methods=["POST"])

    async def current_song(
        self,
        body: CurrentSongRequest,
        settings: Annotated[AppSettings, Depends(get_settings)],
        limiter: Annotated[OutboundCallLimiter, Depends(get_call_limiter)],
    ) -> CurrentSongResponse:
        """Return the name of the track playing for the token's owner, or null."""
        client = SpotifyClient(body.access_token, limiter, request_timeout=settings.SPOTIFY_REQUEST_TIMEOUT)
        try:
            playing = await client.get_currently_playing()
        except SpotifyClientError as exc:
            logger.warning("Currently-playing request failed: %s", exc)
            raise HTTPException(status_code=502, detail="Could not reach Spotify.") from exc

        if playing is None or playing.item is None:
            return CurrentSongResponse(song=None)
        return CurrentSongResponse(song=playing.item.name)


_instance = PlayerRouter()
router = _instance.router
