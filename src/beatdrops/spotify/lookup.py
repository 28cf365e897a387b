"""Song lookup: resolves free-text title/artist into a canonical post payload."""

import logging
from dataclasses import dataclass

from beatdrops.errors import LookupFailed
from beatdrops.spotify.client import SpotifyClient
from beatdrops.spotify.constants import SEARCH_RESULT_LIMIT
from beatdrops.spotify.exceptions import SpotifyClientError
from beatdrops.spotify.limiter import OutboundCallLimiter
from beatdrops.spotify.tokens import SpotifyTokenBroker

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PostDraft:
    """A post resolved from the Spotify catalog, not yet persisted."""

    title: str
    artist: str
    url: str
    likes: int = 0
    location: str | None = None
    image_url: str | None = None
    uri: str | None = None


def build_track_query(title: str, artist: str) -> str:
    """Combine track and artist field filters into one search query."""
    return f"track:{title} artist:{artist}"


class SongLookupService:
    """Looks up a song on Spotify and normalizes the top match.

    Both the token exchange and the search are queued on the same
    :class:`OutboundCallLimiter`.
    """

    def __init__(
        self,
        broker: SpotifyTokenBroker,
        limiter: OutboundCallLimiter,
        *,
        request_timeout: float,
    ) -> None:
        self._broker = broker
        self._limiter = limiter
        self._request_timeout = request_timeout

    async def lookup(self, title: str, artist: str, location: str | None = None) -> PostDraft:
        """Return a :class:`PostDraft` for the best Spotify match.

        Raises:
            UpstreamAuthError: If the client-credentials exchange fails.
            LookupFailed: If the search fails or finds no usable track.
        """
        access_token = await self._broker.get_client_credentials_token()
        client = SpotifyClient(access_token, self._limiter, request_timeout=self._request_timeout)

        try:
            results = await client.search(build_track_query(title, artist), limit=SEARCH_RESULT_LIMIT)
        except SpotifyClientError as exc:
            logger.warning("Spotify search failed for %r by %r: %s", title, artist, exc)
            raise LookupFailed(title, artist, str(exc)) from exc

        items = results.tracks.items if results.tracks else []
        if not items:
            logger.info("No Spotify match for %r by %r", title, artist)
            raise LookupFailed(title, artist, "No matching tracks")

        track = items[0]
        url = track.external_urls.get("spotify")
        if not url:
            raise LookupFailed(title, artist, "Top match has no Spotify link")

        image = track.album.smallest_image() if track.album else None
        draft = PostDraft(
            title=track.name,
            artist=track.artists[0].name if track.artists else artist,
            url=url,
            likes=0,
            location=location,
            image_url=image.url if image else None,
            uri=track.uri,
        )
        logger.info("Resolved %r by %r to %r by %r", title, artist, draft.title, draft.artist)
        return draft
