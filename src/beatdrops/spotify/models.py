"""Pydantic models for Spotify Web API responses.

These are pure data models matching Spotify's JSON structure.
No DB or auth dependencies.
"""

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------


class SpotifyImage(BaseModel):
    """Image object returned by Spotify (album art, artist photos, etc.)."""

    url: str
    height: int | None = None
    width: int | None = None


# ---------------------------------------------------------------------------
# Artists and albums
# ---------------------------------------------------------------------------


class SpotifyArtistSimplified(BaseModel):
    """Simplified artist object (embedded in tracks, albums)."""

    id: str | None = None
    name: str
    uri: str | None = None
    external_urls: dict[str, str] = Field(default_factory=dict)


class SpotifyAlbumSimplified(BaseModel):
    """Simplified album object (embedded in tracks)."""

    id: str | None = None
    name: str
    uri: str | None = None
    images: list[SpotifyImage] = Field(default_factory=list)
    external_urls: dict[str, str] = Field(default_factory=dict)

    def smallest_image(self) -> SpotifyImage | None:
        """Return the image with the smallest pixel area, if any."""
        if not self.images:
            return None
        return min(self.images, key=lambda img: (img.width or 0) * (img.height or 0))


# ---------------------------------------------------------------------------
# Tracks
# ---------------------------------------------------------------------------


class SpotifyTrack(BaseModel):
    """Full track object from Spotify."""

    id: str | None = None
    name: str
    uri: str | None = None
    duration_ms: int | None = None
    artists: list[SpotifyArtistSimplified] = Field(default_factory=list)
    album: SpotifyAlbumSimplified | None = None
    external_urls: dict[str, str] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


class SpotifySearchTracks(BaseModel):
    """Tracks section of search results."""

    items: list[SpotifyTrack] = Field(default_factory=list)
    total: int | None = None
    limit: int | None = None
    offset: int | None = None


class SpotifySearchResponse(BaseModel):
    """Response from GET /search."""

    tracks: SpotifySearchTracks | None = None


# ---------------------------------------------------------------------------
# Player
# ---------------------------------------------------------------------------


class CurrentlyPlayingResponse(BaseModel):
    """Response from GET /me/player/currently-playing."""

    is_playing: bool = False
    progress_ms: int | None = None
    item: SpotifyTrack | None = None


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


class SpotifyTokenResponse(BaseModel):
    """Response from Spotify's /api/token endpoint."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int
    refresh_token: str | None = None
    scope: str | None = None
