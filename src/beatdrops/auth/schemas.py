"""Request/response bodies for the Spotify authorization endpoints."""

from pydantic import BaseModel

from beatdrops.schemas import CamelModel


class AuthorizeUrlResponse(BaseModel):
    url: str


class AuthCodeRequest(CamelModel):
    code: str


class SpotifyLoginResponse(CamelModel):
    access_token: str
    refresh_token: str | None
    expires_in: int


class RefreshRequest(CamelModel):
    """Refresh token from the browser. Optional when one is stored for the session user."""

    refresh_token: str | None = None


class SpotifyRefreshResponse(CamelModel):
    access_token: str
    expires_in: int


class CurrentSongRequest(CamelModel):
    access_token: str


class CurrentSongResponse(BaseModel):
    song: str | None = None
