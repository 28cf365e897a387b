"""Request and response bodies for post endpoints."""

from datetime import datetime

from pydantic import BaseModel

from beatdrops.schemas import CamelModel
from beatdrops.users.schemas import UserOut


class PostOut(CamelModel):
    """A post as returned to the client."""

    id: int
    title: str
    artist: str
    url: str
    likes: int
    location: str | None = None
    image_url: str | None = None
    uri: str | None = None
    created_at: datetime


class CreatePostRequest(BaseModel):
    """Request body for POST /create: what the user typed, not yet resolved."""

    title: str
    artist: str
    location: str | None = None


class FeedResponse(CamelModel):
    """Response for GET /posts."""

    posts: list[PostOut]
    user: UserOut | None = None


class LikeToggleResponse(CamelModel):
    """Response for PATCH /user/{id}/liked."""

    post: PostOut
    user: UserOut
