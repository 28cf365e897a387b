"""Feed and post-creation endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from beatdrops.auth.dependencies import SessionUser
from beatdrops.db.posts import PostRepository, PostSort
from beatdrops.dependencies import db_manager, get_lookup_service, get_post_repository
from beatdrops.errors import LookupFailed, UpstreamAuthError
from beatdrops.posts.schemas import CreatePostRequest, FeedResponse, PostOut
from beatdrops.spotify.lookup import SongLookupService
from beatdrops.users.schemas import UserOut

logger = logging.getLogger(__name__)


class PostsRouter:
    """Class-based router for the post feed."""

    def __init__(self) -> None:
        self.router = APIRouter()
        self.router.add_api_route(
            "/posts",
            self.list_posts,
            methods=["GET"],
            status_code=201,
            response_model=FeedResponse,
        )
        self.router.add_api_route(
            "/create",
            self.create_post,
            methods=["POST"],
            status_code=201,
            response_model=PostOut,
        )

    async def list_posts(
        self,
        user: SessionUser,
        session: Annotated[AsyncSession, Depends(db_manager.dependency)],
        posts: Annotated[PostRepository, Depends(get_post_repository)],
        sort: Annotated[PostSort, Query(description="Feed order: default, recent or likes")] = PostSort.DEFAULT,
    ) -> FeedResponse:
        """List every post together with the signed-in user, if any."""
        items = await posts.list_posts(session, sort)
        return FeedResponse(
            posts=[PostOut.model_validate(post) for post in items],
            user=UserOut.model_validate(user) if user is not None else None,
        )

    async def create_post(
        self,
        body: CreatePostRequest,
        session: Annotated[AsyncSession, Depends(db_manager.dependency)],
        posts: Annotated[PostRepository, Depends(get_post_repository)],
        lookup: Annotated[SongLookupService, Depends(get_lookup_service)],
    ) -> PostOut:
        """Resolve the song on Spotify and store it as a new post."""
        try:
            draft = await lookup.lookup(body.title, body.artist, body.location)
        except LookupFailed as exc:
            raise HTTPException(status_code=500, detail="Song not found.") from exc
        except UpstreamAuthError as exc:
            logger.error("Spotify token exchange failed while creating a post: %s", exc.detail)
            raise HTTPException(status_code=500, detail="Music service unavailable.") from exc

        post = await posts.add_post(draft, session)
        return PostOut.model_validate(post)


_instance = PostsRouter()
router = _instance.router
