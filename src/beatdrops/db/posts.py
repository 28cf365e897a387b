"""Post persistence: create, list and like-count updates."""

import enum
import logging

from sqlalchemy import case, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from beatdrops.db.errors import translate_store_errors
from beatdrops.db.models import Post
from beatdrops.errors import NotFound
from beatdrops.spotify.lookup import PostDraft

logger = logging.getLogger(__name__)


class PostSort(enum.StrEnum):
    """Feed orderings."""

    DEFAULT = "default"
    RECENT = "recent"
    LIKES = "likes"


class PostRepository:
    """Reads and writes posts."""

    @translate_store_errors
    async def add_post(self, draft: PostDraft, session: AsyncSession) -> Post:
        """Persist a resolved draft. The store assigns ``id`` and ``created_at``."""
        post = Post(
            title=draft.title,
            artist=draft.artist,
            url=draft.url,
            likes=draft.likes,
            location=draft.location,
            image_url=draft.image_url,
            uri=draft.uri,
        )
        session.add(post)
        await session.flush()
        logger.info("Created post %d for %r by %r", post.id, post.title, post.artist)
        return post

    @translate_store_errors
    async def list_posts(self, session: AsyncSession, sort: PostSort = PostSort.DEFAULT) -> list[Post]:
        """Return every post in the requested order (insertion order by default)."""
        query = select(Post)
        if sort == PostSort.RECENT:
            query = query.order_by(Post.created_at.desc(), Post.id.desc())
        elif sort == PostSort.LIKES:
            query = query.order_by(Post.likes.desc(), Post.id.asc())
        else:
            query = query.order_by(Post.id.asc())
        result = await session.execute(query)
        return list(result.scalars().all())

    @translate_store_errors
    async def get_post(self, post_id: int, session: AsyncSession) -> Post | None:
        """Return a post by id, or None."""
        return await session.get(Post, post_id)

    @translate_store_errors
    async def update_like_status(self, post_id: int, currently_liked: bool, session: AsyncSession) -> Post:
        """Decrement ``likes`` if the caller currently likes the post, else increment.

        The change is one UPDATE statement, so concurrent toggles on the same
        post never lose a count. A decrement at zero leaves ``likes`` at zero.

        Raises:
            NotFound: If the post does not exist.
        """
        if currently_liked:
            new_likes = case((Post.likes > 0, Post.likes - 1), else_=0)
        else:
            new_likes = Post.likes + 1

        result = await session.execute(
            update(Post).where(Post.id == post_id).values(likes=new_likes).execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFound("post", post_id)

        post = await session.get(Post, post_id, populate_existing=True)
        if post is None:
            raise NotFound("post", post_id)
        logger.info("Post %d likes now %d", post.id, post.likes)
        return post
