"""Like toggle that keeps a post's counter and the user's liked set in step."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from beatdrops.db.models import Post, User
from beatdrops.db.posts import PostRepository
from beatdrops.db.users import UserRepository
from beatdrops.errors import NotFound

logger = logging.getLogger(__name__)


class LikeService:
    """Applies like/unlike transitions across both repositories.

    Both writes go through the caller's session, so they commit or roll back
    together with the request. The stored liked set decides the transition:
    a request whose ``liked`` flag disagrees with it (a stale client or a
    double click) changes nothing and returns the current state.
    """

    def __init__(self, posts: PostRepository, users: UserRepository) -> None:
        self._posts = posts
        self._users = users

    async def toggle(
        self,
        user_id: int,
        post_id: int,
        currently_liked: bool,
        session: AsyncSession,
    ) -> tuple[Post, User]:
        """Like or unlike *post_id* for *user_id*.

        Raises:
            NotFound: If the user or the post does not exist.
        """
        user = await self._users.find_user_by_id(user_id, session)
        if user is None:
            raise NotFound("user", user_id)

        stored_liked = post_id in user.liked
        if stored_liked != currently_liked:
            post = await self._posts.get_post(post_id, session)
            if post is None:
                raise NotFound("post", post_id)
            logger.info(
                "Stale like toggle for user %d on post %d (client liked=%s, stored=%s); no change",
                user_id,
                post_id,
                currently_liked,
                stored_liked,
            )
            return post, user

        post = await self._posts.update_like_status(post_id, currently_liked, session)
        if currently_liked:
            user = await self._users.remove_user_liked(user_id, post_id, session)
        else:
            user = await self._users.add_user_liked(user_id, post_id, session)

        logger.info("User %d %s post %d", user_id, "unliked" if currently_liked else "liked", post_id)
        return post, user
