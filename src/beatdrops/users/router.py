"""Account, session and like endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from beatdrops.auth.dependencies import SessionTokens
from beatdrops.auth.session import SessionTokenService
from beatdrops.constants import MAX_ID
from beatdrops.db.posts import PostRepository
from beatdrops.db.users import NewUser, UserRepository
from beatdrops.dependencies import db_manager, get_post_repository, get_user_repository
from beatdrops.errors import AuthFailed, NotFound, ValidationFailed
from beatdrops.posts.schemas import LikeToggleResponse, PostOut
from beatdrops.posts.service import LikeService
from beatdrops.users.schemas import (
    ErrorsResponse,
    FieldErrors,
    LikedResponse,
    LikeToggleRequest,
    LoginRequest,
    UserEnvelope,
    UserOut,
)

logger = logging.getLogger(__name__)

NOT_FOUND_DETAIL = "Resource not found."

UserId = Annotated[int, Path(le=MAX_ID)]


def get_like_service(
    posts: Annotated[PostRepository, Depends(get_post_repository)],
    users: Annotated[UserRepository, Depends(get_user_repository)],
) -> LikeService:
    """FastAPI dependency that provides a LikeService instance."""
    return LikeService(posts, users)


class UsersRouter:
    """Class-based router for signup, login and per-user resources."""

    def __init__(self) -> None:
        self.router = APIRouter()
        self.router.add_api_route("/signup", self.signup, methods=["POST"], response_model=None)
        self.router.add_api_route("/login", self.login, methods=["POST"], response_model=None)
        self.router.add_api_route("/logout", self.logout, methods=["GET"], response_model=None)
        self.router.add_api_route("/user/{user_id}", self.get_user, methods=["GET"])
        self.router.add_api_route("/user/{user_id}/liked", self.get_liked, methods=["GET"])
        self.router.add_api_route(
            "/user/{user_id}/liked",
            self.toggle_like,
            methods=["PATCH"],
            status_code=201,
            response_model=LikeToggleResponse,
        )

    async def signup(
        self,
        body: NewUser,
        session: Annotated[AsyncSession, Depends(db_manager.dependency)],
        users: Annotated[UserRepository, Depends(get_user_repository)],
        tokens: SessionTokens,
    ) -> JSONResponse:
        """Create an account and sign the new user in."""
        try:
            user = await users.add_user(body, session)
        except ValidationFailed as exc:
            logger.info("Signup rejected: %s", exc)
            return self._errors_response(exc)

        response = self._user_response(UserOut.model_validate(user), status_code=201)
        tokens.set_cookie(response, user.id)
        return response

    async def login(
        self,
        body: LoginRequest,
        session: Annotated[AsyncSession, Depends(db_manager.dependency)],
        users: Annotated[UserRepository, Depends(get_user_repository)],
        tokens: SessionTokens,
    ) -> JSONResponse:
        """Check credentials and set the session cookie."""
        try:
            user = await users.login(body.email, body.password, session)
        except AuthFailed as exc:
            logger.info("Login failed (%s)", type(exc).__name__)
            return self._errors_response(exc)

        response = self._user_response(UserOut.model_validate(user), status_code=200)
        tokens.set_cookie(response, user.id)
        return response

    async def logout(self) -> RedirectResponse:
        """Clear the session cookie and send the browser home."""
        response = RedirectResponse(url="/", status_code=302)
        SessionTokenService.clear_cookie(response)
        return response

    async def get_user(
        self,
        user_id: UserId,
        session: Annotated[AsyncSession, Depends(db_manager.dependency)],
        users: Annotated[UserRepository, Depends(get_user_repository)],
    ) -> UserEnvelope:
        user = await users.find_user_by_id(user_id, session)
        if user is None:
            raise HTTPException(status_code=404, detail=NOT_FOUND_DETAIL)
        return UserEnvelope(user=UserOut.model_validate(user))

    async def get_liked(
        self,
        user_id: UserId,
        session: Annotated[AsyncSession, Depends(db_manager.dependency)],
        users: Annotated[UserRepository, Depends(get_user_repository)],
    ) -> LikedResponse:
        liked = await users.get_user_liked(user_id, session)
        if liked is None:
            raise HTTPException(status_code=404, detail=NOT_FOUND_DETAIL)
        return LikedResponse(liked=liked)

    async def toggle_like(
        self,
        user_id: UserId,
        body: LikeToggleRequest,
        session: Annotated[AsyncSession, Depends(db_manager.dependency)],
        likes: Annotated[LikeService, Depends(get_like_service)],
    ) -> LikeToggleResponse:
        """Like or unlike a post; ``liked`` is the state before this request."""
        try:
            post, user = await likes.toggle(user_id, body.post, body.liked, session)
        except NotFound as exc:
            raise HTTPException(status_code=404, detail=NOT_FOUND_DETAIL) from exc
        return LikeToggleResponse(post=PostOut.model_validate(post), user=UserOut.model_validate(user))

    @staticmethod
    def _user_response(user: UserOut, status_code: int) -> JSONResponse:
        envelope = UserEnvelope(user=user)
        return JSONResponse(status_code=status_code, content=envelope.model_dump(mode="json", by_alias=True))

    @staticmethod
    def _errors_response(exc: ValidationFailed | AuthFailed) -> JSONResponse:
        body = ErrorsResponse(errors=FieldErrors.from_exception(exc))
        return JSONResponse(status_code=400, content=body.model_dump(mode="json"))


_instance = UsersRouter()
router = _instance.router
