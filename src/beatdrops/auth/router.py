"""Spotify authorization-code flow endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from beatdrops.auth.crypto import RefreshTokenVault
from beatdrops.auth.dependencies import SessionUser
from beatdrops.auth.schemas import (
    AuthCodeRequest,
    AuthorizeUrlResponse,
    RefreshRequest,
    SpotifyLoginResponse,
    SpotifyRefreshResponse,
)
from beatdrops.db.users import UserRepository
from beatdrops.dependencies import db_manager, get_refresh_vault, get_token_broker, get_user_repository
from beatdrops.errors import UpstreamAuthError
from beatdrops.spotify.tokens import SpotifyTokenBroker

logger = logging.getLogger(__name__)


class AuthRouter:
    """Class-based router for Spotify auth endpoints."""

    def __init__(self) -> None:
        self.router = APIRouter()
        self.router.add_api_route("/url", self.authorize_url, methods=["GET"])
        self.router.add_api_route("/login", self.login, methods=["POST"])
        self.router.add_api_route("/refresh", self.refresh, methods=["POST"])

    async def authorize_url(
        self,
        broker: Annotated[SpotifyTokenBroker, Depends(get_token_broker)],
    ) -> AuthorizeUrlResponse:
        """Return the Spotify URL the browser should visit to grant access."""
        return AuthorizeUrlResponse(url=broker.authorization_url())

    async def login(
        self,
        body: AuthCodeRequest,
        user: SessionUser,
        session: Annotated[AsyncSession, Depends(db_manager.dependency)],
        broker: Annotated[SpotifyTokenBroker, Depends(get_token_broker)],
        users: Annotated[UserRepository, Depends(get_user_repository)],
        vault: Annotated[RefreshTokenVault | None, Depends(get_refresh_vault)],
    ) -> SpotifyLoginResponse:
        """Exchange an authorization code for Spotify tokens.

        When a session user is signed in and an encryption key is configured,
        the refresh token is also stored (encrypted) on the user.
        """
        try:
            grant = await broker.exchange_auth_code(body.code)
        except UpstreamAuthError as exc:
            raise HTTPException(status_code=502, detail=exc.detail) from exc

        if user is not None and vault is not None and grant.refresh_token:
            await users.update_refresh(user.id, vault.seal(grant.refresh_token), session)
            logger.info("Stored Spotify refresh token for user %d", user.id)

        return SpotifyLoginResponse(
            access_token=grant.access_token,
            refresh_token=grant.refresh_token,
            expires_in=grant.expires_in,
        )

    async def refresh(
        self,
        body: RefreshRequest,
        user: SessionUser,
        broker: Annotated[SpotifyTokenBroker, Depends(get_token_broker)],
        vault: Annotated[RefreshTokenVault | None, Depends(get_refresh_vault)],
    ) -> SpotifyRefreshResponse:
        """Exchange a refresh token for a fresh access token.

        Falls back to the session user's stored refresh token when the body
        does not carry one.
        """
        refresh_token = body.refresh_token
        if not refresh_token and user is not None and vault is not None and user.encrypted_spotify_refresh_token:
            refresh_token = vault.open(user.encrypted_spotify_refresh_token)
            if refresh_token is None:
                logger.warning("Stored refresh token for user %d could not be decrypted", user.id)

        if not refresh_token:
            raise HTTPException(status_code=400, detail="No refresh token provided.")

        try:
            grant = await broker.refresh(refresh_token)
        except UpstreamAuthError as exc:
            raise HTTPException(status_code=502, detail=exc.detail) from exc

        return SpotifyRefreshResponse(access_token=grant.access_token, expires_in=grant.expires_in)


_instance = AuthRouter()
router = _instance.router
