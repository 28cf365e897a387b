"""FastAPI dependencies for session-authenticated endpoints."""

import logging
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from beatdrops.auth.session import SessionTokenError, SessionTokenService
from beatdrops.constants import SESSION_COOKIE_NAME
from beatdrops.db.models import User
from beatdrops.db.users import UserRepository
from beatdrops.dependencies import db_manager, get_user_repository
from beatdrops.settings import AppSettings, get_settings

logger = logging.getLogger(__name__)


def get_session_tokens(
    settings: Annotated[AppSettings, Depends(get_settings)],
) -> SessionTokenService:
    """Provide the session token service. Requires ``JWT_SECRET``."""
    return SessionTokenService(settings)


async def get_session_user(
    request: Request,
    settings: Annotated[AppSettings, Depends(get_settings)],
    session: Annotated[AsyncSession, Depends(db_manager.dependency)],
    users: Annotated[UserRepository, Depends(get_user_repository)],
) -> User | None:
    """Resolve the session cookie to a user. Returns None if absent or invalid.

    Does NOT raise for a bad cookie. Use for endpoints with optional auth.
    """
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        return None

    try:
        user_id = SessionTokenService(settings).decode_token(token)
    except SessionTokenError as exc:
        logger.debug("Ignoring session cookie: %s", exc.detail)
        return None

    return await users.find_user_by_id(user_id, session)


# Type aliases for Annotated dependencies
SessionUser = Annotated[User | None, Depends(get_session_user)]
SessionTokens = Annotated[SessionTokenService, Depends(get_session_tokens)]
