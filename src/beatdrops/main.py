"""Main FastAPI application for the beatdrops API."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from beatdrops.auth.router import router as auth_router
from beatdrops.constants import APP_DESCRIPTION, APP_TITLE, APP_VERSION, Routes, ServiceName
from beatdrops.dependencies import db_manager
from beatdrops.errors import StoreError
from beatdrops.logging import configure_logging
from beatdrops.middleware import RequestIDMiddleware, SecurityHeadersMiddleware
from beatdrops.player.router import router as player_router
from beatdrops.posts.router import router as posts_router
from beatdrops.settings import get_settings
from beatdrops.spotify.limiter import OutboundCallLimiter
from beatdrops.users.router import router as users_router

logger = logging.getLogger(__name__)


class BeatdropsApp:
    """Application container: configures middleware, routers, and lifespan."""

    app: FastAPI

    def __init__(self) -> None:
        configure_logging(ServiceName.API)
        self.app = FastAPI(
            title=APP_TITLE,
            description=APP_DESCRIPTION,
            version=APP_VERSION,
            lifespan=self._lifespan,
        )
        # One limiter per process; every outbound Spotify call queues on it.
        self.app.state.call_limiter = OutboundCallLimiter.from_settings(get_settings())
        self._setup_middleware()
        self._setup_exception_handlers()
        self._setup_routers()

    @staticmethod
    @asynccontextmanager
    async def _lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """Application lifespan: create tables on startup, release the engine on shutdown."""
        await db_manager.create_all()
        logger.info("beatdrops API started")
        try:
            yield
        finally:
            await db_manager.dispose()

    def _setup_middleware(self) -> None:
        settings = get_settings()

        # Security headers
        self.app.add_middleware(SecurityHeadersMiddleware)

        # Request-ID (generates/propagates X-Request-ID)
        self.app.add_middleware(RequestIDMiddleware)

        # CORS (the browser client sends the session cookie)
        origins = [o.strip() for o in settings.CORS_ALLOWED_ORIGINS.split(",") if o.strip()]
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    def _setup_exception_handlers(self) -> None:
        async def store_error_handler(request: Request, exc: Exception) -> JSONResponse:
            logger.error("Store error on %s %s: %s", request.method, request.url.path, exc)
            return JSONResponse(status_code=500, content={"detail": "Internal server error."})

        self.app.add_exception_handler(StoreError, store_error_handler)

    def _setup_routers(self) -> None:
        self.app.include_router(posts_router, prefix=Routes.POSTS.prefix, tags=[Routes.POSTS.tag])
        self.app.include_router(users_router, prefix=Routes.USERS.prefix, tags=[Routes.USERS.tag])
        self.app.include_router(auth_router, prefix=Routes.AUTH.prefix, tags=[Routes.AUTH.tag])
        self.app.include_router(player_router, prefix=Routes.PLAYER.prefix, tags=[Routes.PLAYER.tag])

        @self.app.get(Routes.HEALTH)
        async def health_check() -> dict[str, str]:
            """Health check endpoint."""
            return {"status": "healthy"}

        @self.app.get("/")
        async def root() -> dict[str, str]:
            """Root endpoint."""
            return {"message": "Hello, World", "version": APP_VERSION}


_application = BeatdropsApp()
app: FastAPI = _application.app
