"""Shared fixtures: in-memory database, test settings and an API client."""

import pytest
from cryptography.fernet import Fernet
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from beatdrops.db import Base
from beatdrops.dependencies import db_manager, get_call_limiter
from beatdrops.main import app
from beatdrops.settings import AppSettings, get_settings
from beatdrops.spotify.limiter import OutboundCallLimiter

TEST_FERNET_KEY = Fernet.generate_key().decode()


def _test_settings() -> AppSettings:
    return AppSettings(
        SPOTIFY_CLIENT_ID="test-client-id",
        SPOTIFY_CLIENT_SECRET="test-client-secret",
        SPOTIFY_REDIRECT_URI="http://localhost:3000/home",
        OUTBOUND_MIN_INTERVAL_MS=0,
        JWT_SECRET="test-jwt-secret",
        TOKEN_ENCRYPTION_KEY=TEST_FERNET_KEY,
    )


@pytest.fixture
def settings() -> AppSettings:
    return _test_settings()


@pytest.fixture
async def async_engine():  # type: ignore[no-untyped-def]
    engine = create_async_engine("sqlite+aiosqlite://", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def async_session(async_engine):  # type: ignore[no-untyped-def]
    session_factory = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def override_deps(async_engine):  # type: ignore[no-untyped-def]
    """Override FastAPI dependencies for testing."""
    session_factory = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)

    async def _override_session():  # type: ignore[no-untyped-def]
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    limiter = OutboundCallLimiter(0)

    app.dependency_overrides[db_manager.dependency] = _override_session
    app.dependency_overrides[get_settings] = _test_settings
    app.dependency_overrides[get_call_limiter] = lambda: limiter
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client(override_deps) -> TestClient:  # type: ignore[no-untyped-def]
    return TestClient(app, follow_redirects=False)
