"""Async engine ownership and request-scoped sessions."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, Self

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from beatdrops.db.base import Base
from beatdrops.settings import DatabaseSettings


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    # SQLite ignores ON DELETE CASCADE unless this is set per connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseManager:
    """Owns the async engine and hands out one session per unit of work.

    A session commits when its block (or request) finishes cleanly and rolls
    back when anything raises, so the writes a request makes land together.

    Usage:
        db = DatabaseManager.from_env()
        await db.create_all()

        async with db.session() as session:
            posts = await PostRepository().list_posts(session)

        # In routes
        session: Annotated[AsyncSession, Depends(db.dependency)]
    """

    def __init__(self, settings: DatabaseSettings) -> None:
        url = make_url(settings.database_url)
        engine_options: dict[str, Any] = {"echo": settings.echo, "pool_pre_ping": settings.pool_pre_ping}
        if settings.use_null_pool:
            engine_options["poolclass"] = NullPool
        self._engine = create_async_engine(url, **engine_options)
        if url.get_backend_name() == "sqlite":
            event.listen(self._engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self._session_factory = async_sessionmaker(self._engine, expire_on_commit=False, autoflush=False)

    @classmethod
    def from_env(cls) -> Self:
        """Build from ``DATABASE_URL`` and friends."""
        return cls(DatabaseSettings())

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession]:
        """Yield a session; commit on success, roll back on any exception."""
        async with self._session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            else:
                await session.commit()

    async def dependency(self) -> AsyncGenerator[AsyncSession]:
        """Request-scoped session for ``Depends()``."""
        async with self.session() as session:
            yield session

    async def create_all(self) -> None:
        """Create the posts, users and liked-post tables if they are missing."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self._engine.dispose()
