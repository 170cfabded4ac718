"""Async engine, session factory and schema setup."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from career_compass_infra.db.models import Base

if TYPE_CHECKING:
    from career_compass_core.config.settings import Settings


def create_engine(settings: Settings) -> AsyncEngine:
    """Engine for ``settings.database_url``; SQLite gets no connection pool tuning."""
    if settings.db_backend == "sqlite":
        return create_async_engine(
            settings.database_url,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(
        settings.database_url,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine: AsyncEngine) -> None:
    """Create the jobs and cache_entries tables if missing."""
    # CacheEntry lives with its client; importing it registers the table
    import career_compass_infra.cache.db_cache  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def open_session(settings: Settings) -> AsyncIterator[AsyncSession]:
    """Yield a session on an initialized database, disposing the engine afterwards."""
    engine = create_engine(settings)
    try:
        await init_db(engine)
        async with create_session_factory(engine)() as session:
            yield session
    finally:
        await engine.dispose()
