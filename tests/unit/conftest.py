"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator, Generator
from unittest.mock import MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import career_compass_infra.cache.db_cache  # noqa: F401  (registers cache_entries)
from career_compass_core.models.profile import UserProfile
from career_compass_infra.db.models import Base
from tests.mocks.mock_factories import make_user_profile
from tests.mocks.mock_settings import make_settings


@pytest.fixture
def mock_settings() -> MagicMock:
    """Return a MagicMock Settings with sensible defaults."""
    return make_settings()


@pytest.fixture
def sample_user() -> UserProfile:
    """Return a profile with tags, a location and a salary range."""
    return make_user_profile(
        matching_tags=["SQL", "Excel", "Python", "Tableau"],
        locations=["New York"],
        include_remote=True,
        desired_salary_min=80000,
        desired_salary_max=120000,
        work_environment_pref="remote",
    )


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create an in-memory SQLite session with all tables."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture(autouse=True)
def _reset_logging() -> Generator[None, None, None]:
    """Restore root logger handlers after tests that call configure_logging()."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers = original_handlers
    root.level = original_level
