"""Build the configured CacheClient and release its resources afterwards."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager
from datetime import timedelta
from typing import TYPE_CHECKING

import structlog

from career_compass_core.exceptions import CacheUnavailableError
from career_compass_core.interfaces.cache import CacheClient
from career_compass_infra.cache.career_path_cache import CareerPathCache

if TYPE_CHECKING:
    from career_compass_core.config.settings import Settings

logger = structlog.get_logger()


class UnavailableCacheClient:
    """Stand-in for a backend that could not be opened; every call fails."""

    def __init__(self, backend: str, reason: str) -> None:
        self.backend = backend
        self.reason = reason

    def _fail(self) -> CacheUnavailableError:
        return CacheUnavailableError(f"{self.backend} cache unavailable: {self.reason}")

    async def get(self, key: str) -> str | None:
        raise self._fail()

    async def set(self, key: str, value: str, ttl_seconds: int = 86400) -> None:
        raise self._fail()

    async def delete(self, key: str) -> None:
        raise self._fail()

    async def exists(self, key: str) -> bool:
        raise self._fail()


async def _open_backend(settings: Settings, stack: AsyncExitStack) -> CacheClient:
    backend = settings.cache_backend

    if backend == "redis":
        from career_compass_infra.cache.redis_cache import RedisCacheClient

        redis = RedisCacheClient.from_url(settings.redis_url)
        stack.push_async_callback(redis.close)
        return redis

    if backend == "disk":
        from career_compass_infra.cache.disk_cache import DiskCacheClient

        disk = DiskCacheClient(settings.cache_dir)
        stack.callback(disk.close)
        return disk

    from career_compass_infra.cache.db_cache import DBCacheClient
    from career_compass_infra.db.session import open_session

    session = await stack.enter_async_context(open_session(settings))
    return DBCacheClient(session)


@asynccontextmanager
async def open_cache_client(
    settings: Settings, *, degrade: bool = True
) -> AsyncIterator[CacheClient]:
    """Yield a CacheClient for ``settings.cache_backend`` ("db", "disk" or "redis").

    When the backend cannot be opened and ``degrade`` is set, an
    ``UnavailableCacheClient`` is yielded instead, so callers behind
    ``CareerPathCache`` see misses and dropped writes. Without ``degrade`` the
    failure is raised as CacheUnavailableError.
    """
    backend = settings.cache_backend
    async with AsyncExitStack() as stack:
        try:
            client = await _open_backend(settings, stack)
        except Exception as e:
            logger.warning(
                "cache_backend_unavailable",
                backend=backend,
                error_type=type(e).__name__,
                error=str(e),
            )
            if not degrade:
                raise CacheUnavailableError(f"{backend} cache unavailable: {e}") from e
            client = UnavailableCacheClient(backend, str(e))
        yield client


@asynccontextmanager
async def open_career_path_cache(settings: Settings) -> AsyncIterator[CareerPathCache]:
    """Yield a CareerPathCache over the configured backend."""
    async with open_cache_client(settings) as client:
        logger.debug("cache_backend_ready", backend=settings.cache_backend)
        yield CareerPathCache(client, expiry=timedelta(days=settings.career_path_cache_days))
