"""Time-boxed cache for AI-generated career paths.

Entries are JSON envelopes (``CachedCareerPaths``) stored in any CacheClient
under the fingerprint from ``generate_cache_key``. An entry is a hit only while
``now - cached_at`` is under the expiry window. The cache is best-effort:
backend failures on read are misses and failures on write are dropped, both
logged and never raised.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import UTC, datetime, timedelta
from typing import Any

import structlog
from pydantic import ValidationError

from career_compass_core.constants import CAREER_PATH_CACHE_DAYS
from career_compass_core.interfaces.cache import CacheClient
from career_compass_core.models.career_path import CachedCareerPaths

logger = structlog.get_logger()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class CareerPathCache:
    """Read-through store for career path payloads keyed by request fingerprint."""

    def __init__(
        self,
        cache: CacheClient,
        expiry: timedelta = timedelta(days=CAREER_PATH_CACHE_DAYS),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize with a CacheClient, an expiry window and a clock."""
        self._cache = cache
        self._expiry = expiry
        self._clock = clock

    @property
    def expiry(self) -> timedelta:
        return self._expiry

    async def get(self, key: str) -> list[dict[str, Any]] | None:
        """Return the cached payload, or None on miss, expiry or backend error."""
        try:
            raw = await self._cache.get(key)
        except Exception as e:
            logger.warning("cache_read_failed", key=key, error=str(e))
            return None
        if raw is None:
            logger.debug("cache_miss", key=key)
            return None

        try:
            entry = CachedCareerPaths.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("cache_entry_invalid", key=key, error=str(e))
            return None

        if entry.cached_at is None:
            logger.debug("cache_entry_invalidated", key=key)
            return None

        age = self._clock() - _as_utc(entry.cached_at)
        if age >= self._expiry:
            logger.info("cache_expired", key=key, age_days=round(age.total_seconds() / 86400, 2))
            await self._invalidate(key)
            return None

        logger.info("cache_hit", key=key, count=len(entry.career_paths))
        return entry.career_paths

    async def set(self, key: str, payload: Sequence[dict[str, Any]]) -> None:
        """Upsert the payload with ``cached_at = now``; failures are logged only."""
        try:
            entry = CachedCareerPaths(career_paths=list(payload), cached_at=self._clock())
            await self._cache.set(
                key,
                entry.model_dump_json(),
                ttl_seconds=int(self._expiry.total_seconds()),
            )
        except Exception as e:
            logger.warning("cache_write_failed", key=key, error=str(e))
            return
        logger.debug("cache_stored", key=key, count=len(entry.career_paths))

    async def _invalidate(self, key: str) -> None:
        """Drop a stale entry; a failure here is harmless."""
        try:
            await self._cache.delete(key)
        except Exception as e:
            logger.warning("cache_invalidate_failed", key=key, error=str(e))


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value
