"""Single-host CacheClient persisted with diskcache."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import Any

import diskcache


class DiskCacheClient:
    """Career path store in a local diskcache directory.

    diskcache is synchronous (SQLite files), so each call runs in a worker
    thread to keep the event loop free.
    """

    def __init__(self, cache_dir: Path) -> None:
        cache_dir.mkdir(parents=True, exist_ok=True)
        self._cache = diskcache.Cache(str(cache_dir))

    async def _run(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:  # noqa: ANN401
        return await asyncio.to_thread(fn, *args, **kwargs)

    async def get(self, key: str) -> str | None:
        value = await self._run(self._cache.get, key)
        return None if value is None else str(value)

    async def set(self, key: str, value: str, ttl_seconds: int = 86400) -> None:
        await self._run(self._cache.set, key, value, expire=ttl_seconds)

    async def delete(self, key: str) -> None:
        await self._run(self._cache.delete, key)

    async def exists(self, key: str) -> bool:
        return bool(await self._run(self._cache.__contains__, key))

    async def purge_expired(self) -> int:
        """Evict entries past their TTL and return how many were removed."""
        return int(await self._run(self._cache.expire))

    def close(self) -> None:
        self._cache.close()
