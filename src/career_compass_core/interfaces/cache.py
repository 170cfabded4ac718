"""Key/value store contract behind the career path cache."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class CacheClient(Protocol):
    """String store keyed by request fingerprint.

    Writes are last-writer-wins. ``ttl_seconds`` is a storage hint that
    lets a backend reclaim space; freshness of career paths is decided by
    ``CareerPathCache`` from the envelope's ``cached_at``, not by the TTL.
    """

    async def get(self, key: str) -> str | None:
        """Stored value, or None when absent."""
        ...

    async def set(self, key: str, value: str, ttl_seconds: int = 86400) -> None:
        """Upsert ``value`` under ``key``."""
        ...

    async def delete(self, key: str) -> None:
        """Remove ``key``; absent keys are not an error."""
        ...

    async def exists(self, key: str) -> bool:
        ...


@runtime_checkable
class PurgeableCache(Protocol):
    """A store that can drop expired entries on demand.

    Redis expires keys itself and does not implement this.
    """

    async def purge_expired(self) -> int:
        """Delete expired entries and return how many were removed."""
        ...
