"""Redis-backed CacheClient for deployments with several app instances."""

from __future__ import annotations

from redis.asyncio import Redis


class RedisCacheClient:
    """Shared career path store; Redis TTLs reclaim stale entries."""

    def __init__(self, redis: Redis) -> None:  # type: ignore[type-arg]
        """Wrap an existing redis-py asyncio client (not closed by us)."""
        self._redis = redis
        self._owned = False

    @classmethod
    def from_url(cls, url: str) -> RedisCacheClient:
        """Open a client for ``url`` that ``close()`` will shut down."""
        client = cls(Redis.from_url(url, decode_responses=True))
        client._owned = True
        return client

    async def get(self, key: str) -> str | None:
        value = await self._redis.get(key)
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)

    async def set(self, key: str, value: str, ttl_seconds: int = 86400) -> None:
        await self._redis.set(name=key, value=value, ex=max(1, ttl_seconds))

    async def delete(self, key: str) -> None:
        await self._redis.delete(key)

    async def exists(self, key: str) -> bool:
        return await self._redis.exists(key) > 0

    async def close(self) -> None:
        """Release the connection pool if this client opened it."""
        if self._owned:
            await self._redis.aclose()
