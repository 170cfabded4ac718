"""Tests for the CacheClient backends and the backend factory."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from career_compass_core.exceptions import CacheUnavailableError
from career_compass_infra.cache.career_path_cache import CareerPathCache
from career_compass_infra.cache.db_cache import CacheEntry, DBCacheClient, _is_expired
from career_compass_infra.cache.disk_cache import DiskCacheClient
from career_compass_infra.cache.factory import (
    UnavailableCacheClient,
    open_cache_client,
    open_career_path_cache,
)
from career_compass_infra.cache.redis_cache import RedisCacheClient
from tests.mocks.mock_settings import make_settings


def _make_mock_redis() -> MagicMock:
    """Create a mock redis.asyncio.Redis client."""
    mock = MagicMock()
    mock.get = AsyncMock(return_value=None)
    mock.set = AsyncMock()
    mock.delete = AsyncMock()
    mock.exists = AsyncMock(return_value=0)
    mock.aclose = AsyncMock()
    return mock


def _naive_utc(delta: timedelta) -> datetime:
    return (datetime.now(UTC) + delta).replace(tzinfo=None)


# ---------------------------------------------------------------------------
# TestDBCacheClient
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestDBCacheClient:
    """Tests for database-backed cache."""

    @pytest.mark.asyncio
    async def test_set_and_get(self, db_session: AsyncSession) -> None:
        cache = DBCacheClient(db_session)
        await cache.set("key1", "value1", ttl_seconds=60)
        assert await cache.get("key1") == "value1"

    @pytest.mark.asyncio
    async def test_get_missing_key(self, db_session: AsyncSession) -> None:
        assert await DBCacheClient(db_session).get("missing") is None

    @pytest.mark.asyncio
    async def test_exists_and_delete(self, db_session: AsyncSession) -> None:
        cache = DBCacheClient(db_session)
        assert await cache.exists("key1") is False
        await cache.set("key1", "value1", ttl_seconds=60)
        assert await cache.exists("key1") is True
        await cache.delete("key1")
        assert await cache.exists("key1") is False

    @pytest.mark.asyncio
    async def test_overwrite_existing_key(self, db_session: AsyncSession) -> None:
        """Last writer wins."""
        cache = DBCacheClient(db_session)
        await cache.set("k", "v1", ttl_seconds=60)
        await cache.set("k", "v2", ttl_seconds=60)
        assert await cache.get("k") == "v2"

    @pytest.mark.asyncio
    async def test_expired_entry_returns_none(self, db_session: AsyncSession) -> None:
        """Expired rows read as missing."""
        db_session.add(
            CacheEntry(key="expired", value="stale", expires_at=_naive_utc(timedelta(seconds=-10)))
        )
        await db_session.commit()

        cache = DBCacheClient(db_session)
        assert await cache.get("expired") is None
        assert await cache.exists("expired") is False

    @pytest.mark.asyncio
    async def test_entry_without_expiry_never_expires(self, db_session: AsyncSession) -> None:
        db_session.add(CacheEntry(key="forever", value="v", expires_at=None))
        await db_session.commit()
        assert await DBCacheClient(db_session).get("forever") == "v"

    @pytest.mark.asyncio
    async def test_delete_nonexistent_key(self, db_session: AsyncSession) -> None:
        await DBCacheClient(db_session).delete("nope")

    @pytest.mark.asyncio
    async def test_purge_expired(self, db_session: AsyncSession) -> None:
        db_session.add_all(
            [
                CacheEntry(key="old1", value="x", expires_at=_naive_utc(timedelta(hours=-2))),
                CacheEntry(key="old2", value="x", expires_at=_naive_utc(timedelta(hours=-1))),
                CacheEntry(key="live", value="y", expires_at=_naive_utc(timedelta(hours=1))),
            ]
        )
        await db_session.commit()

        cache = DBCacheClient(db_session)
        assert await cache.purge_expired() == 2
        assert await cache.get("live") == "y"
        assert await cache.purge_expired() == 0


@pytest.mark.unit
class TestIsExpired:
    def test_naive_past(self) -> None:
        assert _is_expired(_naive_utc(timedelta(seconds=-1))) is True

    def test_aware_future(self) -> None:
        assert _is_expired(datetime.now(UTC) + timedelta(hours=1)) is False


# ---------------------------------------------------------------------------
# TestRedisCacheClient
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestRedisCacheClient:
    """Tests for Redis-backed cache with mocked redis client."""

    @pytest.mark.asyncio
    async def test_get_returns_decoded_bytes(self) -> None:
        mock_redis = _make_mock_redis()
        mock_redis.get.return_value = b"hello"
        cache = RedisCacheClient(mock_redis)
        assert await cache.get("k") == "hello"
        mock_redis.get.assert_awaited_once_with("k")

    @pytest.mark.asyncio
    async def test_get_returns_none_on_miss(self) -> None:
        assert await RedisCacheClient(_make_mock_redis()).get("missing") is None

    @pytest.mark.asyncio
    async def test_get_returns_str_value(self) -> None:
        mock_redis = _make_mock_redis()
        mock_redis.get.return_value = "already-str"
        assert await RedisCacheClient(mock_redis).get("k") == "already-str"

    @pytest.mark.asyncio
    async def test_set_calls_redis_with_ttl(self) -> None:
        mock_redis = _make_mock_redis()
        await RedisCacheClient(mock_redis).set("k", "v", ttl_seconds=120)
        mock_redis.set.assert_awaited_once_with(name="k", value="v", ex=120)

    @pytest.mark.asyncio
    async def test_delete_calls_redis(self) -> None:
        mock_redis = _make_mock_redis()
        await RedisCacheClient(mock_redis).delete("k")
        mock_redis.delete.assert_awaited_once_with("k")

    @pytest.mark.asyncio
    async def test_exists(self) -> None:
        mock_redis = _make_mock_redis()
        cache = RedisCacheClient(mock_redis)
        assert await cache.exists("k") is False
        mock_redis.exists.return_value = 1
        assert await cache.exists("k") is True

    @pytest.mark.asyncio
    async def test_close_leaves_borrowed_client_open(self) -> None:
        mock_redis = _make_mock_redis()
        await RedisCacheClient(mock_redis).close()
        mock_redis.aclose.assert_not_awaited()


# ---------------------------------------------------------------------------
# TestDiskCacheClient
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestDiskCacheClient:
    """DiskCacheClient against a temporary directory."""

    @pytest.mark.asyncio
    async def test_set_get_delete(self, tmp_path: Path) -> None:
        client = DiskCacheClient(tmp_path / "cache")
        try:
            assert await client.get("k") is None
            assert await client.exists("k") is False
            await client.set("k", "v", ttl_seconds=60)
            assert await client.get("k") == "v"
            assert await client.exists("k") is True
            await client.delete("k")
            assert await client.get("k") is None
        finally:
            client.close()

    @pytest.mark.asyncio
    async def test_purge_expired(self, tmp_path: Path) -> None:
        client = DiskCacheClient(tmp_path / "cache")
        try:
            await client.set("short", "v", ttl_seconds=-1)
            await client.set("long", "v", ttl_seconds=3600)
            assert await client.purge_expired() == 1
            assert await client.exists("long") is True
        finally:
            client.close()

    def test_creates_directory(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "cache"
        DiskCacheClient(target).close()
        assert target.is_dir()


# ---------------------------------------------------------------------------
# TestCacheFactory
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestCacheFactory:
    """open_cache_client picks the backend from settings."""

    @pytest.mark.asyncio
    async def test_disk_backend(self, tmp_path: Path) -> None:
        settings = make_settings(cache_backend="disk", cache_dir=tmp_path / "disk")
        async with open_cache_client(settings) as client:
            assert isinstance(client, DiskCacheClient)
            await client.set("k", "v")
            assert await client.get("k") == "v"

    @pytest.mark.asyncio
    async def test_db_backend_creates_tables(self, tmp_path: Path) -> None:
        settings = make_settings(
            cache_backend="db", database_url=f"sqlite+aiosqlite:///{tmp_path / 'cc.db'}"
        )
        async with open_cache_client(settings) as client:
            assert isinstance(client, DBCacheClient)
            await client.set("k", "v")
            assert await client.get("k") == "v"

    @pytest.mark.asyncio
    async def test_redis_backend_closes_client(self) -> None:
        mock_redis = _make_mock_redis()
        settings = make_settings(cache_backend="redis")
        with patch("redis.asyncio.Redis.from_url", return_value=mock_redis) as from_url:
            async with open_cache_client(settings) as client:
                assert isinstance(client, RedisCacheClient)
        from_url.assert_called_once_with("redis://localhost:6379/1", decode_responses=True)
        mock_redis.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_career_path_cache_uses_configured_expiry(self, tmp_path: Path) -> None:
        settings = make_settings(
            cache_backend="disk", cache_dir=tmp_path / "disk", career_path_cache_days=3
        )
        async with open_career_path_cache(settings) as cache:
            assert isinstance(cache, CareerPathCache)
            assert cache.expiry == timedelta(days=3)

    @pytest.mark.asyncio
    async def test_unopenable_database_degrades(self, tmp_path: Path) -> None:
        """A store that cannot be opened yields a client whose calls fail."""
        url = f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'cc.db'}"
        settings = make_settings(cache_backend="db", database_url=url)
        async with open_cache_client(settings) as client:
            assert isinstance(client, UnavailableCacheClient)
            with pytest.raises(CacheUnavailableError, match="db cache unavailable"):
                await client.get("k")

    @pytest.mark.asyncio
    async def test_unusable_cache_dir_degrades(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        settings = make_settings(cache_backend="disk", cache_dir=blocker / "cache")
        async with open_cache_client(settings) as client:
            assert isinstance(client, UnavailableCacheClient)

    @pytest.mark.asyncio
    async def test_strict_open_raises(self, tmp_path: Path) -> None:
        url = f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'cc.db'}"
        settings = make_settings(cache_backend="db", database_url=url)
        with pytest.raises(CacheUnavailableError):
            async with open_cache_client(settings, degrade=False):
                pass

    @pytest.mark.asyncio
    async def test_career_path_cache_over_unopenable_store(self, tmp_path: Path) -> None:
        """Reads miss and writes are dropped without raising."""
        url = f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'cc.db'}"
        settings = make_settings(cache_backend="db", database_url=url)
        async with open_career_path_cache(settings) as cache:
            assert await cache.get("paths_abc") is None
            await cache.set("paths_abc", [{"role": "Analyst"}])
            assert await cache.get("paths_abc") is None

    @pytest.mark.asyncio
    async def test_body_errors_not_swallowed(self, tmp_path: Path) -> None:
        settings = make_settings(cache_backend="disk", cache_dir=tmp_path / "disk")
        with pytest.raises(KeyError):
            async with open_cache_client(settings):
                raise KeyError("boom")


@pytest.mark.unit
class TestUnavailableCacheClient:
    @pytest.mark.asyncio
    async def test_every_call_fails(self) -> None:
        client = UnavailableCacheClient("redis", "connection refused")
        for call in (client.get("k"), client.set("k", "v"), client.delete("k"), client.exists("k")):
            with pytest.raises(CacheUnavailableError, match="connection refused"):
                await call


@pytest.mark.unit
class TestDBCacheRollback:
    """A failed operation leaves the shared session usable."""

    @pytest.mark.asyncio
    async def test_failed_commit_rolls_back(self) -> None:
        session = MagicMock()
        session.get = AsyncMock(return_value=None)
        session.commit = AsyncMock(side_effect=RuntimeError("database is locked"))
        session.rollback = AsyncMock()

        with pytest.raises(RuntimeError, match="locked"):
            await DBCacheClient(session).set("k", "v")
        session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_read_rolls_back(self) -> None:
        session = MagicMock()
        session.get = AsyncMock(side_effect=RuntimeError("connection reset"))
        session.rollback = AsyncMock()

        with pytest.raises(RuntimeError):
            await DBCacheClient(session).get("k")
        session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_write_after_failed_write_succeeds(self, db_session: AsyncSession) -> None:
        cache = DBCacheClient(db_session)
        real_commit = db_session.commit
        attempts = 0

        async def flaky_commit() -> None:
            nonlocal attempts
            attempts += 1
            if attempts == 1:
                raise RuntimeError("transient")
            await real_commit()

        with patch.object(db_session, "commit", side_effect=flaky_commit):
            with pytest.raises(RuntimeError):
                await cache.set("k", "v1")
            await cache.set("k", "v2")

        assert await cache.get("k") == "v2"
