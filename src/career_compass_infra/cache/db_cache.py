"""Database-backed CacheClient storing entries in the ``cache_entries`` table."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta

from sqlalchemy import DateTime, String, Text, delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column

from career_compass_infra.db.models import Base


class CacheEntry(Base):
    """Key/value row with an optional expiry, stored as naive UTC."""

    __tablename__ = "cache_entries"

    key: Mapped[str] = mapped_column(String(512), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)


def _utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


def _is_expired(expires_at: datetime) -> bool:
    """Check expiry, handling both naive and aware datetimes."""
    if expires_at.tzinfo is not None:
        expires_at = expires_at.astimezone(UTC).replace(tzinfo=None)
    return expires_at <= _utcnow()


class DBCacheClient:
    """Cache implementation backed by the application's database."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize with an async SQLAlchemy session."""
        self._session = session

    @asynccontextmanager
    async def _rollback_on_error(self) -> AsyncIterator[None]:
        """Roll back a failed operation; the session is reused by later calls."""
        try:
            yield
        except Exception:
            await self._session.rollback()
            raise

    async def _live_entry(self, key: str) -> CacheEntry | None:
        """Return the entry for key, purging it first if it has expired."""
        entry = await self._session.get(CacheEntry, key)
        if entry is None:
            return None
        if entry.expires_at is not None and _is_expired(entry.expires_at):
            await self._session.delete(entry)
            await self._session.commit()
            return None
        return entry

    async def get(self, key: str) -> str | None:
        """Retrieve a value by key, or None if missing/expired."""
        async with self._rollback_on_error():
            entry = await self._live_entry(key)
        return entry.value if entry is not None else None

    async def set(self, key: str, value: str, ttl_seconds: int = 86400) -> None:
        """Insert or overwrite a value with TTL."""
        expires_at = _utcnow() + timedelta(seconds=ttl_seconds)
        async with self._rollback_on_error():
            entry = await self._session.get(CacheEntry, key)
            if entry is None:
                self._session.add(CacheEntry(key=key, value=value, expires_at=expires_at))
            else:
                entry.value = value
                entry.expires_at = expires_at
            await self._session.commit()

    async def delete(self, key: str) -> None:
        """Delete a key from the cache; missing keys are ignored."""
        async with self._rollback_on_error():
            await self._session.execute(delete(CacheEntry).where(CacheEntry.key == key))
            await self._session.commit()

    async def exists(self, key: str) -> bool:
        """Check if a key exists and is not expired."""
        async with self._rollback_on_error():
            return await self._live_entry(key) is not None

    async def purge_expired(self) -> int:
        """Delete every expired entry and return how many were removed."""
        stmt = select(CacheEntry.key).where(
            CacheEntry.expires_at.isnot(None), CacheEntry.expires_at <= _utcnow()
        )
        async with self._rollback_on_error():
            keys = list((await self._session.execute(stmt)).scalars().all())
            if keys:
                await self._session.execute(delete(CacheEntry).where(CacheEntry.key.in_(keys)))
                await self._session.commit()
        return len(keys)
