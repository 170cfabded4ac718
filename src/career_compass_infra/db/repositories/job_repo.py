"""Job repository: persist fetched postings and load recent active ones."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from career_compass_core.models.job import JobPosting
from career_compass_infra.db.models import JobPostingModel
from career_compass_infra.db.session import open_session

if TYPE_CHECKING:
    from career_compass_core.config.settings import Settings

logger = structlog.get_logger()


def _naive_utc(value: datetime | None) -> datetime | None:
    """Columns hold naive UTC; convert aware datetimes before binding."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def _aware_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def to_model(job: JobPosting) -> JobPostingModel:
    """Map a domain posting to its ORM row."""
    return JobPostingModel(
        job_id=job.job_id,
        title=job.title,
        company=job.company,
        location=job.location,
        remote=job.remote,
        hybrid=job.hybrid,
        description=job.description,
        requirements_json=list(job.requirements),
        responsibilities_json=list(job.responsibilities),
        salary_min=job.salary_min,
        salary_max=job.salary_max,
        salary_currency=job.salary_currency,
        posted_at=_naive_utc(job.posted_at),
        expires_at=_naive_utc(job.expires_at),
        source=job.source,
        apply_url=job.apply_url,
        tags_json=list(job.tags),
        job_type=job.job_type,
        seniority_level=job.seniority_level,
        scraped_at=_naive_utc(job.scraped_at) or datetime.now(UTC).replace(tzinfo=None),
        is_active=job.is_active,
    )


def to_domain(model: JobPostingModel) -> JobPosting:
    """Map an ORM row back to a JobPosting."""
    return JobPosting(
        job_id=model.job_id,
        title=model.title,
        company=model.company,
        location=model.location,
        remote=model.remote,
        hybrid=model.hybrid,
        description=model.description,
        requirements=model.requirements_json or [],
        responsibilities=model.responsibilities_json or [],
        salary_min=model.salary_min,
        salary_max=model.salary_max,
        salary_currency=model.salary_currency,
        posted_at=_aware_utc(model.posted_at),
        expires_at=_aware_utc(model.expires_at),
        source=model.source,  # type: ignore[arg-type]
        apply_url=model.apply_url,
        tags=model.tags_json or [],
        job_type=model.job_type,  # type: ignore[arg-type]
        seniority_level=model.seniority_level,  # type: ignore[arg-type]
        scraped_at=_aware_utc(model.scraped_at),
        is_active=model.is_active,
    )


class JobRepository:
    """CRUD operations for stored job postings."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize with an async session."""
        self._session = session

    async def upsert(self, job: JobPosting) -> None:
        """Insert or overwrite a posting by job_id."""
        try:
            await self._session.merge(to_model(job))
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise

    async def get(self, job_id: str) -> JobPosting | None:
        """Load a single posting by id."""
        model = await self._session.get(JobPostingModel, job_id)
        return to_domain(model) if model is not None else None

    async def list_recent_active(self, since: datetime, limit: int = 100) -> list[JobPosting]:
        """Active postings scraped after ``since``, newest first."""
        stmt = (
            select(JobPostingModel)
            .where(
                JobPostingModel.is_active.is_(True),
                JobPostingModel.scraped_at > _naive_utc(since),
            )
            .order_by(JobPostingModel.scraped_at.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [to_domain(m) for m in result.scalars().all()]

    async def deactivate(self, job_id: str) -> bool:
        """Mark a posting closed; returns False when it is unknown."""
        model = await self._session.get(JobPostingModel, job_id)
        if model is None:
            return False
        model.is_active = False
        await self._session.commit()
        return True


@asynccontextmanager
async def open_job_repository(settings: Settings) -> AsyncIterator[JobRepository | None]:
    """Yield a repository on the configured database, or None if it cannot be opened."""
    async with AsyncExitStack() as stack:
        repository: JobRepository | None
        try:
            session = await stack.enter_async_context(open_session(settings))
            repository = JobRepository(session)
        except Exception as e:
            logger.warning("job_store_unavailable", error_type=type(e).__name__, error=str(e))
            repository = None
        yield repository
