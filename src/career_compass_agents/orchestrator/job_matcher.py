"""Job matching flow: stored or freshly searched postings, ranked for a user."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import structlog

from career_compass_core.matching.ranker import rank_jobs
from career_compass_core.models.job import JobPosting, MatchResult
from career_compass_core.models.profile import UserProfile

if TYPE_CHECKING:
    from career_compass_core.config.settings import Settings
    from career_compass_core.interfaces.job_search import JobSearchProvider
    from career_compass_infra.db.repositories.job_repo import JobRepository

logger = structlog.get_logger()


@dataclass
class JobMatchReport:
    """Ranked matches plus where the postings came from."""

    matches: list[MatchResult] = field(default_factory=list)
    jobs_considered: int = 0
    from_store: bool = False


class JobMatchService:
    """Find and rank job postings for a user profile.

    Stored postings younger than ``job_freshness_hours`` are reused; otherwise
    the search provider is queried and results are persisted best-effort.
    Store and search failures degrade to fewer postings, never to an error.
    """

    def __init__(
        self,
        settings: Settings,
        search: JobSearchProvider,
        repository: JobRepository | None = None,
    ) -> None:
        self.settings = settings
        self._search = search
        self._repository = repository

    async def find_matches(
        self,
        user: UserProfile,
        query: str,
        location: str | None = None,
        *,
        now: datetime | None = None,
    ) -> JobMatchReport:
        reference = now or datetime.now(UTC)
        jobs = await self._load_stored(reference)
        from_store = bool(jobs)
        if not jobs:
            jobs = await self._fetch_and_store(query, location or self.settings.job_search_location)

        if not jobs:
            logger.info("no_jobs_found", query=query)
            return JobMatchReport()

        ranked = rank_jobs(user, jobs, now=reference, tag_match=self.settings.tag_match_mode)
        matches = ranked[: self.settings.max_match_results]
        logger.info(
            "jobs_matched",
            considered=len(jobs),
            matched=len(ranked),
            returned=len(matches),
            from_store=from_store,
        )
        return JobMatchReport(matches=matches, jobs_considered=len(jobs), from_store=from_store)

    async def _load_stored(self, now: datetime) -> list[JobPosting]:
        if self._repository is None:
            return []
        since = now - timedelta(hours=self.settings.job_freshness_hours)
        try:
            return await self._repository.list_recent_active(
                since, limit=self.settings.job_search_limit
            )
        except Exception as e:
            logger.warning("job_store_read_failed", error=str(e))
            return []

    async def _fetch_and_store(self, query: str, location: str) -> list[JobPosting]:
        try:
            jobs = await self._search.search(query, location, limit=self.settings.job_search_limit)
        except Exception as e:
            logger.error(
                "job_search_failed",
                query=query,
                error_type=type(e).__name__,
                error=str(e),
            )
            return []

        if self._repository is not None:
            for job in jobs:
                try:
                    await self._repository.upsert(job)
                except Exception as e:
                    logger.warning("job_store_write_failed", job_id=job.job_id, error=str(e))
        return jobs
