"""Tests for the job matching service."""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from career_compass_agents.orchestrator.job_matcher import JobMatchService
from career_compass_core.exceptions import JobSearchError
from career_compass_core.models.profile import UserProfile
from career_compass_infra.db.repositories.job_repo import JobRepository
from tests.mocks.mock_factories import NOW, make_job_posting
from tests.mocks.mock_settings import make_settings


def _search_returning(*jobs: object) -> AsyncMock:
    search = AsyncMock()
    search.search = AsyncMock(return_value=list(jobs))
    return search


@pytest.mark.unit
class TestJobMatchService:
    """Stored-first lookup, live search fallback and ranking."""

    @pytest.mark.asyncio
    async def test_searches_and_ranks_without_repository(self, sample_user: UserProfile) -> None:
        search = _search_returning(
            make_job_posting(job_id="weak", tags=["excel"]),
            make_job_posting(job_id="strong", tags=["sql", "python"], remote=True),
            make_job_posting(job_id="none"),
        )
        service = JobMatchService(make_settings(), search)

        report = await service.find_matches(sample_user, "data analyst", now=NOW)

        assert [m.job.job_id for m in report.matches] == ["strong", "weak"]
        assert report.jobs_considered == 3
        assert report.from_store is False
        search.search.assert_awaited_once_with("data analyst", "United States", limit=50)

    @pytest.mark.asyncio
    async def test_explicit_location_used(self, sample_user: UserProfile) -> None:
        search = _search_returning()
        await JobMatchService(make_settings(), search).find_matches(
            sample_user, "analyst", "Boston, MA", now=NOW
        )
        search.search.assert_awaited_once_with("analyst", "Boston, MA", limit=50)

    @pytest.mark.asyncio
    async def test_truncates_to_max_results(self, sample_user: UserProfile) -> None:
        jobs = [make_job_posting(job_id=str(i), tags=["sql"]) for i in range(10)]
        service = JobMatchService(make_settings(max_match_results=3), _search_returning(*jobs))
        report = await service.find_matches(sample_user, "analyst", now=NOW)
        assert len(report.matches) == 3
        assert report.jobs_considered == 10

    @pytest.mark.asyncio
    async def test_exact_tag_mode_from_settings(self, sample_user: UserProfile) -> None:
        search = _search_returning(make_job_posting(tags=["PostgreSQL"]))
        substring = await JobMatchService(make_settings(), search).find_matches(
            sample_user, "q", now=NOW
        )
        exact = await JobMatchService(make_settings(tag_match_mode="exact"), search).find_matches(
            sample_user, "q", now=NOW
        )
        assert len(substring.matches) == 1
        assert exact.matches == []

    @pytest.mark.asyncio
    async def test_search_failure_gives_empty_report(self, sample_user: UserProfile) -> None:
        search = AsyncMock()
        search.search = AsyncMock(side_effect=JobSearchError("quota exceeded"))
        report = await JobMatchService(make_settings(), search).find_matches(
            sample_user, "q", now=NOW
        )
        assert report.matches == []
        assert report.jobs_considered == 0

    @pytest.mark.asyncio
    async def test_results_persisted(
        self, sample_user: UserProfile, db_session: AsyncSession
    ) -> None:
        repo = JobRepository(db_session)
        search = _search_returning(make_job_posting(job_id="a", tags=["sql"], scraped_at=NOW))
        await JobMatchService(make_settings(), search, repo).find_matches(
            sample_user, "q", now=NOW
        )
        assert await repo.get("a") is not None

    @pytest.mark.asyncio
    async def test_fresh_stored_jobs_skip_search(
        self, sample_user: UserProfile, db_session: AsyncSession
    ) -> None:
        repo = JobRepository(db_session)
        await repo.upsert(
            make_job_posting(job_id="stored", tags=["sql"], scraped_at=NOW - timedelta(hours=1))
        )
        search = _search_returning()

        report = await JobMatchService(make_settings(), search, repo).find_matches(
            sample_user, "q", now=NOW
        )

        assert report.from_store is True
        assert [m.job.job_id for m in report.matches] == ["stored"]
        search.search.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_stale_stored_jobs_trigger_search(
        self, sample_user: UserProfile, db_session: AsyncSession
    ) -> None:
        repo = JobRepository(db_session)
        await repo.upsert(
            make_job_posting(job_id="stale", tags=["sql"], scraped_at=NOW - timedelta(hours=7))
        )
        search = _search_returning(make_job_posting(job_id="fresh", tags=["sql"], scraped_at=NOW))

        report = await JobMatchService(make_settings(), search, repo).find_matches(
            sample_user, "q", now=NOW
        )

        assert report.from_store is False
        assert [m.job.job_id for m in report.matches] == ["fresh"]

    @pytest.mark.asyncio
    async def test_store_failures_degrade(self, sample_user: UserProfile) -> None:
        repo = AsyncMock()
        repo.list_recent_active.side_effect = RuntimeError("db locked")
        repo.upsert.side_effect = RuntimeError("db locked")
        search = _search_returning(make_job_posting(tags=["sql"]))

        report = await JobMatchService(make_settings(), search, repo).find_matches(
            sample_user, "q", now=NOW
        )

        assert len(report.matches) == 1
        repo.upsert.assert_awaited_once()
