"""Rank a collection of job postings for a user."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

import structlog

from career_compass_core.exceptions import InvalidProfileError
from career_compass_core.matching.scorer import TagMatchMode, score_job
from career_compass_core.models.job import JobPosting, MatchResult
from career_compass_core.models.profile import UserProfile

logger = structlog.get_logger()


def rank_jobs(
    user: UserProfile,
    jobs: Iterable[JobPosting | Mapping[str, Any]],
    *,
    now: datetime | None = None,
    tag_match: TagMatchMode = "substring",
) -> list[MatchResult]:
    """Score every job, drop zero scores, and sort by score descending.

    Raw mappings are validated into JobPosting first. A record that fails
    validation or scoring is logged and skipped; the rest are still ranked.
    Ties keep their input order. No truncation is applied.
    """
    if user is None:
        msg = "user profile is required for matching"
        raise InvalidProfileError(msg)

    reference = now or datetime.now(UTC)
    results: list[MatchResult] = []
    skipped = 0
    for index, raw in enumerate(jobs):
        try:
            job = raw if isinstance(raw, JobPosting) else JobPosting.model_validate(raw)
            result = score_job(user, job, now=reference, tag_match=tag_match)
        except Exception as e:
            skipped += 1
            logger.warning(
                "job_skipped",
                index=index,
                error_type=type(e).__name__,
                error=str(e),
            )
            continue
        if result.match_score > 0:
            results.append(result)

    results.sort(key=lambda r: r.match_score, reverse=True)
    logger.debug("jobs_ranked", matched=len(results), skipped=skipped)
    return results
