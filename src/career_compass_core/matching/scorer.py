"""Rule-based match scoring of a job posting against a user profile.

Score range: 0-100 (clamped, rounded half-up). Five independent factors are
evaluated in a fixed order and each appends its reason as it contributes:

  1. skills overlap, up to 40, proportional
  2. location, flat 20
  3. salary, up to 20 in range, 15 when the job pays above the range
  4. recency, up to 10, linear decay over 30 days
  5. environment, +10 remote/hybrid preference, +5 growth opportunity
"""

from __future__ import annotations

import math
from datetime import UTC, date, datetime
from typing import Literal

from career_compass_core.constants import (
    ABOVE_SALARY_BONUS,
    DEFAULT_MATCH_REASON,
    ENVIRONMENT_MATCH_BONUS,
    GROWTH_BONUS,
    GROWTH_SENIORITY_LEVELS,
    LOCATION_WEIGHT,
    MAX_MATCH_SCORE,
    MIN_MATCH_SCORE,
    RECENCY_WEIGHT,
    RECENCY_WINDOW_DAYS,
    RECENT_POSTING_DAYS,
    SALARY_WEIGHT,
    SKILLS_WEIGHT,
)
from career_compass_core.models.job import JobPosting, MatchResult
from career_compass_core.models.profile import UserProfile

TagMatchMode = Literal["substring", "exact"]

_SECONDS_PER_DAY = 86400.0


def score_job(
    user: UserProfile,
    job: JobPosting,
    *,
    now: datetime | None = None,
    tag_match: TagMatchMode = "substring",
) -> MatchResult:
    """Score one job for one user.

    Args:
        user: The user's matching profile.
        job: The posting to score. Never modified.
        now: Reference time for recency; defaults to the current UTC time.
        tag_match: "substring" counts a tag as matching when either string
            contains the other (case-insensitive); "exact" requires equality.

    Returns:
        MatchResult holding the same job instance, the score and the reasons.
    """
    reference = now or datetime.now(UTC)
    score = 0.0
    reasons: list[str] = []

    skills, overlap = _skills_score(user.matching_tags, job.tags, tag_match)
    score += skills
    if overlap > 0:
        reasons.append(f"{overlap} matching skills")

    location_reason = _location_reason(user, job)
    if location_reason:
        score += LOCATION_WEIGHT
        reasons.append(location_reason)

    salary, salary_reason = _salary_score(user, job)
    score += salary
    if salary_reason:
        reasons.append(salary_reason)

    if job.posted_at is not None:
        recency, posted_recently = _recency_score(job.posted_at, reference)
        score += recency
        if posted_recently:
            reasons.append("Posted recently")

    if user.work_environment_pref == "remote" and job.remote:
        score += ENVIRONMENT_MATCH_BONUS
        reasons.append("Matches your remote preference")
    if user.work_environment_pref == "hybrid" and job.hybrid:
        score += ENVIRONMENT_MATCH_BONUS
        reasons.append("Matches your hybrid preference")
    if user.work_environment_pref != "office" and job.seniority_level in GROWTH_SENIORITY_LEVELS:
        score += GROWTH_BONUS
        reasons.append("Growth opportunity")

    clamped = max(float(MIN_MATCH_SCORE), min(float(MAX_MATCH_SCORE), score))
    return MatchResult(
        job=job,
        match_score=math.floor(clamped + 0.5),
        reasons=reasons or [DEFAULT_MATCH_REASON],
    )


def tags_match(user_tag: str, job_tag: str, mode: TagMatchMode = "substring") -> bool:
    """Compare two tags case-insensitively."""
    a = user_tag.strip().lower()
    b = job_tag.strip().lower()
    if not a or not b:
        return False
    if mode == "exact":
        return a == b
    return a in b or b in a


def _skills_score(
    user_tags: list[str],
    job_tags: list[str],
    mode: TagMatchMode,
) -> tuple[float, int]:
    """Return (points, number of user tags matching any job tag).

    Blank job tags match nothing and are left out of the denominator.
    """
    job_tags = [tag for tag in job_tags if tag.strip()]
    if not user_tags or not job_tags:
        return 0.0, 0
    overlap = sum(1 for ut in user_tags if any(tags_match(ut, jt, mode) for jt in job_tags))
    return overlap / max(len(user_tags), len(job_tags)) * SKILLS_WEIGHT, overlap


def _location_reason(user: UserProfile, job: JobPosting) -> str | None:
    if job.remote and user.include_remote:
        return "Remote position"
    job_loc = job.location.strip().lower()
    if not job_loc:
        return None
    for loc in user.locations:
        user_loc = loc.strip().lower()
        if user_loc and (user_loc in job_loc or job_loc in user_loc):
            return "Location matches"
    return None


def _salary_score(user: UserProfile, job: JobPosting) -> tuple[float, str | None]:
    """Salary is only considered when both ranges are fully known."""
    if job.salary_min is None or job.salary_max is None or not user.has_salary_range:
        return 0.0, None
    assert user.desired_salary_min is not None and user.desired_salary_max is not None

    overlaps = (
        job.salary_min <= user.desired_salary_max and job.salary_max >= user.desired_salary_min
    )
    if overlaps:
        user_mid = (user.desired_salary_min + user.desired_salary_max) / 2
        job_mid = (job.salary_min + job.salary_max) / 2
        diff = abs(user_mid - job_mid) / user_mid
        return max(0.0, (1 - diff) * SALARY_WEIGHT), "Salary in your range"
    if job.salary_min >= user.desired_salary_min:
        return ABOVE_SALARY_BONUS, "Above your salary range"
    return 0.0, None


def _recency_score(posted_at: object, now: datetime) -> tuple[float, bool]:
    """Return (points, posted within a week); bad timestamps score nothing."""
    try:
        days = _days_between(posted_at, now)
    except (TypeError, ValueError, OverflowError):
        return 0.0, False
    points = min(RECENCY_WEIGHT, max(0.0, (1 - days / RECENCY_WINDOW_DAYS) * RECENCY_WEIGHT))
    return points, days < RECENT_POSTING_DAYS


def _days_between(posted_at: object, now: datetime) -> float:
    if isinstance(posted_at, datetime):
        posted = posted_at
    elif isinstance(posted_at, date):
        posted = datetime(posted_at.year, posted_at.month, posted_at.day)
    elif isinstance(posted_at, int | float) and not isinstance(posted_at, bool):
        posted = datetime.fromtimestamp(posted_at / 1000, tz=UTC)
    elif isinstance(posted_at, str):
        posted = datetime.fromisoformat(posted_at)
    else:
        msg = f"unsupported timestamp type: {type(posted_at).__name__}"
        raise TypeError(msg)

    if posted.tzinfo is None:
        posted = posted.replace(tzinfo=UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    return (now - posted).total_seconds() / _SECONDS_PER_DAY
