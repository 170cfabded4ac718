"""Google Jobs search via SerpApi."""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from career_compass_core.constants import JOB_SKILL_KEYWORDS
from career_compass_core.exceptions import JobSearchError
from career_compass_core.models.job import JobPosting

logger = structlog.get_logger()

SERPAPI_URL = "https://serpapi.com/search.json"

_SALARY_RE = re.compile(r"\$?([\d,]+)\s*[-–]\s*\$?([\d,]+)")

# Relative "posted_at" text to days-per-unit
_RELATIVE_POSTED_RE = re.compile(
    r"(\d+)\+?\s*(minute|hour|day|week|month)s?\s+ago", re.IGNORECASE
)
_UNIT_DAYS: dict[str, float] = {
    "minute": 1 / 1440,
    "hour": 1 / 24,
    "day": 1.0,
    "week": 7.0,
    "month": 30.0,
}


def parse_salary(text: str | None) -> tuple[int | None, int | None]:
    """Extract a "$80,000 - $90,000" style range; anything else is unknown."""
    if not text:
        return None, None
    match = _SALARY_RE.search(text)
    if not match:
        return None, None
    low = int(match.group(1).replace(",", ""))
    high = int(match.group(2).replace(",", ""))
    if low > high:
        return None, None
    return low, high


def parse_posted_at(text: str | None, now: datetime) -> datetime | None:
    """Parse "3 days ago" or an ISO timestamp; None when unrecognised."""
    if not text:
        return None
    match = _RELATIVE_POSTED_RE.search(text)
    if match:
        days = int(match.group(1)) * _UNIT_DAYS[match.group(2).lower()]
        return now - timedelta(days=days)
    try:
        parsed = datetime.fromisoformat(text.strip())
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def extract_tags(title: str, description: str) -> list[str]:
    """Skill keywords present in the title or description."""
    text = f"{title}\n{description}".lower()
    return [kw for kw in JOB_SKILL_KEYWORDS if kw in text]


def transform_result(item: dict[str, Any], now: datetime) -> JobPosting:
    """Map one ``jobs_results`` entry to a JobPosting."""
    title = item["title"]
    description = item.get("description") or ""
    location = (item.get("location") or "").strip()
    extensions = item.get("detected_extensions") or {}

    salary_min, salary_max = parse_salary(extensions.get("salary"))
    remote = any("remote" in s.lower() for s in (title, description, location))
    related = item.get("related_links") or []
    apply_url = (related[0].get("link") if related else None) or item.get("share_url") or ""

    return JobPosting(
        job_id=item["job_id"],
        title=title,
        company=item.get("company_name") or "",
        location=location,
        remote=remote,
        description=description,
        salary_min=salary_min,
        salary_max=salary_max,
        posted_at=parse_posted_at(extensions.get("posted_at"), now),
        source="google",
        apply_url=apply_url,
        tags=extract_tags(title, description),
        scraped_at=now,
    )


class SerpApiJobSearch:
    """JobSearchProvider backed by SerpApi's google_jobs engine."""

    def __init__(self, api_key: str, timeout: float = 30.0) -> None:
        """Initialize with a SerpApi key."""
        self._api_key = api_key
        self._timeout = timeout

    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    async def _fetch(self, query: str, location: str) -> dict[str, Any]:
        params = {
            "engine": "google_jobs",
            "q": query,
            "location": location,
            "api_key": self._api_key,
        }
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.get(SERPAPI_URL, params=params)
            if response.status_code >= 400:
                msg = f"SerpApi HTTP error: {response.status_code} {response.text[:200]}"
                raise JobSearchError(msg)
            data: dict[str, Any] = response.json()
        if data.get("error"):
            msg = f"SerpApi error: {data['error']}"
            raise JobSearchError(msg)
        return data

    async def search(self, query: str, location: str, limit: int = 50) -> list[JobPosting]:
        """Search Google Jobs and return up to ``limit`` postings."""
        logger.info("job_search_start", query=query, location=location)
        data = await self._fetch(query, location)
        now = datetime.now(UTC)

        jobs: list[JobPosting] = []
        for item in (data.get("jobs_results") or [])[:limit]:
            try:
                jobs.append(transform_result(item, now))
            except Exception as e:
                logger.warning(
                    "job_transform_failed",
                    job_id=item.get("job_id"),
                    error_type=type(e).__name__,
                    error=str(e),
                )
        logger.info("job_search_complete", query=query, count=len(jobs))
        return jobs
