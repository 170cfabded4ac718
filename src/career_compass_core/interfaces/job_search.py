"""Abstract job search provider interface."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from career_compass_core.models.job import JobPosting


@runtime_checkable
class JobSearchProvider(Protocol):
    """Source of live job postings."""

    async def search(self, query: str, location: str, limit: int = 50) -> list[JobPosting]:
        """Search postings for a role query in a location."""
        ...
