"""Career path orchestration: cache first, LLM on miss, store back."""

from __future__ import annotations

import time

import structlog
from pydantic import ValidationError

from career_compass_core.cache_key import cache_key_for_request
from career_compass_core.constants import (
    CACHE_KEY_PREFIX,
    EXPECTED_CAREER_PATHS,
    FOUNDER_ROLE_KEYWORDS,
)
from career_compass_core.exceptions import InvalidRequestError
from career_compass_core.interfaces.path_generator import CareerPathGenerator
from career_compass_core.models.career_path import CareerPath, PathResult
from career_compass_core.models.profile import PathRequest
from career_compass_infra.cache.career_path_cache import CareerPathCache

logger = structlog.get_logger()


def filter_founder_roles(paths: list[CareerPath]) -> list[CareerPath]:
    """Drop founder/entrepreneur/CEO suggestions, which have no job postings."""
    return [
        p for p in paths if not any(kw in p.role.lower() for kw in FOUNDER_ROLE_KEYWORDS)
    ]


class PathOrchestrator:
    """Serve career paths for onboarding answers, reusing cached results."""

    def __init__(
        self,
        cache: CareerPathCache,
        generator: CareerPathGenerator,
        *,
        expected_count: int = EXPECTED_CAREER_PATHS,
        key_prefix: str = CACHE_KEY_PREFIX,
    ) -> None:
        """Initialize with an injected cache and generator."""
        self._cache = cache
        self._generator = generator
        self._expected_count = expected_count
        self._key_prefix = key_prefix

    async def get_career_paths(self, request: PathRequest) -> PathResult:
        """Return cached paths when fresh, otherwise generate, filter and cache them."""
        if not request.current_role.strip():
            msg = "Current role is required"
            raise InvalidRequestError(msg)

        key = cache_key_for_request(request, prefix=self._key_prefix)
        cached = await self._load_cached(key)
        if cached:
            logger.info("career_paths_served", cache_key=key, count=len(cached), cached=True)
            return PathResult(cache_key=key, career_paths=cached, cached=True)

        start = time.monotonic()
        generated = await self._generator.generate(request)
        paths = filter_founder_roles(generated)
        if len(paths) < len(generated):
            logger.info(
                "founder_roles_filtered",
                before=len(generated),
                after=len(paths),
            )
        if len(paths) < self._expected_count:
            logger.warning(
                "career_paths_short",
                received=len(paths),
                expected=self._expected_count,
            )

        await self._cache.set(key, [p.model_dump(mode="json") for p in paths])
        logger.info(
            "career_paths_served",
            cache_key=key,
            count=len(paths),
            cached=False,
            duration_seconds=round(time.monotonic() - start, 2),
        )
        return PathResult(cache_key=key, career_paths=paths, cached=False)

    async def _load_cached(self, key: str) -> list[CareerPath] | None:
        """Cached payload as models; empty or unreadable payloads count as a miss."""
        payload = await self._cache.get(key)
        if not payload:
            return None
        try:
            return [CareerPath.model_validate(record) for record in payload]
        except ValidationError as e:
            logger.warning("cached_paths_invalid", cache_key=key, error=str(e))
            return None
