"""Abstract career path generator interface."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from career_compass_core.models.career_path import CareerPath
from career_compass_core.models.profile import PathRequest


@runtime_checkable
class CareerPathGenerator(Protocol):
    """Produces career path suggestions, typically by calling an LLM."""

    async def generate(self, request: PathRequest) -> list[CareerPath]:
        """Generate career paths for the given onboarding answers."""
        ...
