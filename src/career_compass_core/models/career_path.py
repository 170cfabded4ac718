"""Career path suggestions and their cache envelope."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


class SweetSpot(BaseModel):
    """A current skill or task that carries over into a suggested role."""

    skill: str = Field(description="Skill or task name")
    explanation: str = Field(default="", description="How it translates to the new role")


class CareerPath(BaseModel):
    """A single AI-generated career path suggestion."""

    role: str = Field(description="Suggested role title, with industry context")
    category: Literal["related", "stretch", "unexpected"] = Field(
        description="How far the role is from the user's current work"
    )
    match_score: int = Field(ge=0, le=100, description="LLM-estimated fit 0-100")
    reasoning: str = Field(description="Why the role fits the user's skills and interests")
    overview: str | None = Field(default=None, description="What the role involves")
    average_salary: str | None = Field(default=None, description="Average salary text")
    typical_degree: str | None = Field(default=None, description="Typical degree required")
    sweet_spots: list[SweetSpot] = Field(
        default_factory=list, description="Overlapping skills and how they transfer"
    )
    salary_range: str | None = Field(default=None, description="Salary range text")
    time_to_transition: str | None = Field(default=None, description="Estimated transition time")
    difficulty: Literal["easy", "moderate", "challenging"] | None = Field(
        default=None, description="Transition difficulty"
    )
    icon: str | None = Field(default=None, description="Emoji icon")


class CareerPathList(BaseModel):
    """Structured LLM response wrapping the generated paths."""

    career_paths: list[CareerPath] = Field(description="Generated career paths")


class CachedCareerPaths(BaseModel):
    """Value stored in the cache for one fingerprint."""

    career_paths: list[dict[str, Any]] = Field(
        default_factory=list, description="Opaque career path records"
    )
    cached_at: datetime | None = Field(
        default=None, description="When the entry was written; None once invalidated"
    )


class PathResult(BaseModel):
    """Career paths returned to the caller, with cache provenance."""

    cache_key: str = Field(description="Fingerprint the paths are stored under")
    career_paths: list[CareerPath] = Field(description="Career path suggestions")
    cached: bool = Field(description="Whether the paths came from the cache")
