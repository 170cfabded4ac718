"""LLM response models for onboarding suggestions."""

from __future__ import annotations

from pydantic import BaseModel, Field


class TaskSuggestions(BaseModel):
    """Typical day-to-day tasks for a role."""

    tasks: list[str] = Field(
        default_factory=list, description="Concrete, role-specific task descriptions"
    )


class SkillSuggestions(BaseModel):
    """Skills implied by a role and the tasks it involves."""

    inferred_skills: list[str] = Field(
        default_factory=list,
        description="Tools, methods and competencies demonstrated by the tasks",
    )
