"""Onboarding suggestion interfaces."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TaskGenerator(Protocol):
    """Suggests typical tasks for a job title."""

    async def generate_tasks(
        self, role: str, company: str | None = None, count: int | None = None
    ) -> list[str]:
        ...


@runtime_checkable
class SkillInferrer(Protocol):
    """Infers skills from a role and the tasks the user performs."""

    async def infer_skills(
        self, role: str, tasks: list[str], company: str | None = None
    ) -> list[str]:
        ...
