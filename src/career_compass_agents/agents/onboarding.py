"""LLM-backed onboarding helpers: tasks for a role and skills implied by tasks."""

from __future__ import annotations

import structlog

from career_compass_agents.agents.base import AnthropicAgent
from career_compass_agents.prompts.onboarding import (
    INFER_SKILLS_SYSTEM,
    INFER_SKILLS_USER,
    ROLE_TASKS_SYSTEM,
    ROLE_TASKS_USER,
    company_suffix,
    numbered,
    role_guidance,
)
from career_compass_core.constants import INFER_SKILLS_PROMPT_VERSION, ROLE_TASKS_PROMPT_VERSION
from career_compass_core.exceptions import InvalidRequestError, SuggestionError
from career_compass_core.models.onboarding import SkillSuggestions, TaskSuggestions

logger = structlog.get_logger()


def _clean(values: list[str]) -> list[str]:
    """Strip entries, dropping blanks and case-insensitive repeats."""
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        text = value.strip()
        if text and text.lower() not in seen:
            seen.add(text.lower())
            result.append(text)
    return result


class AnthropicOnboardingAssistant(AnthropicAgent):
    """Suggest tasks for a role and infer skills from chosen tasks."""

    agent_name = "onboarding"

    def build_task_messages(
        self, role: str, company: str | None, count: int
    ) -> list[dict[str, str]]:
        guidance = role_guidance(role)
        return [
            {
                "role": "user",
                "content": ROLE_TASKS_USER.format(
                    role=role,
                    company=company_suffix(company),
                    guidance=f"\n{guidance}\n" if guidance else "",
                    count=count,
                ),
            },
        ]

    def build_skill_messages(
        self, role: str, tasks: list[str], company: str | None
    ) -> list[dict[str, str]]:
        return [
            {
                "role": "user",
                "content": INFER_SKILLS_USER.format(
                    role=role,
                    company=company_suffix(company),
                    tasks=numbered(tasks),
                ),
            },
        ]

    async def generate_tasks(
        self, role: str, company: str | None = None, count: int | None = None
    ) -> list[str]:
        """Return up to ``count`` tasks typical for ``role``.

        Raises InvalidRequestError for a blank role or a count below 1 and
        SuggestionError when the LLM call fails.
        """
        role = role.strip()
        if not role:
            raise InvalidRequestError("role must be a non-empty string")
        count = self.settings.task_count if count is None else count
        if count < 1:
            raise InvalidRequestError(f"task count must be at least 1, got {count}")
        company = company.strip() if company else None

        model = self.settings.onboarding_model
        try:
            result = await self._call_llm(
                model=model,
                system=ROLE_TASKS_SYSTEM,
                messages=self.build_task_messages(role, company, count),
                response_model=TaskSuggestions,
                prompt_version=ROLE_TASKS_PROMPT_VERSION,
            )
        except Exception as e:
            self._log_failure("task_generation_failed", model, e)
            raise SuggestionError(f"Failed to generate tasks for {role!r}: {e}") from e

        tasks = _clean(result.tasks)[:count]
        logger.info("tasks_generated", role=role, requested=count, returned=len(tasks))
        return tasks

    async def infer_skills(
        self, role: str, tasks: list[str], company: str | None = None
    ) -> list[str]:
        """Return skills implied by ``tasks`` performed as ``role``.

        Raises InvalidRequestError when the role is blank or no task is given
        and SuggestionError when the LLM call fails.
        """
        role = role.strip()
        if not role:
            raise InvalidRequestError("role must be a non-empty string")
        tasks = _clean(tasks)
        if not tasks:
            raise InvalidRequestError("at least one task is required")
        company = company.strip() if company else None

        model = self.settings.onboarding_model
        try:
            result = await self._call_llm(
                model=model,
                system=INFER_SKILLS_SYSTEM,
                messages=self.build_skill_messages(role, tasks, company),
                response_model=SkillSuggestions,
                prompt_version=INFER_SKILLS_PROMPT_VERSION,
            )
        except Exception as e:
            self._log_failure("skill_inference_failed", model, e)
            raise SuggestionError(f"Failed to infer skills for {role!r}: {e}") from e

        skills = _clean(result.inferred_skills)
        logger.info("skills_inferred", role=role, tasks=len(tasks), skills=len(skills))
        return skills
