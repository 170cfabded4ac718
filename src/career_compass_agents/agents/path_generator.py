"""LLM-backed career path generator."""

from __future__ import annotations

import structlog

from career_compass_agents.agents.base import AnthropicAgent
from career_compass_agents.prompts.career_paths import (
    CAREER_PATHS_SYSTEM,
    CAREER_PATHS_USER,
    format_list,
)
from career_compass_core.constants import CAREER_PATHS_PROMPT_VERSION
from career_compass_core.exceptions import PathGenerationError
from career_compass_core.models.career_path import CareerPath, CareerPathList
from career_compass_core.models.profile import PathRequest

logger = structlog.get_logger()


class AnthropicPathGenerator(AnthropicAgent):
    """Generate career paths with Claude via instructor structured output."""

    agent_name = "path_generator"

    def build_messages(self, request: PathRequest) -> list[dict[str, str]]:
        """Render the prompt for a request."""
        return [
            {
                "role": "user",
                "content": CAREER_PATHS_USER.format(
                    current_role=request.current_role,
                    skills=format_list(request.skills),
                    tasks=format_list(request.tasks),
                    interests=format_list(request.interests),
                    count=self.settings.path_count,
                ),
            },
        ]

    async def generate(self, request: PathRequest) -> list[CareerPath]:
        """Call the LLM and return the parsed career paths.

        Retries with exponential backoff; the final failure is wrapped in
        PathGenerationError.
        """
        model = self.settings.path_model
        try:
            result = await self._call_llm(
                model=model,
                system=CAREER_PATHS_SYSTEM,
                messages=self.build_messages(request),
                response_model=CareerPathList,
                prompt_version=CAREER_PATHS_PROMPT_VERSION,
                max_tokens=8192,
            )
        except Exception as e:
            self._log_failure("path_generation_failed", model, e)
            raise PathGenerationError(f"Failed to generate career paths: {e}") from e

        logger.debug("career_paths_generated", count=len(result.career_paths))
        return result.career_paths
