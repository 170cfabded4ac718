"""Factory functions for creating collaborators from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from career_compass_core.exceptions import ConfigurationError
from career_compass_core.interfaces.job_search import JobSearchProvider
from career_compass_core.interfaces.onboarding import SkillInferrer, TaskGenerator
from career_compass_core.interfaces.path_generator import CareerPathGenerator

if TYPE_CHECKING:
    from career_compass_core.config.settings import Settings


def create_job_search(settings: Settings) -> JobSearchProvider:
    """Create the SerpApi-backed job search provider."""
    if settings.serpapi_api_key is None:
        msg = "CC_SERPAPI_API_KEY is required for job search"
        raise ConfigurationError(msg)

    from career_compass_agents.tools.serpapi_jobs import SerpApiJobSearch

    return SerpApiJobSearch(
        api_key=settings.serpapi_api_key.get_secret_value(),
        timeout=settings.job_search_timeout_seconds,
    )


def create_path_generator(settings: Settings) -> CareerPathGenerator:
    """Create the Anthropic-backed career path generator."""
    from career_compass_agents.agents.path_generator import AnthropicPathGenerator

    return AnthropicPathGenerator(settings)


def create_task_generator(settings: Settings) -> TaskGenerator:
    """Create the Anthropic-backed role task generator."""
    from career_compass_agents.agents.onboarding import AnthropicOnboardingAssistant

    return AnthropicOnboardingAssistant(settings)


def create_skill_inferrer(settings: Settings) -> SkillInferrer:
    """Create the Anthropic-backed skill inferrer."""
    from career_compass_agents.agents.onboarding import AnthropicOnboardingAssistant

    return AnthropicOnboardingAssistant(settings)
