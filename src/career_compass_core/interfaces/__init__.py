"""Public interface re-exports for career_compass_core."""

from career_compass_core.interfaces.cache import CacheClient, PurgeableCache
from career_compass_core.interfaces.job_search import JobSearchProvider
from career_compass_core.interfaces.onboarding import SkillInferrer, TaskGenerator
from career_compass_core.interfaces.path_generator import CareerPathGenerator

__all__ = [
    "CacheClient",
    "CareerPathGenerator",
    "JobSearchProvider",
    "PurgeableCache",
    "SkillInferrer",
    "TaskGenerator",
]
