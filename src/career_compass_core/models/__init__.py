"""Domain models for career-compass."""

from career_compass_core.models.career_path import (
    CachedCareerPaths,
    CareerPath,
    CareerPathList,
    PathResult,
    SweetSpot,
)
from career_compass_core.models.job import JobPosting, MatchResult
from career_compass_core.models.onboarding import SkillSuggestions, TaskSuggestions
from career_compass_core.models.profile import PathRequest, UserProfile

__all__ = [
    "CachedCareerPaths",
    "CareerPath",
    "CareerPathList",
    "JobPosting",
    "MatchResult",
    "PathRequest",
    "PathResult",
    "SkillSuggestions",
    "SweetSpot",
    "TaskSuggestions",
    "UserProfile",
]
