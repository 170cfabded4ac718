"""Shared constants for career-compass."""

from __future__ import annotations

# Prompt versions: increment when prompt templates change
CAREER_PATHS_PROMPT_VERSION = "v1"
ROLE_TASKS_PROMPT_VERSION = "v1"
INFER_SKILLS_PROMPT_VERSION = "v1"

# Match scoring weights (points out of 100)
SKILLS_WEIGHT = 40.0
LOCATION_WEIGHT = 20.0
SALARY_WEIGHT = 20.0
ABOVE_SALARY_BONUS = 15.0
RECENCY_WEIGHT = 10.0
ENVIRONMENT_MATCH_BONUS = 10.0
GROWTH_BONUS = 5.0

MIN_MATCH_SCORE = 0
MAX_MATCH_SCORE = 100

# Recency windows in days
RECENCY_WINDOW_DAYS = 30.0
RECENT_POSTING_DAYS = 7.0

GROWTH_SENIORITY_LEVELS = frozenset({"senior", "lead"})

DEFAULT_MATCH_REASON = "Potential match"

# Career path cache
CACHE_KEY_PREFIX = "paths_"
CAREER_PATH_CACHE_DAYS = 7
EXPECTED_CAREER_PATHS = 15

# Onboarding
DEFAULT_TASK_COUNT = 4
# A single desired salary becomes the range [0.8x, 1.2x]
DESIRED_SALARY_LOW_FACTOR = 0.8
DESIRED_SALARY_HIGH_FACTOR = 1.2

# Roles we never show: there are no job postings behind them
FOUNDER_ROLE_KEYWORDS = (
    "founder",
    "co-founder",
    "entrepreneur",
    "startup founder",
    "ceo",
    "chief executive",
)

# Skill keywords detected in job titles/descriptions from job search results
JOB_SKILL_KEYWORDS = (
    "salesforce",
    "hubspot",
    "excel",
    "sql",
    "python",
    "javascript",
    "project management",
    "data analysis",
    "customer success",
    "crm",
    "saas",
    "b2b",
    "sales",
    "marketing",
)

# LLM token pricing (USD per 1M tokens)
TOKEN_PRICES: dict[str, dict[str, float]] = {
    "claude-haiku-4-5-20251001": {"input": 0.80, "output": 4.00},
    "claude-sonnet-4-5-20250514": {"input": 3.00, "output": 15.00},
}
