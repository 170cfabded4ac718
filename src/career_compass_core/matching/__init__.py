"""Job match scoring and ranking."""

from career_compass_core.matching.ranker import rank_jobs
from career_compass_core.matching.scorer import score_job, tags_match

__all__ = [
    "rank_jobs",
    "score_job",
    "tags_match",
]
