"""Tests for domain models."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from career_compass_core.models.career_path import CachedCareerPaths, CareerPath, CareerPathList
from career_compass_core.models.job import JobPosting, MatchResult
from career_compass_core.models.profile import PathRequest, UserProfile
from tests.mocks.mock_factories import (
    make_career_path,
    make_job_posting,
    make_path_request,
    make_user_profile,
)


@pytest.mark.unit
class TestUserProfile:
    """UserProfile validation."""

    def test_defaults(self) -> None:
        profile = UserProfile()
        assert profile.matching_tags == []
        assert profile.include_remote is True
        assert profile.work_environment_pref == "flexible"
        assert profile.has_salary_range is False

    def test_tags_normalized(self) -> None:
        """Tags are stripped, lower-cased and de-duplicated; empties dropped."""
        profile = make_user_profile(matching_tags=[" SQL ", "sql", "", "  ", "Excel"])
        assert profile.matching_tags == ["sql", "excel"]

    def test_salary_must_be_paired(self) -> None:
        with pytest.raises(ValidationError, match="must be set together"):
            make_user_profile(desired_salary_min=80000)

    def test_salary_must_be_ordered(self) -> None:
        with pytest.raises(ValidationError, match="cannot exceed"):
            make_user_profile(desired_salary_min=120000, desired_salary_max=80000)

    def test_salary_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            make_user_profile(desired_salary_min=0, desired_salary_max=1000)

    def test_has_salary_range(self) -> None:
        profile = make_user_profile(desired_salary_min=80000, desired_salary_max=80000)
        assert profile.has_salary_range is True

    def test_invalid_environment_rejected(self) -> None:
        with pytest.raises(ValidationError):
            make_user_profile(work_environment_pref="moon")

    def test_frozen(self) -> None:
        profile = make_user_profile()
        with pytest.raises(ValidationError):
            profile.include_remote = True  # type: ignore[misc]


@pytest.mark.unit
class TestProfileFromOnboarding:
    """Building a matching profile from onboarding answers."""

    def test_tags_merge_skills_tasks_interests(self) -> None:
        request = make_path_request(
            skills=["Salesforce", "SQL"],
            tasks=["Lead Qualification", "sql"],
            interests=["Music"],
        )
        profile = UserProfile.from_onboarding(request)
        assert profile.matching_tags == ["salesforce", "sql", "lead qualification", "music"]

    def test_desired_salary_becomes_range(self) -> None:
        profile = UserProfile.from_onboarding(make_path_request(), desired_salary=60000)
        assert profile.desired_salary_min == 48000
        assert profile.desired_salary_max == 72000
        assert profile.has_salary_range is True

    def test_preferences_carried_over(self) -> None:
        profile = UserProfile.from_onboarding(
            make_path_request(),
            locations=["Boston"],
            include_remote=False,
            work_environment_pref="hybrid",
        )
        assert profile.locations == ["Boston"]
        assert profile.include_remote is False
        assert profile.work_environment_pref == "hybrid"
        assert profile.has_salary_range is False


@pytest.mark.unit
class TestJobPosting:
    """JobPosting validation."""

    def test_minimal_record(self) -> None:
        job = JobPosting(job_id="j1", title="Analyst")
        assert job.location == ""
        assert job.tags == []
        assert job.posted_at is None
        assert job.source == "manual"

    def test_inverted_salary_rejected(self) -> None:
        with pytest.raises(ValidationError, match="salary_min"):
            make_job_posting(salary_min=150000, salary_max=100000)

    def test_negative_salary_rejected(self) -> None:
        with pytest.raises(ValidationError):
            make_job_posting(salary_min=-1, salary_max=100)

    def test_posted_at_parsed_from_iso(self) -> None:
        job = make_job_posting(posted_at="2025-06-10T08:00:00Z")
        assert job.posted_at == datetime(2025, 6, 10, 8, 0, tzinfo=UTC)

    @pytest.mark.parametrize("value", ["not a date", "", None, "yesterday-ish"])
    def test_bad_posted_at_becomes_none(self, value: object) -> None:
        """Unparseable timestamps do not fail the record."""
        assert make_job_posting(posted_at=value).posted_at is None

    def test_missing_title_rejected(self) -> None:
        with pytest.raises(ValidationError):
            JobPosting.model_validate({"job_id": "j1"})

    def test_frozen(self) -> None:
        job = make_job_posting()
        with pytest.raises(ValidationError):
            job.title = "Other"  # type: ignore[misc]


@pytest.mark.unit
class TestMatchResult:
    def test_score_bounds(self) -> None:
        job = make_job_posting()
        with pytest.raises(ValidationError):
            MatchResult(job=job, match_score=101, reasons=[])
        with pytest.raises(ValidationError):
            MatchResult(job=job, match_score=-1, reasons=[])


@pytest.mark.unit
class TestCareerPathModels:
    """Career path and cache envelope models."""

    def test_career_path_roundtrip_through_json(self) -> None:
        path = make_career_path()
        restored = CareerPath.model_validate(path.model_dump(mode="json"))
        assert restored == path

    def test_invalid_category_rejected(self) -> None:
        with pytest.raises(ValidationError):
            make_career_path(category="sideways")

    def test_career_path_list(self) -> None:
        wrapped = CareerPathList(career_paths=[make_career_path()])
        assert wrapped.career_paths[0].role == "Partnerships Manager (Music Tech)"

    def test_cached_envelope_defaults(self) -> None:
        envelope = CachedCareerPaths()
        assert envelope.career_paths == []
        assert envelope.cached_at is None

    def test_path_request_defaults(self) -> None:
        request = PathRequest(current_role="Nurse")
        assert request.skills == []
        assert request.tasks == []
        assert request.interests == []
