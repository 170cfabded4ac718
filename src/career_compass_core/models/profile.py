"""User profile and career path request models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from career_compass_core.constants import DESIRED_SALARY_HIGH_FACTOR, DESIRED_SALARY_LOW_FACTOR

WorkEnvironment = Literal["remote", "hybrid", "office", "flexible"]


def _normalize_tags(tags: list[str]) -> list[str]:
    """Strip, lower-case, drop empties and duplicates (first occurrence wins)."""
    seen: set[str] = set()
    result: list[str] = []
    for tag in tags:
        norm = tag.strip().lower()
        if norm and norm not in seen:
            seen.add(norm)
            result.append(norm)
    return result


class UserProfile(BaseModel):
    """Matching-relevant view of a user built during onboarding.

    Frozen: a profile never changes while a match request is in flight.
    """

    model_config = ConfigDict(frozen=True)

    matching_tags: list[str] = Field(
        default_factory=list, description="Skills, tasks and interests used for matching"
    )
    locations: list[str] = Field(default_factory=list, description="Preferred locations")
    include_remote: bool = Field(default=True, description="Whether remote jobs count as a match")
    desired_salary_min: int | None = Field(
        default=None, gt=0, description="Lower bound of the desired salary"
    )
    desired_salary_max: int | None = Field(
        default=None, gt=0, description="Upper bound of the desired salary"
    )
    work_environment_pref: WorkEnvironment = Field(
        default="flexible", description="Preferred work environment"
    )

    @field_validator("matching_tags")
    @classmethod
    def normalize_matching_tags(cls, v: list[str]) -> list[str]:
        return _normalize_tags(v)

    @model_validator(mode="after")
    def validate_salary_range(self) -> UserProfile:
        """Salary bounds come as a pair and must be ordered."""
        low, high = self.desired_salary_min, self.desired_salary_max
        if (low is None) != (high is None):
            msg = "desired_salary_min and desired_salary_max must be set together"
            raise ValueError(msg)
        if low is not None and high is not None and low > high:
            msg = f"desired_salary_min ({low}) cannot exceed desired_salary_max ({high})"
            raise ValueError(msg)
        return self

    @property
    def has_salary_range(self) -> bool:
        return self.desired_salary_min is not None and self.desired_salary_max is not None

    @classmethod
    def from_onboarding(
        cls,
        request: PathRequest,
        *,
        locations: list[str] | None = None,
        include_remote: bool = True,
        desired_salary: int | None = None,
        work_environment_pref: WorkEnvironment = "flexible",
    ) -> UserProfile:
        """Build a matching profile from onboarding answers.

        Matching tags are the selected skills, then tasks, then interests
        (normalized and de-duplicated). A single ``desired_salary`` becomes the
        range 80% to 120% of that figure.
        """
        low = high = None
        if desired_salary is not None:
            low = round(desired_salary * DESIRED_SALARY_LOW_FACTOR)
            high = round(desired_salary * DESIRED_SALARY_HIGH_FACTOR)
        return cls(
            matching_tags=[*request.skills, *request.tasks, *request.interests],
            locations=list(locations or []),
            include_remote=include_remote,
            desired_salary_min=low,
            desired_salary_max=high,
            work_environment_pref=work_environment_pref,
        )


class PathRequest(BaseModel):
    """Onboarding answers that drive career path generation."""

    current_role: str = Field(description="The user's current job title")
    skills: list[str] = Field(default_factory=list, description="Selected skills")
    tasks: list[str] = Field(default_factory=list, description="Selected tasks")
    interests: list[str] = Field(default_factory=list, description="Personal interests")
