"""Job posting and match result models."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

SeniorityLevel = Literal["entry", "mid", "senior", "lead", "executive"]

_DATETIME_ADAPTER: TypeAdapter[datetime] = TypeAdapter(datetime)


class JobPosting(BaseModel):
    """A job listing as returned by a job search provider or the job store.

    Frozen: scoring reads postings but never modifies them.
    """

    model_config = ConfigDict(frozen=True)

    job_id: str = Field(description="Provider job identifier")
    title: str = Field(description="Job title")
    company: str = Field(default="", description="Hiring company name")
    location: str = Field(default="", description="Job location as advertised")
    remote: bool = Field(default=False, description="Fully remote position")
    hybrid: bool = Field(default=False, description="Hybrid position")
    description: str = Field(default="", description="Job description text")
    requirements: list[str] = Field(default_factory=list, description="Listed requirements")
    responsibilities: list[str] = Field(
        default_factory=list, description="Listed responsibilities"
    )
    salary_min: int | None = Field(default=None, ge=0, description="Minimum salary")
    salary_max: int | None = Field(default=None, ge=0, description="Maximum salary")
    salary_currency: str = Field(default="USD", description="Salary currency")
    posted_at: datetime | None = Field(default=None, description="When the job was posted")
    expires_at: datetime | None = Field(default=None, description="When the posting expires")
    source: Literal["google", "indeed", "linkedin", "manual"] = Field(
        default="manual", description="Where the posting came from"
    )
    apply_url: str = Field(default="", description="Application URL")
    tags: list[str] = Field(default_factory=list, description="Skill tags used for matching")
    job_type: Literal["full-time", "part-time", "contract", "internship"] = Field(
        default="full-time", description="Employment type"
    )
    seniority_level: SeniorityLevel | None = Field(
        default=None, description="Seniority of the role"
    )
    scraped_at: datetime | None = Field(default=None, description="When the posting was fetched")
    is_active: bool = Field(default=True, description="Whether the posting is still open")

    @field_validator("posted_at", mode="before")
    @classmethod
    def coerce_posted_at(cls, v: Any) -> datetime | None:  # noqa: ANN401
        """Unparseable timestamps become None instead of failing the record."""
        if v is None or v == "":
            return None
        try:
            return _DATETIME_ADAPTER.validate_python(v)
        except ValidationError:
            return None

    @model_validator(mode="after")
    def validate_salary_range(self) -> JobPosting:
        """Ensure salary_min <= salary_max when both are set."""
        if (
            self.salary_min is not None
            and self.salary_max is not None
            and self.salary_min > self.salary_max
        ):
            msg = f"salary_min ({self.salary_min}) > salary_max ({self.salary_max})"
            raise ValueError(msg)
        return self


class MatchResult(BaseModel):
    """Score and human-readable reasons for one job against one user."""

    model_config = ConfigDict(frozen=True)

    job: JobPosting = Field(description="The scored posting")
    match_score: int = Field(ge=0, le=100, description="Overall match score 0-100")
    reasons: list[str] = Field(
        description="Reasons in contribution order: skills, location, salary, recency, environment"
    )
