"""Custom exception hierarchy for career-compass."""

from __future__ import annotations


class CareerCompassError(Exception):
    """Base exception for all career-compass errors."""


class InvalidProfileError(CareerCompassError):
    """Raised when a user profile is missing or unusable for matching."""


class InvalidRequestError(CareerCompassError):
    """Raised when a career path request lacks required fields."""


class ConfigurationError(CareerCompassError):
    """Raised when a required setting or credential is missing."""


class PathGenerationError(CareerCompassError):
    """Raised when the LLM fails to produce career paths."""


class JobSearchError(CareerCompassError):
    """Raised when the job search API returns an error."""


class SuggestionError(CareerCompassError):
    """Raised when the LLM fails to suggest tasks or skills for a role."""


class CacheUnavailableError(CareerCompassError):
    """Raised when the configured cache backend cannot be opened or used."""
