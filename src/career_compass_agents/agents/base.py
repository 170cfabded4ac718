"""Shared Anthropic client setup, retrying structured calls and usage logging."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any, TypeVar

import instructor
import structlog
from anthropic import AsyncAnthropic
from pydantic import BaseModel
from tenacity import retry, stop_after_attempt, wait_exponential

from career_compass_core.constants import TOKEN_PRICES
from career_compass_core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from career_compass_core.config.settings import Settings

T = TypeVar("T", bound=BaseModel)

logger = structlog.get_logger()


def extract_token_usage(result: object) -> tuple[int, int]:
    """Read (input, output) token counts from an instructor response, if attached."""
    raw = getattr(result, "_raw_response", None)
    usage = getattr(raw, "usage", None)
    if usage is None:
        return 0, 0
    return int(getattr(usage, "input_tokens", 0) or 0), int(
        getattr(usage, "output_tokens", 0) or 0
    )


def estimate_cost_usd(model: str, input_tokens: int, output_tokens: int) -> float:
    """Estimate call cost from the static price table; unknown models cost 0."""
    prices = TOKEN_PRICES.get(model)
    if not prices:
        return 0.0
    return (
        input_tokens * prices["input"] / 1_000_000
        + output_tokens * prices["output"] / 1_000_000
    )


class AnthropicAgent:
    """Base class for agents that ask Claude for structured output."""

    agent_name: str = "base"

    def __init__(self, settings: Settings, client: Any | None = None) -> None:  # noqa: ANN401
        """Initialize with settings; ``client`` overrides the instructor client."""
        self.settings = settings
        if client is None:
            if settings.anthropic_api_key is None:
                msg = f"CC_ANTHROPIC_API_KEY is required by the {self.agent_name} agent"
                raise ConfigurationError(msg)
            client = instructor.from_anthropic(
                AsyncAnthropic(api_key=settings.anthropic_api_key.get_secret_value())
            )
        self._instructor = client

    async def _call_llm(
        self,
        *,
        model: str,
        system: str,
        messages: list[dict[str, str]],
        response_model: type[T],
        prompt_version: str,
        max_tokens: int = 4096,
    ) -> T:
        """Call the LLM with instructor, retrying with exponential backoff.

        The last failure is re-raised unchanged; callers wrap it in their own
        domain error.
        """

        @retry(
            stop=stop_after_attempt(self.settings.llm_max_retries),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            reraise=True,
        )
        async def _do_call() -> T:
            response: T = await self._instructor.messages.create(
                model=model,
                max_tokens=max_tokens,
                system=system,
                messages=messages,
                response_model=response_model,
            )
            return response

        start = time.monotonic()
        result = await _do_call()
        elapsed = time.monotonic() - start

        input_tokens, output_tokens = extract_token_usage(result)
        logger.info(
            "llm_call_complete",
            agent=self.agent_name,
            model=model,
            prompt_version=prompt_version,
            duration=round(elapsed, 2),
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            estimated_cost_usd=round(estimate_cost_usd(model, input_tokens, output_tokens), 4),
        )
        return result

    def _log_failure(self, event: str, model: str, error: Exception) -> None:
        logger.error(
            event,
            agent=self.agent_name,
            model=model,
            error_type=type(error).__name__,
            error=str(error),
        )
