# src/sage_review/providers/base.py
import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeVar

from sage_review.errors import UpstreamProviderError, redact_secrets
from sage_review.models.review import ReviewOptions, ReviewResponse, Usage


logger = logging.getLogger(__name__)

T = TypeVar("T")

GUIDELINES_HEADING = "# Project Guidelines"


def compose_system_prompt(system_prompt: str, guidelines: str) -> str:
    """Append project guidelines under a fixed heading when there are any."""
    if not guidelines:
        return system_prompt
    return f"{system_prompt}\n\n{GUIDELINES_HEADING}\n\n{guidelines}"


class LLMProvider(ABC):
    """Uniform review contract over one LLM vendor.

    Concrete variants live next to this module; the factory picks one by name.
    """

    def __init__(self, api_key: str, model: str):
        self.api_key = api_key
        self.model = model

    @abstractmethod
    async def review(
        self,
        system_prompt: str,
        user_prompt: str,
        options: ReviewOptions | None = None,
    ) -> ReviewResponse:
        """Send the prompts to the vendor and return normalized text and usage."""
        raise NotImplementedError("review() must be implemented by provider")

    @abstractmethod
    def calculate_cost(
        self,
        usage: Usage | Mapping[str, Any] | None,
        model_name: str | None = None,
    ) -> float:
        """Cost in USD for ``usage``, priced for ``model_name`` or the configured model."""
        raise NotImplementedError("calculate_cost() must be implemented by provider")

    @abstractmethod
    def get_name(self) -> str:
        raise NotImplementedError("get_name() must be implemented by provider")

    def supports_prompt_caching(self) -> bool:
        return False

    def supports_extended_thinking(self) -> bool:
        return False

    async def _call_with_retry(self, call: Callable[[], Awaitable[T]], retries: int) -> T:
        """Await ``call`` up to ``retries`` times, sleeping 2**attempt seconds in between."""
        attempts = max(retries, 1)
        last_error: Exception | None = None

        for attempt in range(1, attempts + 1):
            try:
                return await call()
            except Exception as e:
                last_error = e
                if attempt == attempts:
                    break
                delay = 2**attempt
                logger.warning(
                    f"{self.get_name()} API error (attempt {attempt}/{attempts}): {redact_secrets(str(e))}. "
                    f"Retrying in {delay}s..."
                )
                await asyncio.sleep(delay)

        raise UpstreamProviderError(
            f"{self.get_name()} API failed after {attempts} attempts: {last_error}"
        ) from last_error
