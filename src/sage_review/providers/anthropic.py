# src/sage_review/providers/anthropic.py
import logging
from collections.abc import Mapping
from typing import Any

from anthropic import AsyncAnthropic

from .base import GUIDELINES_HEADING, LLMProvider
from .pricing import ANTHROPIC_PRICING, compute_cost, resolve_pricing
from sage_review.models.review import ReviewOptions, ReviewResponse, Usage


logger = logging.getLogger(__name__)

NO_GUIDELINES_TEXT = "# No Project-Specific Guidelines"


class AnthropicProvider(LLMProvider):
    DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
    TIMEOUT = 300.0

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL):
        super().__init__(api_key, model)
        # retries are counted by _call_with_retry alone
        self.client = AsyncAnthropic(api_key=api_key, timeout=self.TIMEOUT, max_retries=0)

    async def review(
        self,
        system_prompt: str,
        user_prompt: str,
        options: ReviewOptions | None = None,
    ) -> ReviewResponse:
        options = options or ReviewOptions()

        # Instructions and guidelines are cached independently; the diff is not.
        system = [
            {
                "type": "text",
                "text": system_prompt,
                "cache_control": {"type": "ephemeral"},
            },
            {
                "type": "text",
                "text": f"{GUIDELINES_HEADING}\n\n{options.guidelines}" if options.guidelines else NO_GUIDELINES_TEXT,
                "cache_control": {"type": "ephemeral"},
            },
        ]
        request: dict[str, Any] = {
            "model": self.model,
            "max_tokens": options.max_tokens,
            "system": system,
            "messages": [{"role": "user", "content": user_prompt}],
        }
        if options.thinking_budget:
            request["thinking"] = {"type": "enabled", "budget_tokens": options.thinking_budget}

        response = await self._call_with_retry(
            lambda: self.client.messages.create(**request),
            options.retries,
        )

        text = "\n".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        logger.info(f"Anthropic response length: {len(text)} chars")

        return ReviewResponse(
            text=text,
            usage=self._normalize_usage(response.usage),
            model=response.model or self.model,
        )

    @staticmethod
    def _normalize_usage(raw) -> Usage:
        if raw is None:
            return Usage()
        return Usage(
            input_tokens=getattr(raw, "input_tokens", 0) or 0,
            output_tokens=getattr(raw, "output_tokens", 0) or 0,
            cache_creation_input_tokens=getattr(raw, "cache_creation_input_tokens", None),
            cache_read_input_tokens=getattr(raw, "cache_read_input_tokens", None),
        )

    def calculate_cost(
        self,
        usage: Usage | Mapping[str, Any] | None,
        model_name: str | None = None,
    ) -> float:
        prices = resolve_pricing(model_name or self.model, ANTHROPIC_PRICING)
        return compute_cost(usage, prices)

    def get_name(self) -> str:
        return "Anthropic Claude"

    def supports_prompt_caching(self) -> bool:
        return True

    def supports_extended_thinking(self) -> bool:
        return True
