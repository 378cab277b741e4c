# src/sage_review/providers/openai.py
import logging
from collections.abc import Mapping
from typing import Any

from openai import AsyncOpenAI

from .base import LLMProvider, compose_system_prompt
from .pricing import OPENAI_PRICING, compute_cost, resolve_pricing
from sage_review.models.review import ReviewOptions, ReviewResponse, Usage


logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    DEFAULT_MODEL = "gpt-4-turbo-preview"
    # Low temperature keeps the JSON output stable between runs.
    TEMPERATURE = 0.3
    TIMEOUT = 300.0

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL):
        super().__init__(api_key, model)
        self.client = AsyncOpenAI(api_key=api_key, timeout=self.TIMEOUT, max_retries=0)

    async def review(
        self,
        system_prompt: str,
        user_prompt: str,
        options: ReviewOptions | None = None,
    ) -> ReviewResponse:
        options = options or ReviewOptions()

        messages = [
            {"role": "system", "content": compose_system_prompt(system_prompt, options.guidelines)},
            {"role": "user", "content": user_prompt},
        ]

        response = await self._call_with_retry(
            lambda: self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=options.max_tokens,
                temperature=self.TEMPERATURE,
            ),
            options.retries,
        )

        text = response.choices[0].message.content or ""
        logger.info(f"OpenAI response length: {len(text)} chars")

        usage = Usage()
        if response.usage is not None:
            usage = Usage(
                input_tokens=response.usage.prompt_tokens or 0,
                output_tokens=response.usage.completion_tokens or 0,
                total_tokens=response.usage.total_tokens,
            )

        return ReviewResponse(text=text, usage=usage, model=response.model or self.model)

    def calculate_cost(
        self,
        usage: Usage | Mapping[str, Any] | None,
        model_name: str | None = None,
    ) -> float:
        prices = resolve_pricing(model_name or self.model, OPENAI_PRICING)
        return compute_cost(usage, prices)

    def get_name(self) -> str:
        return "OpenAI"
