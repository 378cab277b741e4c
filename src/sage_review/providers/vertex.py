# src/sage_review/providers/vertex.py
import logging
from collections.abc import Mapping
from typing import Any

import httpx

from .base import LLMProvider, compose_system_prompt
from .pricing import GOOGLE_PRICING, compute_cost, resolve_pricing
from sage_review.errors import ConfigurationError
from sage_review.models.review import ReviewOptions, ReviewResponse, Usage


logger = logging.getLogger(__name__)


class VertexProvider(LLMProvider):
    """Gemini models served through Vertex AI for a given project and region."""

    DEFAULT_MODEL = "gemini-1.5-pro"
    DEFAULT_LOCATION = "us-central1"
    API_URL = (
        "https://{location}-aiplatform.googleapis.com/v1/projects/{project_id}"
        "/locations/{location}/publishers/google/models/{model}:generateContent"
    )
    TEMPERATURE = 0.3
    TIMEOUT = 300.0

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        project_id: str = "",
        location: str = DEFAULT_LOCATION,
    ):
        if not project_id:
            raise ConfigurationError("Google provider requires a project id")
        if not location:
            raise ConfigurationError("Google provider requires a location")
        super().__init__(api_key, model)
        self.project_id = project_id
        self.location = location

    @property
    def endpoint(self) -> str:
        return self.API_URL.format(location=self.location, project_id=self.project_id, model=self.model)

    async def review(
        self,
        system_prompt: str,
        user_prompt: str,
        options: ReviewOptions | None = None,
    ) -> ReviewResponse:
        options = options or ReviewOptions()

        # Gemini gets one combined prompt, no separate system channel.
        full_prompt = f"{compose_system_prompt(system_prompt, options.guidelines)}\n\n{user_prompt}"
        payload = {
            "contents": [{"role": "user", "parts": [{"text": full_prompt}]}],
            "generationConfig": {
                "maxOutputTokens": options.max_tokens,
                "temperature": self.TEMPERATURE,
            },
        }

        data = await self._call_with_retry(lambda: self._generate(payload), options.retries)

        candidates = data.get("candidates") or []
        parts = candidates[0].get("content", {}).get("parts", []) if candidates else []
        text = "\n".join(part["text"] for part in parts if "text" in part and not part.get("thought"))
        logger.info(f"Gemini response length: {len(text)} chars")

        metadata = data.get("usageMetadata") or {}
        usage = Usage(
            input_tokens=metadata.get("promptTokenCount", 0),
            output_tokens=metadata.get("candidatesTokenCount", 0),
            total_tokens=metadata.get("totalTokenCount", 0),
        )

        return ReviewResponse(text=text, usage=usage, model=data.get("modelVersion") or self.model)

    async def _generate(self, payload: dict[str, Any]) -> dict[str, Any]:
        async with httpx.AsyncClient() as client:
            response = await client.post(
                self.endpoint,
                headers={"Authorization": f"Bearer {self.api_key}"},
                json=payload,
                timeout=self.TIMEOUT,
            )
            response.raise_for_status()
        return response.json()

    def calculate_cost(
        self,
        usage: Usage | Mapping[str, Any] | None,
        model_name: str | None = None,
    ) -> float:
        prices = resolve_pricing(model_name or self.model, GOOGLE_PRICING)
        return compute_cost(usage, prices)

    def get_name(self) -> str:
        return "Google Gemini"
