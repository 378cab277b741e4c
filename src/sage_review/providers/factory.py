# src/sage_review/providers/factory.py
from collections.abc import Mapping
from enum import Enum
from typing import Any

from .anthropic import AnthropicProvider
from .base import LLMProvider
from .openai import OpenAIProvider
from .vertex import VertexProvider
from sage_review.errors import MissingCredentialError, MissingProjectIdError, UnknownProviderError


class ProviderName(str, Enum):
    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    GOOGLE = "google"


_ALIASES = {
    "anthropic": ProviderName.ANTHROPIC,
    "claude": ProviderName.ANTHROPIC,
    "openai": ProviderName.OPENAI,
    "gpt": ProviderName.OPENAI,
    "google": ProviderName.GOOGLE,
    "gemini": ProviderName.GOOGLE,
}

DEFAULT_MODELS = {
    ProviderName.ANTHROPIC: AnthropicProvider.DEFAULT_MODEL,
    ProviderName.OPENAI: OpenAIProvider.DEFAULT_MODEL,
    ProviderName.GOOGLE: VertexProvider.DEFAULT_MODEL,
}


def resolve_provider_name(provider_name: str | None) -> ProviderName | None:
    """Map a canonical name or alias, in any case, to its provider."""
    if not provider_name:
        return None
    return _ALIASES.get(provider_name.strip().lower())


def get_supported_providers() -> list[str]:
    return [provider.value for provider in ProviderName]


def get_default_models() -> dict[str, str]:
    return {provider.value: model for provider, model in DEFAULT_MODELS.items()}


def create_provider(
    provider_name: str,
    api_key: str | None,
    model: str | None = None,
    options: Mapping[str, Any] | None = None,
) -> LLMProvider:
    """Build the adapter for ``provider_name``.

    ``options`` carries vendor-specific settings; the Google family needs
    ``project_id`` and optionally ``location``.
    """
    if not api_key:
        raise MissingCredentialError(f"API key is required for provider: {provider_name}")

    options = options or {}
    provider = resolve_provider_name(provider_name)
    model = model or (DEFAULT_MODELS[provider] if provider else None)

    if provider is ProviderName.ANTHROPIC:
        return AnthropicProvider(api_key, model)

    if provider is ProviderName.OPENAI:
        return OpenAIProvider(api_key, model)

    if provider is ProviderName.GOOGLE:
        if not options.get("project_id"):
            raise MissingProjectIdError("Google provider requires projectId option")
        return VertexProvider(
            api_key,
            model,
            project_id=options["project_id"],
            location=options.get("location") or VertexProvider.DEFAULT_LOCATION,
        )

    raise UnknownProviderError(
        f"Unknown provider: {provider_name}. Supported: {', '.join(get_supported_providers())}"
    )
