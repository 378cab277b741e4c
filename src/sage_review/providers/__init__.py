# src/sage_review/providers/__init__.py
from .base import LLMProvider
from .anthropic import AnthropicProvider
from .openai import OpenAIProvider
from .vertex import VertexProvider
from .factory import ProviderName, create_provider, get_default_models, get_supported_providers

__all__ = [
    "LLMProvider",
    "AnthropicProvider",
    "OpenAIProvider",
    "VertexProvider",
    "ProviderName",
    "create_provider",
    "get_default_models",
    "get_supported_providers",
]
