"""LLM Infrastructure - provider abstraction with retry."""

from .types import ProviderClient
from .retry import AsyncRetryPolicy
from .providers_http import HttpProvider
from .providers_openai import OpenAIProvider
from .providers_anthropic import AnthropicProvider
from .providers_mock import MockProvider
from .factory import create_provider

__all__ = [
    "ProviderClient",
    "AsyncRetryPolicy",
    "HttpProvider",
    "OpenAIProvider",
    "AnthropicProvider",
    "MockProvider",
    "create_provider",
]
