"""Selection of a provider client from configuration."""

import logging
from typing import Callable, Dict

from pinescript_assistant.config.models import ProviderConfig, ProviderName
from pinescript_assistant.errors import ConfigError
from pinescript_assistant.infra.llm_infra.providers_anthropic import AnthropicProvider
from pinescript_assistant.infra.llm_infra.providers_mock import MockProvider
from pinescript_assistant.infra.llm_infra.providers_openai import OpenAIProvider
from pinescript_assistant.infra.llm_infra.types import ProviderClient

logger = logging.getLogger(__name__)

PROVIDERS: Dict[ProviderName, Callable[[], ProviderClient]] = {
    ProviderName.OPENAI: OpenAIProvider,
    ProviderName.ANTHROPIC: AnthropicProvider,
    ProviderName.MOCK: MockProvider,
}


def create_provider(config: ProviderConfig) -> ProviderClient:
    """Build the provider client named by ``config.provider``.

    Raises:
        ConfigError: If the provider is unknown or a vendor lacks an API key.
    """
    factory = PROVIDERS.get(config.provider)
    if factory is None:
        raise ConfigError(
            f"Unknown LLM provider: {config.provider}",
            operation="create_provider",
        )
    if config.provider is not ProviderName.MOCK and not config.api_key:
        raise ConfigError(
            f"API key for provider '{config.provider.value}' is not configured",
            operation="create_provider",
            provider=config.provider.value,
        )

    logger.info("Using %s provider (model=%s)", config.provider.value, config.model)
    return factory()
