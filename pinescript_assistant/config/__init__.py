"""Configuration management package for the PineScript assistant.

Usage:
    from pinescript_assistant.config import ConfigStore, load_config

    store = ConfigStore(load_config())
    provider_config = store.get_provider_config()
"""

from pinescript_assistant.config.models import (
    DEFAULT_MODELS,
    AppConfig,
    LlmConfig,
    ProviderConfig,
    ProviderName,
    TemplateConfig,
)
from pinescript_assistant.config.service import (
    ConfigStore,
    get_config_path,
    load_config,
    reload_config,
    save_config,
)

__all__ = [
    # Models
    "AppConfig",
    "LlmConfig",
    "TemplateConfig",
    "ProviderConfig",
    "ProviderName",
    "DEFAULT_MODELS",
    # Service
    "ConfigStore",
    "get_config_path",
    "load_config",
    "save_config",
    "reload_config",
]
