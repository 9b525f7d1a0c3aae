"""Configuration service for loading and saving AppConfig."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

from pydantic import ValidationError

from pinescript_assistant.config.models import (
    DEFAULT_MODELS,
    AppConfig,
    LlmConfig,
    ProviderConfig,
    ProviderName,
    TemplateConfig,
)
from pinescript_assistant.errors import ConfigError

# Global cache for config (loaded once per process)
_APP_CONFIG: AppConfig | None = None

logger = logging.getLogger(__name__)


def get_config_path() -> Path:
    """Get path to the configuration file.

    Returns:
        Path to ~/.pinescript_assistant/config.json

    Creates the directory if it doesn't exist.
    """
    config_dir = Path.home() / ".pinescript_assistant"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir / "config.json"


def _load_from_env() -> AppConfig:
    """Load configuration from environment variables.

    This is used when config.json doesn't exist yet.
    Environment variables override the default values.

    Returns:
        AppConfig populated from environment variables
    """
    llm_config = LlmConfig(
        llm_provider=os.getenv("LLM_PROVIDER", "mock").lower(),
        default_model=os.getenv("LLM_MODEL", ""),
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        openai_api_base=os.getenv("OPENAI_API_BASE", "https://api.openai.com/v1"),
        anthropic_api_key=os.getenv("ANTHROPIC_API_KEY"),
        anthropic_api_base=os.getenv("ANTHROPIC_API_BASE", "https://api.anthropic.com/v1"),
        temperature=float(os.getenv("LLM_TEMPERATURE", "0.7")),
        max_tokens=int(os.getenv("LLM_MAX_TOKENS", "4000")),
        timeout_seconds=int(os.getenv("LLM_TIMEOUT_SECONDS", "60")),
        retry_backoff_seconds=float(os.getenv("LLM_RETRY_BACKOFF_SECONDS", "1.0")),
    )

    template_config = TemplateConfig(
        default_version=int(os.getenv("PINESCRIPT_VERSION", "5")),
    )

    return AppConfig(llm=llm_config, templates=template_config)


def load_config() -> AppConfig:
    """Load application configuration.

    Loading priority:
    1. If already cached in memory, return cached instance
    2. If config.json exists, load from file
    3. Otherwise, create from environment variables and save to file

    Returns:
        AppConfig instance

    Raises:
        ConfigError: If the config file or environment values are invalid
    """
    global _APP_CONFIG

    if _APP_CONFIG is not None:
        return _APP_CONFIG

    config_path = get_config_path()

    if config_path.exists():
        try:
            logger.info("Loading configuration from %s", config_path)
            with open(config_path, encoding="utf-8") as f:
                data: Dict[str, Any] = json.load(f)
            _APP_CONFIG = AppConfig(**data)
            logger.info("Configuration loaded successfully")
            return _APP_CONFIG
        except (json.JSONDecodeError, ValueError) as exc:
            # pydantic.ValidationError is a ValueError subclass
            logger.error("Failed to parse config file %s: %s", config_path, exc)
            raise ConfigError(
                f"Invalid configuration file: {exc}",
                operation="load_config",
                context={"path": str(config_path)},
            ) from exc

    logger.info("No config file found, creating from environment variables")
    try:
        _APP_CONFIG = _load_from_env()
    except ValueError as exc:
        raise ConfigError(
            f"Invalid configuration in environment: {exc}",
            operation="load_config",
        ) from exc

    save_config(_APP_CONFIG)

    return _APP_CONFIG


def save_config(app_config: AppConfig) -> None:
    """Save configuration to file.

    Args:
        app_config: AppConfig instance to save

    Raises:
        IOError: If file cannot be written
    """
    global _APP_CONFIG

    config_path = get_config_path()

    data = app_config.model_dump(mode="json")

    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

    _APP_CONFIG = app_config

    logger.info("Configuration saved to %s", config_path)


def reload_config() -> AppConfig:
    """Reload configuration from file, clearing the cache.

    Returns:
        AppConfig instance loaded from file

    Raises:
        ConfigError: If config file doesn't exist or is invalid
    """
    global _APP_CONFIG

    config_path = get_config_path()

    if not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            operation="reload_config",
        )

    _APP_CONFIG = None

    return load_config()


class ConfigStore:
    """Read-only view over an AppConfig handed explicitly to the orchestrator."""

    def __init__(self, app_config: AppConfig | None = None):
        self.app_config = app_config or AppConfig()

    @classmethod
    def from_disk(cls) -> "ConfigStore":
        return cls(load_config())

    @property
    def retry_backoff_seconds(self) -> float:
        return self.app_config.llm.retry_backoff_seconds

    @property
    def template_version(self) -> int:
        return self.app_config.templates.default_version

    def get_provider_config(self) -> ProviderConfig:
        """Derive the provider settings for a call.

        Raises:
            ConfigError: If a real vendor is selected without an API key
        """
        llm = self.app_config.llm
        provider = llm.llm_provider

        if provider is ProviderName.OPENAI:
            api_key, base_url = llm.openai_api_key, llm.openai_api_base
        elif provider is ProviderName.ANTHROPIC:
            api_key, base_url = llm.anthropic_api_key, llm.anthropic_api_base
        else:
            api_key, base_url = "", None

        if provider is not ProviderName.MOCK and not api_key:
            raise ConfigError(
                f"API key for provider '{provider.value}' is not configured",
                operation="get_provider_config",
                provider=provider.value,
            )

        try:
            return ProviderConfig(
                provider=provider,
                api_key=api_key or "",
                model=llm.default_model or DEFAULT_MODELS[provider],
                timeout_ms=llm.timeout_seconds * 1000,
                base_url=base_url,
                temperature=llm.temperature,
                max_tokens=llm.max_tokens,
            )
        except ValidationError as exc:
            raise ConfigError(
                f"Invalid provider configuration: {exc}",
                operation="get_provider_config",
                provider=provider.value,
            ) from exc
