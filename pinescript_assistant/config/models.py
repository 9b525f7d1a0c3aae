"""Configuration models for the PineScript assistant using Pydantic."""
from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ProviderName(str, Enum):
    """Text-generation backends the assistant can dispatch to."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    MOCK = "mock"


DEFAULT_MODELS = {
    ProviderName.OPENAI: "gpt-4-turbo",
    ProviderName.ANTHROPIC: "claude-3-sonnet-20240229",
    ProviderName.MOCK: "mock",
}


class LlmConfig(BaseModel):
    """LLM provider and model configuration."""

    model_config = ConfigDict(extra="forbid")

    llm_provider: ProviderName = Field(
        default=ProviderName.MOCK,
        description="LLM provider: 'openai', 'anthropic', or 'mock'"
    )
    default_model: str = Field(
        default="",
        description="Model name for the chosen provider (empty = provider default)"
    )

    openai_api_key: str | None = None
    openai_api_base: str = "https://api.openai.com/v1"
    anthropic_api_key: str | None = None
    anthropic_api_base: str = "https://api.anthropic.com/v1"

    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for LLM"
    )
    max_tokens: int = Field(
        default=4000,
        ge=1,
        description="Maximum tokens to generate per response"
    )
    timeout_seconds: int = Field(
        default=60,
        ge=1,
        description="Deadline for a whole operation, retries included"
    )
    retry_backoff_seconds: float = Field(
        default=1.0,
        ge=0.0,
        description="Fixed delay before the single retry of a failed call"
    )


class TemplateConfig(BaseModel):
    """Code skeleton settings."""

    model_config = ConfigDict(extra="forbid")

    default_version: int = Field(
        default=5,
        ge=5,
        le=6,
        description="PineScript language version of generated skeletons"
    )


class AppConfig(BaseModel):
    """Root application configuration containing all sub-configs."""

    model_config = ConfigDict(extra="forbid")

    llm: LlmConfig = Field(default_factory=LlmConfig)
    templates: TemplateConfig = Field(default_factory=TemplateConfig)


class ProviderConfig(BaseModel):
    """Read-only settings handed to a provider client for one call."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    provider: ProviderName
    api_key: str = ""
    model: str
    timeout_ms: int = Field(default=60_000, gt=0)
    base_url: str | None = None
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=4000, ge=1)

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0
