"""Pytest configuration shared across the suite."""

from __future__ import annotations

from typing import List, Union

import pytest

from pinescript_assistant.config.models import ProviderConfig, ProviderName

SAMPLE_SCRIPT = """//@version=5
strategy("Sample", overlay=true)
fast = ta.sma(close, 9)
slow = ta.sma(close, 21)
if ta.crossover(fast, slow)
    strategy.entry("Long", strategy.long)
"""


class ScriptedProvider:
    """Provider replaying a fixed sequence of answers or errors."""

    name = "scripted"

    def __init__(self, outcomes: List[Union[str, Exception]]):
        self.outcomes = list(outcomes)
        self.prompts: List[str] = []

    @property
    def call_count(self) -> int:
        return len(self.prompts)

    async def send(self, prompt: str, config: ProviderConfig) -> str:
        self.prompts.append(prompt)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def sample_script() -> str:
    return SAMPLE_SCRIPT


@pytest.fixture
def mock_provider_config() -> ProviderConfig:
    return ProviderConfig(provider=ProviderName.MOCK, model="mock", timeout_ms=5_000)


@pytest.fixture
def openai_provider_config() -> ProviderConfig:
    return ProviderConfig(
        provider=ProviderName.OPENAI,
        api_key="sk-test",
        model="gpt-4-turbo",
        timeout_ms=5_000,
        base_url="https://api.openai.test/v1",
    )


@pytest.fixture
def anthropic_provider_config() -> ProviderConfig:
    return ProviderConfig(
        provider=ProviderName.ANTHROPIC,
        api_key="ak-test",
        model="claude-3-sonnet-20240229",
        timeout_ms=5_000,
        base_url="https://api.anthropic.test/v1",
    )


@pytest.fixture
def temp_config_dir(monkeypatch, tmp_path):
    """Point the config service at a temporary directory with an empty cache."""
    import pinescript_assistant.config.service as config_service

    temp_config_path = tmp_path / "config.json"
    monkeypatch.setattr(config_service, "get_config_path", lambda: temp_config_path)
    config_service._APP_CONFIG = None

    yield tmp_path

    config_service._APP_CONFIG = None


@pytest.fixture
def scripted_provider():
    """Factory for providers replaying the given answers/errors in order."""
    return ScriptedProvider
