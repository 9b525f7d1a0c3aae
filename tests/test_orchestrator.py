"""Tests for LLMOrchestrator retry, deadline and result handling."""

import asyncio
import json
import logging

import httpx
import pytest

from pinescript_assistant.core.models import StrategyAnalysis
from pinescript_assistant.core.orchestrator import LLMOrchestrator, is_retryable
from pinescript_assistant.errors import (
    OperationTimeoutError,
    ParseError,
    ProviderError,
    ProviderErrorKind,
)
from pinescript_assistant.infra.llm_infra import MockProvider, OpenAIProvider

ANALYSIS_JSON = json.dumps(
    {
        "parameters": {"identified": ["fast", "slow"], "suggestions": []},
        "logic": {"strengths": ["Simple"], "weaknesses": [], "improvements": []},
        "risk": {"assessment": "Low", "recommendations": []},
        "performance": {"bottlenecks": [], "optimizations": []},
    }
)


def _network_error():
    return ProviderError("connection reset", kind=ProviderErrorKind.NETWORK, provider="scripted")


class SlowProvider:
    name = "slow"

    def __init__(self, delay: float):
        self.delay = delay
        self.cancelled = False

    async def send(self, prompt, config):
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return ANALYSIS_JSON


class TestIsRetryable:
    @pytest.mark.parametrize(
        "kind, expected",
        [
            (ProviderErrorKind.NETWORK, True),
            (ProviderErrorKind.TIMEOUT, True),
            (ProviderErrorKind.AUTH, False),
            (ProviderErrorKind.RATE_LIMIT, False),
        ],
    )
    def test_provider_error_kinds(self, kind, expected):
        assert is_retryable(ProviderError("x", kind=kind)) is expected

    def test_parse_error_is_retryable(self):
        assert is_retryable(ParseError("bad", raw="")) is True

    def test_other_errors_are_not(self):
        assert is_retryable(ValueError("x")) is False


class TestRetry:
    """Test suite for the single-retry behaviour."""

    def test_transient_failure_then_success(self, mock_provider_config, scripted_provider, sample_script):
        provider = scripted_provider([_network_error(), ANALYSIS_JSON])
        orchestrator = LLMOrchestrator(mock_provider_config, provider=provider, retry_backoff=0)

        result = asyncio.run(orchestrator.analyze_strategy(sample_script))

        assert isinstance(result, StrategyAnalysis)
        assert result.parameters.identified == ["fast", "slow"]
        assert provider.call_count == 2
        assert provider.prompts[0] == provider.prompts[1]

    def test_second_failure_surfaces(self, mock_provider_config, scripted_provider, sample_script):
        second = ProviderError("timed out", kind=ProviderErrorKind.TIMEOUT)
        provider = scripted_provider([_network_error(), second, ANALYSIS_JSON])
        orchestrator = LLMOrchestrator(mock_provider_config, provider=provider, retry_backoff=0)

        with pytest.raises(ProviderError) as exc_info:
            asyncio.run(orchestrator.analyze_strategy(sample_script))

        assert exc_info.value is second
        assert provider.call_count == 2

    @pytest.mark.parametrize("kind", [ProviderErrorKind.AUTH, ProviderErrorKind.RATE_LIMIT])
    def test_non_transient_errors_are_not_retried(
        self, mock_provider_config, scripted_provider, sample_script, kind
    ):
        provider = scripted_provider([ProviderError("denied", kind=kind, status_code=401), ANALYSIS_JSON])
        orchestrator = LLMOrchestrator(mock_provider_config, provider=provider, retry_backoff=0)

        with pytest.raises(ProviderError) as exc_info:
            asyncio.run(orchestrator.analyze_strategy(sample_script))

        assert exc_info.value.kind is kind
        assert provider.call_count == 1

    def test_unparseable_answer_is_retried(self, mock_provider_config, scripted_provider, sample_script):
        provider = scripted_provider(["I am unable to help with that.", ANALYSIS_JSON])
        orchestrator = LLMOrchestrator(mock_provider_config, provider=provider, retry_backoff=0)

        result = asyncio.run(orchestrator.analyze_strategy(sample_script))

        assert result.risk.assessment == "Low"
        assert provider.call_count == 2

    def test_object_without_sections_is_retried(self, mock_provider_config, scripted_provider, sample_script):
        provider = scripted_provider(['{"error": "quota exceeded"}', ANALYSIS_JSON])
        orchestrator = LLMOrchestrator(mock_provider_config, provider=provider, retry_backoff=0)

        result = asyncio.run(orchestrator.analyze_strategy(sample_script))

        assert result.parameters.identified == ["fast", "slow"]
        assert provider.call_count == 2

    def test_parse_failure_twice_raises_parse_error(
        self, mock_provider_config, scripted_provider, sample_script
    ):
        provider = scripted_provider(["no json here", "still none"])
        orchestrator = LLMOrchestrator(mock_provider_config, provider=provider, retry_backoff=0)

        with pytest.raises(ParseError) as exc_info:
            asyncio.run(orchestrator.analyze_strategy(sample_script))

        assert exc_info.value.raw == "still none"
        assert exc_info.value.operation == "analyze_strategy"


class TestDeadline:
    def test_slow_provider_times_out(self, mock_provider_config, sample_script):
        provider = SlowProvider(delay=5)
        orchestrator = LLMOrchestrator(
            mock_provider_config, provider=provider, retry_backoff=0, deadline_seconds=0.05
        )

        with pytest.raises(OperationTimeoutError) as exc_info:
            asyncio.run(orchestrator.analyze_strategy(sample_script))

        assert exc_info.value.deadline_seconds == 0.05
        assert exc_info.value.operation == "analyze_strategy"
        assert isinstance(exc_info.value, TimeoutError)
        assert provider.cancelled

    def test_http_timeout_is_retried_within_default_deadline(self, openai_provider_config, sample_script):
        config = openai_provider_config.model_copy(update={"timeout_ms": 300})
        calls = []

        async def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) == 1:
                # the request stalls for the whole per-request timeout
                await asyncio.sleep(config.timeout_seconds)
                raise httpx.ReadTimeout("read timed out", request=request)
            return httpx.Response(200, json={"choices": [{"message": {"content": ANALYSIS_JSON}}]})

        provider = OpenAIProvider(transport=httpx.MockTransport(handler))
        orchestrator = LLMOrchestrator(config, provider=provider, retry_backoff=0)

        result = asyncio.run(orchestrator.analyze_strategy(sample_script))

        assert orchestrator.deadline_seconds == pytest.approx(0.6)
        assert result.parameters.identified == ["fast", "slow"]
        assert len(calls) == 2

    def test_default_deadline_covers_retry(self, mock_provider_config):
        orchestrator = LLMOrchestrator(mock_provider_config, provider=MockProvider(), retry_backoff=1.0)
        # two 5s attempts plus the 1s backoff
        assert orchestrator.deadline_seconds == 11.0

    def test_explicit_deadline_wins(self, mock_provider_config):
        orchestrator = LLMOrchestrator(mock_provider_config, provider=MockProvider(), deadline_seconds=2.5)
        assert orchestrator.deadline_seconds == 2.5


class TestOperations:
    """End-to-end operations against the offline provider."""

    def test_analyze_strategy(self, mock_provider_config, sample_script):
        provider = MockProvider()
        orchestrator = LLMOrchestrator(mock_provider_config, provider=provider)

        result = asyncio.run(orchestrator.analyze_strategy(sample_script))

        assert result.parameters.identified == ["length", "source", "multiplier"]
        assert sample_script in provider.prompts[0]

    def test_analyze_script_mentioning_backtest(self, mock_provider_config):
        script = '//@version=5\nstrategy("Backtest Winner")\n// generate enhanced versions later'
        orchestrator = LLMOrchestrator(mock_provider_config, provider=MockProvider())

        result = asyncio.run(orchestrator.analyze_strategy(script))

        assert result.parameters.identified == ["length", "source", "multiplier"]

    def test_analyze_backtest(self, mock_provider_config, sample_script):
        orchestrator = LLMOrchestrator(mock_provider_config, provider=MockProvider())

        result = asyncio.run(orchestrator.analyze_backtest("Net profit 12%", sample_script))

        assert result.overall.score == 7.2
        assert result.parameter_adjustments[0].suggested_value == "21"

    def test_enhancement_count_mismatch(self, mock_provider_config, sample_script, caplog):
        orchestrator = LLMOrchestrator(mock_provider_config, provider=MockProvider())

        with caplog.at_level(logging.WARNING, logger="pinescript_assistant.core.orchestrator"):
            batch = asyncio.run(orchestrator.generate_enhancements("{}", sample_script, count=3))

        assert len(batch) == 2
        assert batch.requested == 3
        assert batch.count_mismatch
        assert batch.warning == "Provider returned 2 of 3 requested enhancement variants"
        assert [variant.version for variant in batch] == ["Enhanced Version 1", "Enhanced Version 2"]
        assert "2 of 3" in caplog.text

    def test_enhancements_truncated_to_count(self, mock_provider_config, sample_script):
        orchestrator = LLMOrchestrator(mock_provider_config, provider=MockProvider())

        batch = asyncio.run(orchestrator.generate_enhancements("{}", sample_script, count=1))

        assert len(batch) == 1
        assert not batch.count_mismatch
        assert batch.warning is None

    def test_invalid_count(self, mock_provider_config, scripted_provider, sample_script):
        provider = scripted_provider([])
        orchestrator = LLMOrchestrator(mock_provider_config, provider=provider)

        with pytest.raises(ValueError):
            asyncio.run(orchestrator.generate_enhancements("{}", sample_script, count=0))
        assert provider.call_count == 0

    def test_empty_script_rejected(self, mock_provider_config, scripted_provider):
        provider = scripted_provider([])
        orchestrator = LLMOrchestrator(mock_provider_config, provider=provider)

        with pytest.raises(ValueError):
            asyncio.run(orchestrator.analyze_strategy("   "))
        assert provider.call_count == 0

    def test_concurrent_calls_share_one_instance(self, mock_provider_config, sample_script):
        orchestrator = LLMOrchestrator(mock_provider_config, provider=MockProvider())

        async def run_both():
            return await asyncio.gather(
                orchestrator.analyze_strategy(sample_script),
                orchestrator.analyze_backtest("Net profit 3%", sample_script),
            )

        analysis, backtest = asyncio.run(run_both())
        assert analysis.risk.assessment.startswith("Moderate")
        assert backtest.overall.score == 7.2
