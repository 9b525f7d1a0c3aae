"""Tests for provider clients and provider selection."""

import asyncio
import json

import httpx
import pytest

from pinescript_assistant.config.models import ProviderConfig, ProviderName
from pinescript_assistant.core import prompt_builder
from pinescript_assistant.core.response_parser import parse_analysis
from pinescript_assistant.errors import ConfigError, ProviderError, ProviderErrorKind
from pinescript_assistant.infra.llm_infra import (
    AnthropicProvider,
    MockProvider,
    OpenAIProvider,
    ProviderClient,
    create_provider,
)
from pinescript_assistant.infra.llm_infra.providers_http import HttpProvider, classify_status


def _transport(status_code=200, body=None, captured=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if captured is not None:
            captured.append(request)
        return httpx.Response(status_code, json=body)

    return httpx.MockTransport(handler)


def _raising_transport(exc_type):
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_type("boom", request=request)

    return httpx.MockTransport(handler)


class TestOpenAIProvider:
    """Test suite for OpenAIProvider."""

    def test_send_success(self, openai_provider_config):
        captured = []
        body = {"choices": [{"message": {"role": "assistant", "content": '{"ok": true}'}}]}
        provider = OpenAIProvider(transport=_transport(body=body, captured=captured))

        result = asyncio.run(provider.send("Analyze this", openai_provider_config))

        assert result == '{"ok": true}'
        request = captured[0]
        assert str(request.url) == "https://api.openai.test/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-test"
        payload = json.loads(request.content)
        assert payload["model"] == "gpt-4-turbo"
        assert payload["messages"] == [{"role": "user", "content": "Analyze this"}]
        assert payload["max_tokens"] == 4000

    @pytest.mark.parametrize(
        "status_code, kind",
        [
            (401, ProviderErrorKind.AUTH),
            (403, ProviderErrorKind.AUTH),
            (429, ProviderErrorKind.RATE_LIMIT),
            (500, ProviderErrorKind.NETWORK),
            (504, ProviderErrorKind.TIMEOUT),
        ],
    )
    def test_http_errors_are_classified(self, openai_provider_config, status_code, kind):
        provider = OpenAIProvider(transport=_transport(status_code, body={"error": "nope"}))

        with pytest.raises(ProviderError) as exc_info:
            asyncio.run(provider.send("x", openai_provider_config))

        assert exc_info.value.kind is kind
        assert exc_info.value.status_code == status_code
        assert exc_info.value.provider == "openai"

    def test_timeout(self, openai_provider_config):
        provider = OpenAIProvider(transport=_raising_transport(httpx.ReadTimeout))

        with pytest.raises(ProviderError) as exc_info:
            asyncio.run(provider.send("x", openai_provider_config))

        assert exc_info.value.kind is ProviderErrorKind.TIMEOUT
        assert exc_info.value.retryable

    def test_connection_error(self, openai_provider_config):
        provider = OpenAIProvider(transport=_raising_transport(httpx.ConnectError))

        with pytest.raises(ProviderError) as exc_info:
            asyncio.run(provider.send("x", openai_provider_config))

        assert exc_info.value.kind is ProviderErrorKind.NETWORK

    def test_unexpected_envelope(self, openai_provider_config):
        provider = OpenAIProvider(transport=_transport(body={"choices": []}))

        with pytest.raises(ProviderError) as exc_info:
            asyncio.run(provider.send("x", openai_provider_config))

        assert exc_info.value.kind is ProviderErrorKind.NETWORK
        assert "Unexpected response payload" in exc_info.value.message

    def test_non_json_body(self, openai_provider_config):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>oops</html>"))
        provider = OpenAIProvider(transport=transport)

        with pytest.raises(ProviderError) as exc_info:
            asyncio.run(provider.send("x", openai_provider_config))

        assert exc_info.value.kind is ProviderErrorKind.NETWORK


class TestAnthropicProvider:
    """Test suite for AnthropicProvider."""

    def test_send_success(self, anthropic_provider_config):
        captured = []
        body = {
            "content": [
                {"type": "text", "text": "Here you go:\n"},
                {"type": "tool_use", "id": "t1"},
                {"type": "text", "text": '{"ok": true}'},
            ]
        }
        provider = AnthropicProvider(transport=_transport(body=body, captured=captured))

        result = asyncio.run(provider.send("Analyze this", anthropic_provider_config))

        assert result == 'Here you go:\n{"ok": true}'
        request = captured[0]
        assert str(request.url) == "https://api.anthropic.test/v1/messages"
        assert request.headers["x-api-key"] == "ak-test"
        assert request.headers["anthropic-version"] == "2023-06-01"
        assert json.loads(request.content)["model"] == "claude-3-sonnet-20240229"

    def test_rate_limited(self, anthropic_provider_config):
        provider = AnthropicProvider(transport=_transport(429, body={"error": "slow down"}))

        with pytest.raises(ProviderError) as exc_info:
            asyncio.run(provider.send("x", anthropic_provider_config))

        assert exc_info.value.kind is ProviderErrorKind.RATE_LIMIT
        assert not exc_info.value.retryable
        assert str(exc_info.value).startswith("[anthropic rate_limit]")

    def test_no_text_blocks(self, anthropic_provider_config):
        provider = AnthropicProvider(transport=_transport(body={"content": []}))

        with pytest.raises(ProviderError) as exc_info:
            asyncio.run(provider.send("x", anthropic_provider_config))

        assert exc_info.value.kind is ProviderErrorKind.NETWORK


class TestMockProvider:
    def test_routes_by_prompt(self, mock_provider_config, sample_script):
        provider = MockProvider()

        analysis = asyncio.run(
            provider.send(prompt_builder.analysis_prompt(sample_script), mock_provider_config)
        )
        backtest = asyncio.run(
            provider.send(prompt_builder.backtest_prompt("Net 4%", sample_script), mock_provider_config)
        )
        variants = asyncio.run(
            provider.send(prompt_builder.enhancement_prompt("{}", sample_script, 3), mock_provider_config)
        )

        assert '"parameters"' in analysis
        assert '"parameterAdjustments"' in backtest
        assert '"expectedImprovements"' in variants
        assert len(provider.prompts) == 3

    @pytest.mark.parametrize(
        "script",
        [
            '//@version=5\nstrategy("My backtest strat")\n// tuned on a 2y backtest',
            '//@version=5\nstrategy("Base")\n// later: generate enhanced versions of this',
        ],
    )
    def test_script_text_does_not_change_route(self, mock_provider_config, script):
        answer = asyncio.run(
            MockProvider().send(prompt_builder.analysis_prompt(script), mock_provider_config)
        )

        analysis = parse_analysis(answer)
        assert analysis.parameters.identified == ["length", "source", "multiplier"]

    def test_free_text_gets_analysis(self, mock_provider_config):
        answer = asyncio.run(MockProvider().send("Interpret the backtest results", mock_provider_config))
        assert '"parameterAdjustments"' not in answer

    def test_satisfies_protocol(self):
        assert isinstance(MockProvider(), ProviderClient)
        assert isinstance(OpenAIProvider(), ProviderClient)


class TestHttpProviderBase:
    def test_incomplete_vendor_fails_at_construction(self):
        class HeadersOnly(HttpProvider):
            name = "partial"

            def _build_headers(self, config):
                return {}

        with pytest.raises(TypeError):
            HeadersOnly()

    def test_base_class_is_abstract(self):
        with pytest.raises(TypeError):
            HttpProvider()


class TestClassifyStatus:
    @pytest.mark.parametrize(
        "status_code, kind",
        [
            (401, ProviderErrorKind.AUTH),
            (429, ProviderErrorKind.RATE_LIMIT),
            (408, ProviderErrorKind.TIMEOUT),
            (502, ProviderErrorKind.NETWORK),
            (404, ProviderErrorKind.NETWORK),
        ],
    )
    def test_mapping(self, status_code, kind):
        assert classify_status(status_code) is kind


class TestCreateProvider:
    def test_selects_by_name(self, mock_provider_config, openai_provider_config, anthropic_provider_config):
        assert isinstance(create_provider(mock_provider_config), MockProvider)
        assert isinstance(create_provider(openai_provider_config), OpenAIProvider)
        assert isinstance(create_provider(anthropic_provider_config), AnthropicProvider)

    def test_vendor_without_key(self):
        config = ProviderConfig(provider=ProviderName.OPENAI, model="gpt-4-turbo")

        with pytest.raises(ConfigError) as exc_info:
            create_provider(config)

        assert "API key" in exc_info.value.message
        assert exc_info.value.provider == "openai"
