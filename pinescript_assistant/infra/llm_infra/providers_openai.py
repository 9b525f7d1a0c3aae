"""OpenAI-compatible chat completions provider."""

from typing import Any, Dict

from pinescript_assistant.config.models import ProviderConfig
from pinescript_assistant.infra.llm_infra.providers_http import HttpProvider


class OpenAIProvider(HttpProvider):
    """Provider for OpenAI-compatible HTTP APIs (OpenAI, Azure, vLLM, etc.)."""

    name = "openai"
    default_base_url = "https://api.openai.com/v1"
    endpoint = "/chat/completions"

    def _build_headers(self, config: ProviderConfig) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {config.api_key}",
            "Content-Type": "application/json",
        }

    def _build_payload(self, prompt: str, config: ProviderConfig) -> Dict[str, Any]:
        return {
            "model": config.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": config.temperature,
            "max_tokens": config.max_tokens,
        }

    def _extract_text(self, data: Dict[str, Any]) -> str:
        """Pull the message content out of a chat completion.

        Raises:
            ValueError: If response format is invalid.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected dict response from OpenAI, got {type(data)}")

        choices = data["choices"]
        if not isinstance(choices, list) or not choices:
            raise ValueError("Expected non-empty list for 'choices'")

        content = choices[0]["message"]["content"]
        if not isinstance(content, str):
            raise ValueError(f"Expected string content, got {type(content)}")

        return content
