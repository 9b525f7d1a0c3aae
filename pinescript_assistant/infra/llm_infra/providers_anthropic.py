"""Anthropic messages API provider."""

from typing import Any, Dict

from pinescript_assistant.config.models import ProviderConfig
from pinescript_assistant.infra.llm_infra.providers_http import HttpProvider

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicProvider(HttpProvider):
    """Provider for the Anthropic messages API."""

    name = "anthropic"
    default_base_url = "https://api.anthropic.com/v1"
    endpoint = "/messages"

    def _build_headers(self, config: ProviderConfig) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": config.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }

    def _build_payload(self, prompt: str, config: ProviderConfig) -> Dict[str, Any]:
        return {
            "model": config.model,
            "max_tokens": config.max_tokens,
            "temperature": config.temperature,
            "messages": [{"role": "user", "content": prompt}],
        }

    def _extract_text(self, data: Dict[str, Any]) -> str:
        # Concatenate text blocks; tool-use and other block types are ignored
        blocks = data["content"]
        if not isinstance(blocks, list):
            raise ValueError(f"Expected list for 'content', got {type(blocks)}")

        texts = [
            block["text"]
            for block in blocks
            if isinstance(block, dict) and block.get("type") == "text"
        ]
        if not texts:
            raise ValueError("No text blocks in Anthropic response")
        return "".join(texts)
