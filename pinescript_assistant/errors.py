"""Error classifications for the PineScript assistant.

Every error carries enough context (operation, provider, raw snippet)
for the calling tool layer to render an actionable message.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

_SNIPPET_CHARS = 200


class PineScriptAssistantError(Exception):
    """Base class for all assistant errors."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        provider: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.provider = provider
        self.context = context or {}


class ConfigError(PineScriptAssistantError):
    """Missing or invalid configuration (credentials, provider selection)."""


class ProviderErrorKind(str, Enum):
    """Failure classes reported by provider clients."""

    NETWORK = "network"
    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"


class ProviderError(PineScriptAssistantError):
    """A text-generation backend failed to return an answer."""

    def __init__(
        self,
        message: str,
        kind: ProviderErrorKind,
        status_code: Optional[int] = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.kind = kind
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        """Network and timeout failures may succeed on a repeat request."""
        return self.kind in (ProviderErrorKind.NETWORK, ProviderErrorKind.TIMEOUT)

    def __str__(self) -> str:
        label = f"{self.provider} " if self.provider else ""
        return f"[{label}{self.kind.value}] {self.message}"


class ParseError(PineScriptAssistantError):
    """Model output did not contain a decodable payload of the expected shape."""

    def __init__(self, message: str, raw: str, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.raw = raw

    @property
    def snippet(self) -> str:
        if len(self.raw) <= _SNIPPET_CHARS:
            return self.raw
        return self.raw[:_SNIPPET_CHARS] + "..."

    def __str__(self) -> str:
        return f"{self.message} (raw: {self.snippet!r})"


class OperationTimeoutError(PineScriptAssistantError, TimeoutError):
    """The per-call deadline elapsed before the operation finished."""

    def __init__(self, message: str, deadline_seconds: float, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.deadline_seconds = deadline_seconds


class UnknownCategoryError(PineScriptAssistantError, ValueError):
    """Template category is not one of the recognized values."""

    def __init__(self, category: Any):
        super().__init__(
            f"Unknown template type: {category}",
            operation="resolve_template",
            context={"category": category},
        )
        self.category = category


__all__ = [
    "ConfigError",
    "OperationTimeoutError",
    "ParseError",
    "PineScriptAssistantError",
    "ProviderError",
    "ProviderErrorKind",
    "UnknownCategoryError",
]
