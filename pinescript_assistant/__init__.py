"""PineScript Assistant - LLM-backed analysis and enhancement of trading scripts.

This package provides:
- Strategy and backtest analysis through a configurable LLM provider
- Generation of enhanced strategy variants
- Fuzzy lookup of canonical strategy and indicator skeletons
"""

__version__ = "0.1.0"

from .errors import (  # noqa: E402
    ConfigError,
    OperationTimeoutError,
    ParseError,
    PineScriptAssistantError,
    ProviderError,
    ProviderErrorKind,
    UnknownCategoryError,
)
from .tools import PineScriptTools  # noqa: E402

__all__ = [
    "PineScriptTools",
    "PineScriptAssistantError",
    "ConfigError",
    "ProviderError",
    "ProviderErrorKind",
    "ParseError",
    "OperationTimeoutError",
    "UnknownCategoryError",
]
