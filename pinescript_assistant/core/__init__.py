"""Core LLM orchestration: prompts, response parsing and the orchestrator."""

from .models import (
    BacktestAnalysis,
    EnhancementBatch,
    EnhancementResult,
    StrategyAnalysis,
)
from .orchestrator import LLMOrchestrator

__all__ = [
    "BacktestAnalysis",
    "EnhancementBatch",
    "EnhancementResult",
    "LLMOrchestrator",
    "StrategyAnalysis",
]
