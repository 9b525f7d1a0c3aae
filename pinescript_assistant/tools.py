"""Tool-protocol facade over the orchestrator and template resolver.

The surrounding tool layer (an MCP server, a CLI) calls these methods
and renders their results; argument parsing and file I/O live there.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from pinescript_assistant.config.service import ConfigStore
from pinescript_assistant.core.models import (
    BacktestAnalysis,
    EnhancementBatch,
    StrategyAnalysis,
)
from pinescript_assistant.core.orchestrator import LLMOrchestrator
from pinescript_assistant.infra.llm_infra import ProviderClient
from pinescript_assistant.templates import TemplateCategory, TemplateResolver

logger = logging.getLogger(__name__)


class PineScriptTools:
    """The assistant's callable tools."""

    def __init__(self, orchestrator: LLMOrchestrator, resolver: Optional[TemplateResolver] = None):
        self.orchestrator = orchestrator
        self.resolver = resolver or TemplateResolver()

    @classmethod
    def from_config(
        cls,
        store: Optional[ConfigStore] = None,
        provider: Optional[ProviderClient] = None,
    ) -> "PineScriptTools":
        """Wire tools from a ConfigStore (loaded from disk when omitted)."""
        store = store or ConfigStore.from_disk()
        orchestrator = LLMOrchestrator.from_store(store, provider=provider)
        resolver = TemplateResolver(version=store.template_version)
        return cls(orchestrator, resolver)

    async def analyze_strategy(self, script: str) -> StrategyAnalysis:
        return await self.orchestrator.analyze_strategy(script)

    async def analyze_backtest(self, backtest_results: str, script: str) -> BacktestAnalysis:
        return await self.orchestrator.analyze_backtest(backtest_results, script)

    async def generate_enhancements(
        self,
        prior_analysis: Union[StrategyAnalysis, str],
        script: str,
        count: int = 3,
    ) -> EnhancementBatch:
        """Generate enhanced variants from a prior analysis (model or JSON text)."""
        if isinstance(prior_analysis, StrategyAnalysis):
            prior_analysis = prior_analysis.to_json()
        return await self.orchestrator.generate_enhancements(prior_analysis, script, count)

    def resolve_template(self, category: Union[TemplateCategory, str], query: str) -> str:
        return self.resolver.resolve(category, query)

    def list_templates(self, category: Union[TemplateCategory, str, None] = None) -> dict[str, list[str]]:
        return self.resolver.list_templates(category)
