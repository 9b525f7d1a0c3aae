"""LLM orchestration: prompt -> provider -> parsed result, with retry and deadline."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from pinescript_assistant.config.models import ProviderConfig
from pinescript_assistant.config.service import ConfigStore
from pinescript_assistant.core import prompt_builder, response_parser
from pinescript_assistant.core.models import (
    BacktestAnalysis,
    EnhancementBatch,
    StrategyAnalysis,
)
from pinescript_assistant.errors import OperationTimeoutError, ParseError, ProviderError
from pinescript_assistant.infra.llm_infra import AsyncRetryPolicy, ProviderClient, create_provider

logger = logging.getLogger(__name__)
T = TypeVar("T")

DEFAULT_RETRY_BACKOFF = 1.0


def is_retryable(exc: Exception) -> bool:
    """Transient provider failures and malformed output earn one more attempt."""
    if isinstance(exc, ProviderError):
        return exc.retryable
    return isinstance(exc, ParseError)


def _require_text(value: str, name: str) -> None:
    if not value or not value.strip():
        raise ValueError(f"{name} must not be empty")


class LLMOrchestrator:
    """Runs the assistant's LLM operations against one configured provider.

    Holds no mutable state between calls, so one instance can serve
    concurrent requests.
    """

    def __init__(
        self,
        provider_config: ProviderConfig,
        provider: Optional[ProviderClient] = None,
        retry_backoff: float = DEFAULT_RETRY_BACKOFF,
        deadline_seconds: Optional[float] = None,
    ):
        """Initialize the orchestrator.

        Args:
            provider_config: Read-only provider settings used for every call.
            provider: Provider client; selected from ``provider_config`` when omitted.
            retry_backoff: Fixed delay in seconds before the single retry.
            deadline_seconds: Deadline for a whole operation including its retry.
                Defaults to one provider timeout per attempt plus the backoff,
                so a timed-out first request still leaves room for the retry.
        """
        self.config = provider_config
        self.provider = provider if provider is not None else create_provider(provider_config)
        self.retry_policy = AsyncRetryPolicy(
            max_retries=1,
            base_delay=retry_backoff,
            exponential_base=1.0,
            should_retry=is_retryable,
        )
        self.deadline_seconds = deadline_seconds or self._default_deadline()

    def _default_deadline(self) -> float:
        attempts = self.retry_policy.max_retries + 1
        backoff = sum(self.retry_policy.delay_for(n) for n in range(self.retry_policy.max_retries))
        return attempts * self.config.timeout_seconds + backoff

    @classmethod
    def from_store(
        cls,
        store: ConfigStore,
        provider: Optional[ProviderClient] = None,
    ) -> "LLMOrchestrator":
        """Build an orchestrator from a ConfigStore.

        Raises:
            ConfigError: If the store holds no usable provider configuration.
        """
        return cls(
            store.get_provider_config(),
            provider=provider,
            retry_backoff=store.retry_backoff_seconds,
        )

    async def analyze_strategy(self, script: str) -> StrategyAnalysis:
        """Review a strategy script's parameters, logic, risk and performance."""
        _require_text(script, "script")
        prompt = prompt_builder.analysis_prompt(script)
        return await self._run("analyze_strategy", prompt, response_parser.parse_analysis)

    async def analyze_backtest(self, backtest_results: str, script: str) -> BacktestAnalysis:
        """Interpret a backtest report for the given strategy script."""
        _require_text(backtest_results, "backtest_results")
        _require_text(script, "script")
        prompt = prompt_builder.backtest_prompt(backtest_results, script)
        return await self._run("analyze_backtest", prompt, response_parser.parse_backtest)

    async def generate_enhancements(
        self,
        prior_analysis_json: str,
        script: str,
        count: int = 3,
    ) -> EnhancementBatch:
        """Generate up to ``count`` enhanced variants of a strategy.

        The result carries a mismatch warning when the provider returned
        fewer variants than requested; no further requests are made for them.
        """
        if count < 1:
            raise ValueError("count must be at least 1")
        _require_text(script, "script")
        prompt = prompt_builder.enhancement_prompt(prior_analysis_json, script, count)
        items = await self._run(
            "generate_enhancements",
            prompt,
            lambda raw: response_parser.parse_enhancements(raw, count),
        )

        batch = EnhancementBatch(items, requested=count)
        if batch.count_mismatch:
            logger.warning(batch.warning)
        return batch

    async def _run(self, operation: str, prompt: str, parse: Callable[[str], T]) -> T:
        """Send ``prompt`` and parse the answer under the retry policy and deadline.

        Raises:
            OperationTimeoutError: If the deadline elapses; any in-flight call is cancelled.
        """

        async def attempt() -> T:
            raw = await self.provider.send(prompt, self.config)
            return parse(raw)

        call: Awaitable[T] = self.retry_policy.arun(attempt, description=operation)
        try:
            return await asyncio.wait_for(call, timeout=self.deadline_seconds)
        except asyncio.TimeoutError as exc:
            logger.error(
                "%s exceeded its %.1fs deadline (provider=%s)",
                operation,
                self.deadline_seconds,
                self.provider.name,
            )
            raise OperationTimeoutError(
                f"{operation} did not finish within {self.deadline_seconds:.1f}s",
                deadline_seconds=self.deadline_seconds,
                operation=operation,
                provider=self.provider.name,
            ) from exc
