"""Retry policy for provider calls."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)
T = TypeVar("T")


def _always(exc: Exception) -> bool:
    return True


class AsyncRetryPolicy:
    """Asynchronous retry policy with (optionally exponential) backoff."""

    def __init__(
        self,
        max_retries: int = 1,
        base_delay: float = 1.0,
        max_delay: float = 60.0,
        exponential_base: float = 1.0,
        should_retry: Callable[[Exception], bool] = _always,
    ):
        """Initialize async retry policy.

        Args:
            max_retries: Maximum number of retry attempts.
            base_delay: Initial delay in seconds.
            max_delay: Maximum delay in seconds.
            exponential_base: Base for exponential backoff (1.0 = fixed delay).
            should_retry: Predicate deciding whether an error is retryable.
        """
        if max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if base_delay < 0:
            raise ValueError("base_delay must be non-negative")
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.should_retry = should_retry

    def delay_for(self, attempt: int) -> float:
        return min(self.base_delay * (self.exponential_base**attempt), self.max_delay)

    async def arun(
        self,
        func: Callable[[], Awaitable[T]],
        description: Optional[str] = None,
    ) -> T:
        """Await *func* with retries, re-raising the last exception on failure.

        Args:
            func: Zero-argument coroutine factory; called once per attempt.
            description: Label used in log messages.

        Returns:
            Result of the first successful attempt.
        """
        label = description or getattr(func, "__name__", "call")

        for attempt in range(self.max_retries + 1):
            try:
                if attempt > 0:
                    logger.debug("Async retry attempt %d/%d for %s", attempt, self.max_retries, label)
                return await func()
            except Exception as e:
                if not self.should_retry(e):
                    logger.error("Non-retryable error in %s: %s: %s", label, type(e).__name__, str(e))
                    raise
                if attempt >= self.max_retries:
                    logger.error("All %d attempts failed for %s", self.max_retries + 1, label)
                    raise
                delay = self.delay_for(attempt)
                logger.warning(
                    "Attempt %d of %s failed with %s: %s. Retrying in %.1fs...",
                    attempt + 1,
                    label,
                    type(e).__name__,
                    str(e),
                    delay,
                )
                await asyncio.sleep(delay)

        # max_retries >= 0 guarantees at least one attempt above
        raise RuntimeError("Async retry loop exhausted without exception or return")
