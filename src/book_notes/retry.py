# src/book_notes/retry.py

"""Bounded retries around a single generation call.

Only GenerationError failures count against the budget. Anything else
(storage, parsing, programming errors, cancellation) passes straight
through on the first occurrence.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryError,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from book_notes.errors import GenerationError, ModelError
from book_notes.observability import names
from book_notes.observability.base import MetricsHook, NoOpMetricsHook

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryConfig:
    """Retry budget for generation calls.

    Waits grow as backoff_multiplier * 2**(attempt - 1) seconds,
    capped at max_backoff.
    """

    max_attempts: int = 3
    backoff_multiplier: float = 1.0
    max_backoff: float = 30.0


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    max_attempts: int,
    backoff: wait_base,
    description: str = "generation",
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> T:
    """Await operation until it succeeds or max_attempts is reached.

    Raises:
        ModelError: Every attempt failed with a GenerationError. The last
            failure is chained as __cause__.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(max_attempts),
            wait=backoff,
            retry=retry_if_exception_type(GenerationError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
        ):
            with attempt:
                metrics_hook.increment(names.GENERATION_ATTEMPTS_TOTAL)
                try:
                    return await operation()
                except GenerationError:
                    metrics_hook.increment(names.GENERATION_FAILURES_TOTAL)
                    raise
    except RetryError as e:
        attempts = e.last_attempt.attempt_number
        cause = e.last_attempt.exception()
        metrics_hook.increment(names.GENERATION_EXHAUSTED_TOTAL)
        logger.error("%s failed after %d attempts: %s", description, attempts, cause)
        raise ModelError(
            f"{description} failed after {attempts} attempts: {cause}",
            attempts=attempts,
        ) from cause


class RetryPolicy:
    """Retry settings supplied once and applied to every generation call."""

    def __init__(
        self,
        max_attempts: int = 3,
        backoff: wait_base | None = None,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.max_attempts = max_attempts
        self.backoff = backoff or wait_exponential(multiplier=1.0, max=30.0)
        self.metrics_hook = metrics_hook

    @classmethod
    def from_config(
        cls,
        config: RetryConfig,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> "RetryPolicy":
        return cls(
            max_attempts=config.max_attempts,
            backoff=wait_exponential(
                multiplier=config.backoff_multiplier, max=config.max_backoff
            ),
            metrics_hook=metrics_hook,
        )

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        description: str = "generation",
    ) -> T:
        return await with_retry(
            operation,
            max_attempts=self.max_attempts,
            backoff=self.backoff,
            description=description,
            metrics_hook=self.metrics_hook,
        )
