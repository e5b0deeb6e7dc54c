"""
Bounded retry policy for upstream HTTP calls.
Disabled by default: one attempt per call unless configured otherwise.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Only transport-level failures are retried; HTTP error statuses are not.
RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    httpx.TransportError,
)


def build_retrying(
    max_attempts: int = 1,
    wait_multiplier: float = 0.5,
    wait_max: float = 10.0,
) -> AsyncRetrying:
    """
    Build an async retry controller with jittered exponential backoff.

    Args:
        max_attempts: Total attempts, including the first one
        wait_multiplier: Multiplier for the randomized exponential wait
        wait_max: Maximum wait between attempts (seconds)
    """
    return AsyncRetrying(
        stop=stop_after_attempt(max(1, max_attempts)),
        wait=wait_random_exponential(multiplier=wait_multiplier, max=wait_max),
        retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 1,
) -> T:
    """Run ``operation`` under the bounded retry policy."""
    async for attempt in build_retrying(max_attempts):
        with attempt:
            return await operation()
    raise RuntimeError("retry loop exited without a result")
