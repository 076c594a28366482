"""Retry with exponential backoff for upstream calls."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

from metaso_mcp.core.errors import UpstreamError, UpstreamStatusError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class RetryConfig:
    """Configuration for retry with backoff."""

    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 10.0


def is_retryable(error: Exception) -> bool:
    """Check if an error should trigger another attempt.

    Client errors (4xx) other than 429 are final. Every other upstream
    failure (5xx, 429, network, setup) is retried.
    """
    if isinstance(error, UpstreamStatusError):
        return not (400 <= error.status < 500 and error.status != 429)
    return isinstance(error, UpstreamError)


def compute_delay(attempt: int, config: RetryConfig) -> float:
    """Seconds to wait after the given 1-based attempt failed."""
    delay: float = config.base_delay * (2 ** (attempt - 1))
    return min(delay, config.max_delay)


async def retry_with_backoff(
    fn: Callable[[], Awaitable[T]],
    config: RetryConfig | None = None,
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    on_retry: Callable[[int, float, Exception], None] | None = None,
) -> T:
    """Execute fn with retry and exponential backoff.

    Args:
        fn: Zero-arg callable returning an awaitable.
        config: Retry configuration. Uses defaults if None.
        sleep: Awaitable delay function, injectable for tests.
        on_retry: Optional callback(attempt, delay, error) before each sleep.

    Returns:
        The result of fn().

    Raises:
        The last error once attempts are exhausted, or immediately
        for non-retryable errors.
    """
    cfg = config or RetryConfig()
    attempt = 0

    while True:
        attempt += 1
        try:
            return await fn()
        except Exception as e:
            if not is_retryable(e) or attempt >= cfg.max_attempts:
                raise
            delay = compute_delay(attempt, cfg)
            if on_retry is not None:
                on_retry(attempt, delay, e)
            await sleep(delay)
