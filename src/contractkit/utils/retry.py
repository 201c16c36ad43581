"""
Retry utilities for contractkit transports.

Read-only RPC calls (receipt, code, block number) are retried with
exponential backoff and jitter. Transaction submission is never retried
here: resending a deployment could create a second contract.
"""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

from contractkit.utils.logging import get_logger

T = TypeVar("T")

_logger = get_logger(__name__)


@dataclass
class RetryConfig:
    """
    Configuration for retry behavior.

    Example:
        ```python
        config = RetryConfig(
            max_attempts=5,
            base_delay_ms=250,
            retryable_errors=(ConnectionError, asyncio.TimeoutError),
        )
        ```
    """

    max_attempts: int = 3
    """Maximum number of attempts (including the first one)."""

    base_delay_ms: int = 250
    """Base delay in milliseconds for exponential backoff."""

    max_delay_ms: int = 5000
    """Maximum delay in milliseconds (cap for exponential growth)."""

    jitter: bool = True
    """Whether to add random jitter to delays."""

    exponential_base: float = 2.0
    """Base for exponential backoff calculation."""

    retryable_errors: Tuple[Type[BaseException], ...] = field(
        default_factory=lambda: (ConnectionError, asyncio.TimeoutError)
    )
    """Exception types that trigger a retry; anything else propagates at once."""


def calculate_delay(attempt: int, config: RetryConfig) -> float:
    """
    Calculate delay with exponential backoff and optional jitter.

    Args:
        attempt: Zero-based attempt number (0 = first retry)
        config: Retry configuration

    Returns:
        Delay in seconds
    """
    delay_ms = min(
        config.base_delay_ms * (config.exponential_base ** attempt),
        config.max_delay_ms,
    )
    if config.jitter:
        # Full jitter
        delay_ms = random.uniform(0, delay_ms)
    return delay_ms / 1000


async def retry_async(
    fn: Callable[[], Awaitable[T]],
    config: Optional[RetryConfig] = None,
    *,
    operation: str = "rpc",
) -> T:
    """
    Execute an async function with retry logic.

    Args:
        fn: Async function to execute (no arguments)
        config: Retry configuration (uses defaults if None)
        operation: Name used in log records

    Returns:
        Result of the function

    Raises:
        The last retryable exception once attempts are exhausted, or the
        first non-retryable exception immediately.
    """
    config = config or RetryConfig()
    last_error: Optional[BaseException] = None

    for attempt in range(config.max_attempts):
        try:
            return await fn()
        except config.retryable_errors as e:
            last_error = e
            if attempt < config.max_attempts - 1:
                delay = calculate_delay(attempt, config)
                _logger.debug(
                    "Retrying transport call",
                    extra={
                        "operation": operation,
                        "attempt": attempt + 1,
                        "delay_s": round(delay, 3),
                        "error": str(e),
                    },
                )
                await asyncio.sleep(delay)

    if last_error is not None:
        raise last_error

    raise RuntimeError("Retry exhausted without error")
