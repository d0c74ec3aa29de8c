"""Retry with exponential backoff for producer calls.

The catalog fetch is not wrapped; a failed cold start is surfaced to the
caller, who may retry the whole request.
"""

import asyncio
import functools
import inspect
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Type, TypeVar

from dagflow.utils.logger import get_logger

logger = get_logger()

T = TypeVar("T")


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    max_attempts: int = 3
    base_delay: float = 1.0  # seconds
    max_delay: float = 60.0  # seconds
    exponential_base: float = 2.0
    jitter: bool = True
    retryable_exceptions: tuple[Type[Exception], ...] = (Exception,)


class MaxRetriesExceededError(Exception):
    """Raised when all retry attempts are exhausted."""

    def __init__(self, message: str, last_exception: Optional[Exception] = None):
        super().__init__(message)
        self.last_exception = last_exception


def calculate_delay(attempt: int, config: RetryConfig) -> float:
    """Backoff delay before the retry following ``attempt`` (0-based)."""
    delay = min(config.base_delay * (config.exponential_base ** attempt), config.max_delay)
    if config.jitter:
        # ±25%
        spread = delay * 0.25
        delay += random.uniform(-spread, spread)
    return max(0.0, delay)


def with_retry(config: Optional[RetryConfig] = None) -> Callable:
    """Decorator retrying a coroutine function with exponential backoff.

    Example:
        @with_retry(RetryConfig(max_attempts=3))
        async def call_model():
            ...

    Raises:
        TypeError: If the decorated callable is not a coroutine function.
    """
    if config is None:
        config = RetryConfig()

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"with_retry expects a coroutine function, got {func!r}")

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            last_exception: Optional[Exception] = None
            for attempt in range(config.max_attempts):
                try:
                    return await func(*args, **kwargs)
                except config.retryable_exceptions as e:
                    last_exception = e
                    if attempt < config.max_attempts - 1:
                        delay = calculate_delay(attempt, config)
                        logger.warning(
                            f"Retry {attempt + 1}/{config.max_attempts} for {func.__name__} "
                            f"after error: {e}. Waiting {delay:.2f}s"
                        )
                        await asyncio.sleep(delay)
            logger.error(f"All {config.max_attempts} attempts exhausted for {func.__name__}")
            raise MaxRetriesExceededError(
                f"Max retries ({config.max_attempts}) exceeded for {func.__name__}",
                last_exception,
            )

        return wrapper

    return decorator
