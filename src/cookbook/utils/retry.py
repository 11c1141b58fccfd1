"""Caller-side retry policy with exponential backoff.

The AI client and the suggestion engine never retry; a caller that wants
resilience wraps its call with `with_retries`.
"""

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

from cookbook.errors import APIError, TransportError
from cookbook.utils.config import config
from cookbook.utils.logger import logger


T = TypeVar("T")


def is_transient(error: Exception) -> bool:
    """Network failures, rate limits and 5xx responses are worth another attempt."""
    if isinstance(error, TransportError):
        return True
    if isinstance(error, APIError):
        return error.is_transient
    return False


def backoff_delays(
    max_retries: int,
    initial_delay: float,
    exponential: bool = True,
) -> list[float]:
    """Delays slept between attempts: one fewer than the number of attempts."""
    return [
        initial_delay * (2 ** attempt) if exponential else initial_delay
        for attempt in range(max(max_retries - 1, 0))
    ]


async def with_retries(
    operation: Callable[[], Awaitable[T]],
    operation_name: str,
    max_retries: Optional[int] = None,
    initial_delay: Optional[float] = None,
    exponential: Optional[bool] = None,
    retry_on: Callable[[Exception], bool] = is_transient,
) -> T:
    """Run `operation` up to `max_retries` times, sleeping between attempts.

    Args:
        operation: Zero-argument coroutine factory; called once per attempt.
        operation_name: Description for logging.
        max_retries: Attempts in total. Default: config.MAX_RETRIES.
        initial_delay: First delay in seconds. Default: config.DELAY_BETWEEN_RETRIES.
        exponential: Double the delay after each attempt. Default: config.EXPONENTIAL_BACKOFF.
        retry_on: Predicate deciding whether an exception is retried.

    Returns:
        Result of the first successful attempt.

    Raises:
        The last exception once attempts are exhausted, or immediately when
        `retry_on` rejects it.
    """
    attempts = max_retries if max_retries is not None else config.MAX_RETRIES
    delays = backoff_delays(
        attempts,
        initial_delay if initial_delay is not None else config.DELAY_BETWEEN_RETRIES,
        exponential if exponential is not None else config.EXPONENTIAL_BACKOFF,
    )

    for attempt in range(attempts):
        try:
            return await operation()
        except Exception as e:
            if not retry_on(e) or attempt >= attempts - 1:
                if attempt > 0:
                    logger.error(f"{operation_name} failed after {attempt + 1} attempts: {e}")
                raise
            delay = delays[attempt]
            logger.warning(
                f"{operation_name} failed, retrying in {delay}s... (attempt {attempt + 1}/{attempts}): {e}"
            )
            await asyncio.sleep(delay)

    raise ValueError(f"max_retries must be at least 1, got: {attempts}")
