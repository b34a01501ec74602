"""
Retry with exponential backoff for rate-limited AI calls

Only rate-limit/quota failures are retried. Every other failure propagates on
the first attempt.

State machine: IDLE -> ATTEMPTING -> SUCCESS
                               |-> RETRY_WAIT -> ATTEMPTING
                               |-> FAILED
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Tuple

from exceptions import ServerLimitReachedError

logger = logging.getLogger(__name__)

# Substrings the hosted model APIs use for quota / rate-limit responses
RATE_LIMIT_MARKERS: Tuple[str, ...] = (
    "429",
    "quota",
    "rate limit",
    "rate_limit",
    "resource_exhausted",
    "too many requests",
)


class RetryState(Enum):
    IDLE = "idle"
    ATTEMPTING = "attempting"
    RETRY_WAIT = "retry_wait"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class RetryConfig:
    """Configuration for rate-limit retries"""
    max_attempts: int = 3
    initial_delay: float = 3.0  # seconds
    exponential_base: float = 2.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")

    @classmethod
    def from_settings(cls, settings) -> "RetryConfig":
        return cls(
            max_attempts=settings.retry_max_attempts,
            initial_delay=settings.retry_initial_delay,
        )


def is_rate_limit_error(error: BaseException) -> bool:
    """Check the error message for known rate-limit markers"""
    message = str(error) or repr(error)
    lowered = message.lower()
    return any(marker in lowered for marker in RATE_LIMIT_MARKERS)


async def with_retry(
    operation: Callable[[], Awaitable[Any]],
    max_attempts: int = 3,
    initial_delay: float = 3.0,
    exponential_base: float = 2.0,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    on_retry: Optional[Callable[[int, BaseException, float], None]] = None,
    on_state_change: Optional[Callable[[RetryState], None]] = None,
) -> Any:
    """
    Run an async operation, retrying rate-limit failures with backoff

    Args:
        operation: Zero-argument coroutine function to attempt
        max_attempts: Total number of attempts, including the first
        initial_delay: Seconds to wait before the second attempt
        exponential_base: Multiplier applied to the delay after each wait
        sleep: Awaitable sleep, injectable for tests
        on_retry: Called with (attempt, error, delay) before each wait
        on_state_change: Called with every RetryState transition

    Returns:
        The operation's result

    Raises:
        ServerLimitReachedError: rate limited on every attempt
        Exception: any non-rate-limit failure, unchanged
        ValueError: max_attempts is below 1
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

    def _transition(state: RetryState):
        if on_state_change:
            on_state_change(state)

    _transition(RetryState.IDLE)
    delay = initial_delay
    last_error: Optional[BaseException] = None

    for attempt in range(1, max_attempts + 1):
        _transition(RetryState.ATTEMPTING)
        try:
            result = await operation()
        except Exception as e:
            if not is_rate_limit_error(e):
                _transition(RetryState.FAILED)
                raise

            last_error = e
            if attempt >= max_attempts:
                break

            logger.warning(
                f"Rate limited (attempt {attempt}/{max_attempts}), retrying in {delay:g}s: {e}"
            )
            if on_retry:
                on_retry(attempt, e, delay)
            _transition(RetryState.RETRY_WAIT)
            await sleep(delay)
            delay *= exponential_base
            continue

        _transition(RetryState.SUCCESS)
        return result

    _transition(RetryState.FAILED)
    logger.error(f"Rate limit persisted after {max_attempts} attempts")
    raise ServerLimitReachedError(max_attempts) from last_error


async def with_retry_config(operation: Callable[[], Awaitable[Any]], config: RetryConfig, **kwargs) -> Any:
    """with_retry using a RetryConfig"""
    return await with_retry(
        operation,
        max_attempts=config.max_attempts,
        initial_delay=config.initial_delay,
        exponential_base=config.exponential_base,
        **kwargs
    )
