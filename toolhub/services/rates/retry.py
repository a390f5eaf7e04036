from __future__ import annotations

"""Bounded retry with exponential backoff (1s, 2s, 4s, ...), no jitter."""
import asyncio
import logging
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

T = TypeVar("T")

logger = logging.getLogger("toolhub.rates.retry")


class RetryExhaustedError(Exception):
    def __init__(self, attempts: int, last_error: Optional[BaseException]):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"gave up after {attempts} attempt(s): {last_error}")


def backoff_delay(attempt: int, base_delay: float = 1.0) -> float:
    """Delay to wait after the given (1-based) failed attempt."""
    return base_delay * (2 ** (attempt - 1))


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    *,
    base_delay: float = 1.0,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    last_err: Optional[BaseException] = None
    for attempt in range(1, max_attempts + 1):
        try:
            return await operation()
        except retry_on as e:
            last_err = e
            logger.warning(
                "attempt %d/%d failed: %s", attempt, max_attempts, e
            )
            if attempt == max_attempts:
                break
            await sleep(backoff_delay(attempt, base_delay))
    raise RetryExhaustedError(max_attempts, last_err) from last_err
