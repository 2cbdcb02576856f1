"""Exponential backoff for flaky outbound calls.

Only external clients (the mail provider) retry. Auth flows fail fast and
let the caller decide.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

DEFAULT_ATTEMPTS = 2
DEFAULT_BASE_DELAY = 0.2  # seconds
MAX_DELAY = 5.0  # seconds

T = TypeVar("T")


def _calculate_delay(attempt: int, base_delay: float = DEFAULT_BASE_DELAY) -> float:
    """Backoff before retry number ``attempt + 1``, capped at MAX_DELAY."""
    return min(base_delay * (2**attempt), MAX_DELAY)


async def with_retry(
    fn: Callable[[], Awaitable[T]],
    attempts: int = DEFAULT_ATTEMPTS,
    exceptions: tuple[type[Exception], ...] = (Exception,),
    base_delay: float = DEFAULT_BASE_DELAY,
) -> T:
    """Await ``fn()`` up to ``attempts`` times.

    Only ``exceptions`` trigger another attempt; anything else propagates
    immediately. The error of the final attempt is re-raised unchanged.
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")

    attempt = 0
    while True:
        try:
            return await fn()
        except exceptions as e:
            attempt += 1
            if attempt >= attempts:
                logger.error("Giving up after %d attempt(s): %s", attempts, e)
                raise

            delay = _calculate_delay(attempt - 1, base_delay)
            logger.warning(
                "Attempt %d/%d failed (%s), retrying in %.2fs",
                attempt,
                attempts,
                e,
                delay,
            )
            await asyncio.sleep(delay)
