"""Exponential backoff for GitHub API calls."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Awaitable, Callable, TypeVar

import httpx

from ..config import DEFAULT_RETRY_ATTEMPTS, DEFAULT_RETRY_DELAY

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Raised immediately without retrying
NON_RETRYABLE_STATUS_CODES = frozenset({401, 404, 422})

_MAX_JITTER = 0.3


def is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code not in NON_RETRYABLE_STATUS_CODES
    return isinstance(exc, httpx.TransportError)


def backoff_delay(attempt: int, initial_delay: float) -> float:
    """Delay before retrying after ``attempt`` (1-based) failed."""
    delay = initial_delay * 2 ** (attempt - 1)
    return delay + random.uniform(0, _MAX_JITTER * delay)


async def with_retry(
    call: Callable[[], Awaitable[T]],
    description: str = "API call",
    attempts: int = DEFAULT_RETRY_ATTEMPTS,
    initial_delay: float = DEFAULT_RETRY_DELAY,
) -> T:
    """Await ``call()``, retrying transient HTTP failures.

    The last error is re-raised once ``attempts`` are exhausted or as soon as
    a non-retryable status (401, 404, 422) is seen.
    """
    attempts = max(1, attempts)
    for attempt in range(1, attempts + 1):
        try:
            return await call()
        except (httpx.HTTPStatusError, httpx.TransportError) as exc:
            if not is_retryable(exc) or attempt == attempts:
                raise
            delay = backoff_delay(attempt, initial_delay)
            logger.info(
                "%s failed (attempt %d/%d), retry in %.1fs: %s",
                description,
                attempt,
                attempts,
                delay,
                exc,
            )
            await asyncio.sleep(delay)
    raise AssertionError("unreachable")  # pragma: no cover
