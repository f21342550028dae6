"""GitHub API rate limit tracking."""

from __future__ import annotations

import asyncio
import logging
import time

import httpx

logger = logging.getLogger(__name__)

_MAX_WAIT_SECONDS = 3600


class RateLimitMonitor:
    """Tracks the core rate limit from response headers and pauses near zero.

    Unauthenticated clients get 60 requests per hour, so the threshold is
    kept small enough not to stall short runs.
    """

    def __init__(self, threshold: int = 5) -> None:
        self._remaining: int | None = None
        self._reset_at: float | None = None
        self._threshold = threshold

    @property
    def remaining(self) -> int | None:
        return self._remaining

    def update(self, response: httpx.Response) -> None:
        remaining = response.headers.get("X-RateLimit-Remaining")
        reset_at = response.headers.get("X-RateLimit-Reset")
        if remaining is not None:
            self._remaining = int(remaining)
        if reset_at is not None:
            self._reset_at = float(reset_at)

    def seconds_until_reset(self) -> float:
        if self._reset_at is None:
            return 0.0
        return max(0.0, self._reset_at - time.time())

    async def wait_if_needed(self) -> None:
        if (
            self._remaining is None
            or self._remaining > self._threshold
            or self._reset_at is None
        ):
            return
        wait_seconds = min(self.seconds_until_reset() + 1, _MAX_WAIT_SECONDS)
        logger.warning(
            "Rate limit nearly exhausted (%d left), sleeping %.0fs. "
            "Set GITHUB_TOKEN to raise the limit.",
            self._remaining,
            wait_seconds,
        )
        await asyncio.sleep(wait_seconds)
