"""GitHub API rate limit monitoring."""

from __future__ import annotations

import asyncio
import logging
import time

import httpx

logger = logging.getLogger(__name__)

MAX_WAIT_SECONDS = 30


class RateLimitMonitor:
    """Tracks ``X-RateLimit-*`` headers and pauses before the quota runs dry."""

    def __init__(self, threshold: int = 5, max_wait: float = MAX_WAIT_SECONDS) -> None:
        self._remaining: int | None = None
        self._reset_at: float | None = None
        self._threshold = threshold
        self._max_wait = max_wait

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

    async def wait_if_needed(self) -> None:
        if (
            self._remaining is not None
            and self._remaining <= self._threshold
            and self._reset_at is not None
        ):
            wait_seconds = max(0, self._reset_at - time.time()) + 1
            wait_seconds = min(wait_seconds, self._max_wait)
            logger.info(
                "GitHub rate limit low (%d left), waiting %.0fs",
                self._remaining,
                wait_seconds,
            )
            await asyncio.sleep(wait_seconds)
