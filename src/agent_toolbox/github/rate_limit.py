"""GitHub API rate limit tracking and request pacing."""

from __future__ import annotations

import asyncio
import logging
import time

import httpx

logger = logging.getLogger(__name__)

MAX_WAIT_SECONDS = 3600


class RateLimitMonitor:
    """Tracks ``X-RateLimit-*`` headers and sleeps until reset when low.

    ``min_interval`` additionally spaces consecutive requests apart, which
    GitHub's secondary limits ask for on content-creating calls.
    """

    def __init__(self, threshold: int = 10, min_interval: float = 0.0) -> None:
        self._remaining: int | None = None
        self._reset_at: float | None = None
        self._threshold = threshold
        self._min_interval = min_interval
        self._last_request: float | None = None

    @property
    def remaining(self) -> int | None:
        return self._remaining

    def update(self, response: httpx.Response) -> None:
        headers = response.headers
        if "X-RateLimit-Remaining" in headers:
            self._remaining = int(headers["X-RateLimit-Remaining"])
        if "X-RateLimit-Reset" in headers:
            self._reset_at = float(headers["X-RateLimit-Reset"])
        self._last_request = time.monotonic()

    def _exhausted(self) -> bool:
        return (
            self._remaining is not None
            and self._remaining <= self._threshold
            and self._reset_at is not None
        )

    async def wait_if_needed(self) -> None:
        if self._exhausted():
            wait_seconds = min(max(0, self._reset_at - time.time()) + 1, MAX_WAIT_SECONDS)
            logger.info(
                "Rate limit low (%d left), sleeping %.0fs until reset",
                self._remaining,
                wait_seconds,
            )
            await asyncio.sleep(wait_seconds)
            return
        if self._min_interval and self._last_request is not None:
            elapsed = time.monotonic() - self._last_request
            if elapsed < self._min_interval:
                await asyncio.sleep(self._min_interval - elapsed)
