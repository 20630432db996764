"""
Inbound rate limiting for the AI-backed function routes
"""

import time
import logging
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Deque, Dict, Optional

from app.core.config import settings

logger = logging.getLogger(__name__)


@dataclass
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_in: int
    retry_after: Optional[int] = None

    def headers(self) -> Dict[str, str]:
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset_in),
        }
        if not self.allowed:
            headers["Retry-After"] = str(self.retry_after)
        return headers


class RateLimiter:
    """
    Sliding window limiter keyed by client.

    Requests older than ``window_seconds`` fall out of the window; a rejected
    request is not counted. Idle clients are dropped every ``cleanup_every``
    checks.
    """

    def __init__(
        self,
        limit: Optional[int] = None,
        window_seconds: int = 60,
        clock=time.monotonic,
        cleanup_every: int = 1000
    ):
        self.limit = limit or settings.rate_limit_qps
        self.window_seconds = window_seconds
        self.clock = clock
        self.cleanup_every = cleanup_every
        self._checks = 0
        self._requests: Dict[str, Deque[float]] = defaultdict(deque)

    def check(self, client_id: str) -> RateLimitDecision:
        self._checks += 1
        if self._checks % self.cleanup_every == 0:
            self.cleanup()

        now = self.clock()
        window = self._requests[client_id]
        while window and window[0] <= now - self.window_seconds:
            window.popleft()

        if len(window) >= self.limit:
            retry_after = max(1, int(window[0] + self.window_seconds - now))
            logger.warning(f"Rate limit exceeded for client {client_id}")
            return RateLimitDecision(False, self.limit, 0, retry_after, retry_after)

        window.append(now)
        return RateLimitDecision(True, self.limit, self.limit - len(window), self.window_seconds)

    def cleanup(self) -> int:
        """Drop clients without requests in the current window"""
        now = self.clock()
        stale = [
            client_id for client_id, window in self._requests.items()
            if not window or window[-1] <= now - self.window_seconds
        ]
        for client_id in stale:
            del self._requests[client_id]
        logger.debug(f"Rate limiter cleanup: removed {len(stale)} clients")
        return len(stale)

    def reset(self, limit: Optional[int] = None) -> None:
        self._requests.clear()
        self._checks = 0
        self.limit = limit or settings.rate_limit_qps


rate_limiter = RateLimiter()
