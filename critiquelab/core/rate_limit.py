"""
Fixed-window rate limiter keyed by client IP.

One instance lives for the whole process (created in the app lifespan and
kept on `app.state`); routes get it through `get_rate_limiter`. State is
in-memory only and resets on restart.
"""
from __future__ import annotations

import logging
import math
import re
import time
from dataclasses import dataclass
from typing import Callable

from fastapi import Depends, Request

from critiquelab.core.errors import RateLimitedError

logger = logging.getLogger(__name__)

# Proxy headers checked in order of preference
_IP_HEADERS = ("cf-connecting-ip", "x-real-ip", "x-forwarded-for")
_IP_PATTERN = re.compile(r"^[\d.:a-fA-F]+$")

CLEANUP_INTERVAL_SECONDS = 5 * 60


@dataclass
class _Window:
    count: int
    reset_at: float


@dataclass
class RateLimitDecision:
    allowed: bool
    remaining: int
    retry_after: int = 0   # whole seconds; 0 when allowed


class FixedWindowRateLimiter:
    def __init__(
        self,
        max_requests: int = 10,
        window_seconds: float = 60,
        clock: Callable[[], float] = time.monotonic,
        cleanup_interval: float = CLEANUP_INTERVAL_SECONDS,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.cleanup_interval = cleanup_interval
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._last_cleanup = clock()

    def __len__(self) -> int:
        return len(self._windows)

    def check(self, key: str) -> RateLimitDecision:
        """Count one request for `key` and say whether it may proceed."""
        now = self._clock()
        if now - self._last_cleanup >= self.cleanup_interval:
            self.purge_expired()

        window = self._windows.get(key)
        if window is None or now > window.reset_at:
            self._windows[key] = _Window(count=1, reset_at=now + self.window_seconds)
            return RateLimitDecision(allowed=True, remaining=self.max_requests - 1)

        if window.count >= self.max_requests:
            retry_after = math.ceil(window.reset_at - now)
            return RateLimitDecision(allowed=False, remaining=0, retry_after=retry_after)

        window.count += 1
        return RateLimitDecision(allowed=True, remaining=self.max_requests - window.count)

    def purge_expired(self) -> int:
        """Drop windows that have already reset. Returns how many were dropped."""
        now = self._clock()
        expired = [k for k, w in self._windows.items() if now > w.reset_at]
        for k in expired:
            del self._windows[k]
        self._last_cleanup = now
        return len(expired)


def client_ip(request: Request) -> str:
    for header in _IP_HEADERS:
        value = request.headers.get(header)
        if value:
            # x-forwarded-for may hold a chain; the first hop is the client
            ip = value.split(",")[0].strip()
            if _IP_PATTERN.match(ip):
                return ip
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------

def get_rate_limiter(request: Request) -> FixedWindowRateLimiter:
    return request.app.state.rate_limiter


def enforce_rate_limit(
    request: Request,
    limiter: FixedWindowRateLimiter = Depends(get_rate_limiter),
) -> RateLimitDecision:
    ip = client_ip(request)
    decision = limiter.check(f"ip:{ip}")
    if not decision.allowed:
        logger.warning("Rate limit exceeded for IP %s", ip)
        raise RateLimitedError(retry_after=decision.retry_after, limit=limiter.max_requests)
    return decision
