"""
Sliding-window rate limiting for outgoing API calls.
"""
from __future__ import annotations

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Mapping, Optional

from .exceptions import APIRateLimitError

LOGGER = logging.getLogger(__name__)

WINDOW_SECONDS = 60.0

ENDPOINT_CALLS_PER_MINUTE: Dict[str, int] = {
    "getMatch": 5,
    "getGroup": 3,
    "getTeam": 5,
    "getPlayer": 50,
}


@dataclass
class RateLimitDecision:
    allowed: bool
    reason: str | None = None


class SlidingWindowRateLimiter:
    """
    Admit at most ``max_calls`` within any trailing ``window_seconds``.
    """

    def __init__(
        self,
        max_calls: int,
        window_seconds: float = WINDOW_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_calls = max_calls
        self.window_seconds = window_seconds
        self._clock = clock
        self._calls: Deque[float] = deque()

    def _evict(self, now: float) -> None:
        cutoff = now - self.window_seconds
        while self._calls and self._calls[0] < cutoff:
            self._calls.popleft()

    def check(self, now: Optional[float] = None) -> RateLimitDecision:
        current = self._clock() if now is None else now
        self._evict(current)
        if len(self._calls) >= self.max_calls:
            return RateLimitDecision(
                False, reason=f"{self.max_calls} calls per {self.window_seconds:g}s"
            )
        return RateLimitDecision(True)

    def record(self, now: Optional[float] = None) -> None:
        self._calls.append(self._clock() if now is None else now)

    def try_acquire(self, now: Optional[float] = None) -> bool:
        current = self._clock() if now is None else now
        if not self.check(current).allowed:
            return False
        self.record(current)
        return True

    def __len__(self) -> int:
        return len(self._calls)


class RateLimitPolicy:
    """
    Global and per-endpoint limits plus a fixed delay after every admitted call.

    With ``bypass`` set no limits are enforced and no delay is applied, which
    is what offline runs and tests rely on.
    """

    def __init__(
        self,
        *,
        calls_per_minute: int = 60,
        endpoint_limits: Optional[Mapping[str, int]] = None,
        throttle_delay: float = 0.0,
        window_seconds: float = WINDOW_SECONDS,
        bypass: bool = False,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.bypass = bypass
        self.throttle_delay = throttle_delay
        self._sleep = sleep
        self._lock = threading.Lock()
        self.global_limiter = SlidingWindowRateLimiter(
            calls_per_minute, window_seconds, clock=clock
        )
        limits = ENDPOINT_CALLS_PER_MINUTE if endpoint_limits is None else endpoint_limits
        self.endpoint_limiters: Dict[str, SlidingWindowRateLimiter] = {
            endpoint: SlidingWindowRateLimiter(max_calls, window_seconds, clock=clock)
            for endpoint, max_calls in limits.items()
        }

    def admit(self, endpoint: str) -> None:
        """
        Claim a slot or raise ``APIRateLimitError``, then wait the throttle delay.

        Refused calls return immediately without waiting.
        """
        if self.bypass:
            return
        with self._lock:
            decision = self.global_limiter.check()
            if not decision.allowed:
                LOGGER.warning("Global rate limit reached before calling %s", endpoint)
                raise APIRateLimitError(
                    f"Rate limit exceeded ({decision.reason}). Please try again in a moment.",
                    endpoint=endpoint,
                )
            self.global_limiter.record()
            limiter = self.endpoint_limiters.get(endpoint)
            if limiter is not None:
                decision = limiter.check()
                if not decision.allowed:
                    LOGGER.warning("Endpoint rate limit reached for %s", endpoint)
                    raise APIRateLimitError(
                        f"Too many requests to {endpoint} ({decision.reason}). "
                        "Please try again in a moment.",
                        endpoint=endpoint,
                    )
                limiter.record()
        if self.throttle_delay > 0:
            self._sleep(self.throttle_delay)
