from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass, field
from typing import Callable

from returns.result import Failure, Result, Success

from marketplace.core.domain.model.errors import RateLimited
from marketplace.core.ports.outbound.rate_limit import RateLimiter


@dataclass
class FixedWindowRateLimiter(RateLimiter):
    """At most ``limit`` hits per key in each ``window_seconds`` window."""

    window_seconds: float
    limit: int
    clock: Callable[[], float] = time.monotonic
    _windows: dict[str, tuple[float, int]] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def hit(self, key: str) -> Result[None, RateLimited]:
        now = self.clock()
        with self._lock:
            self._evict(now)
            started, count = self._windows.get(key, (now, 0))
            if count >= self.limit:
                retry_after = max(1, math.ceil(started + self.window_seconds - now))
                return Failure(
                    RateLimited(message="Too many requests", retry_after=retry_after)
                )
            self._windows[key] = (started, count + 1)
        return Success(None)

    def _evict(self, now: float) -> None:
        expired = [
            k for k, (started, _) in self._windows.items()
            if now - started >= self.window_seconds
        ]
        for k in expired:
            del self._windows[k]
