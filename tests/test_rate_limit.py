from __future__ import annotations

from returns.result import Success

from marketplace.adapters.outbound.fixed_window_rate_limit import FixedWindowRateLimiter
from marketplace.core.domain.model.errors import RateLimited


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_budget_is_per_key_and_resets_with_window():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(window_seconds=60, limit=2, clock=clock)

    assert isinstance(limiter.hit("a"), Success)
    assert isinstance(limiter.hit("a"), Success)
    blocked = limiter.hit("a").failure()
    assert isinstance(blocked, RateLimited)
    assert blocked.retry_after == 60
    assert isinstance(limiter.hit("b"), Success)

    clock.now += 45
    assert limiter.hit("a").failure().retry_after == 15

    clock.now += 15
    assert isinstance(limiter.hit("a"), Success)
