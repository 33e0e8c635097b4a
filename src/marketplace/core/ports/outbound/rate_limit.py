from __future__ import annotations

from typing import Protocol

from returns.result import Result

from marketplace.core.domain.model.errors import RateLimited


class RateLimiter(Protocol):
    def hit(self, key: str) -> Result[None, RateLimited]:
        """Count one request for ``key``; fail once the window budget is spent."""
        ...
