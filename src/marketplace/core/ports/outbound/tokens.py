from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from returns.result import Result

from marketplace.core.domain.model.errors import AuthError

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class AdminClaims:
    role: str
    expires_at: int


class TokenIssuer(Protocol):
    @property
    def ttl_seconds(self) -> int: ...

    def issue(self, role: str) -> str: ...

    def verify(self, token: str) -> Result[AdminClaims, AuthError]:
        """Check signature and expiry. Role is checked by the caller."""
        ...
