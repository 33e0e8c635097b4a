from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

import jwt
from returns.result import Failure, Result, Success

from marketplace.core.domain.model.errors import AuthError, InvalidToken
from marketplace.core.ports.outbound.tokens import AdminClaims, TokenIssuer

ALGORITHM = "HS256"


@dataclass(frozen=True)
class JwtTokenIssuer(TokenIssuer):
    secret: str
    ttl_seconds: int = 2 * 60 * 60
    clock: Callable[[], float] = time.time

    def issue(self, role: str) -> str:
        now = int(self.clock())
        claims = {"role": role, "iat": now, "exp": now + self.ttl_seconds}
        return jwt.encode(claims, self.secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> Result[AdminClaims, AuthError]:
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp"]},
            )
        except jwt.InvalidTokenError:
            return Failure(InvalidToken(message="Invalid or expired token"))

        return Success(
            AdminClaims(role=str(payload.get("role") or ""), expires_at=int(payload["exp"]))
        )
