from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from returns.result import Result

from marketplace.core.domain.model.errors import AuthError
from marketplace.core.ports.outbound.tokens import AdminClaims


@dataclass(frozen=True)
class LoginCommand:
    username: str
    password: str


@dataclass(frozen=True)
class AdminSession:
    token: str
    expires_in: int


class AdminAuthUseCase(Protocol):
    def login(self, command: LoginCommand) -> Result[AdminSession, AuthError]: ...

    def authorize(
        self, authorization: str | None
    ) -> Result[AdminClaims, AuthError]: ...
