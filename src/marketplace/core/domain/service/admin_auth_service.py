from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from returns.result import Failure, Result, Success

from marketplace.core.domain.model.errors import (
    AuthError,
    Forbidden,
    InvalidCredentials,
    MissingToken,
)
from marketplace.core.ports.inbound.admin_auth import (
    AdminAuthUseCase,
    AdminSession,
    LoginCommand,
)
from marketplace.core.ports.outbound.credentials import CredentialVerifier
from marketplace.core.ports.outbound.tokens import ADMIN_ROLE, AdminClaims, TokenIssuer

logger = logging.getLogger(__name__)

_BEARER = re.compile(r"^Bearer\s+(.+)$", re.IGNORECASE)


@dataclass(frozen=True)
class AdminAuthDeps:
    credentials: CredentialVerifier
    tokens: TokenIssuer


@dataclass(frozen=True)
class AdminAuthService(AdminAuthUseCase):
    deps: AdminAuthDeps

    def login(self, command: LoginCommand) -> Result[AdminSession, AuthError]:
        if not self.deps.credentials.verify(command.username, command.password):
            logger.warning("admin login rejected")
            return Failure(InvalidCredentials(message="Invalid credentials"))

        token = self.deps.tokens.issue(ADMIN_ROLE)
        logger.info("admin login accepted")
        return Success(AdminSession(token=token, expires_in=self.deps.tokens.ttl_seconds))

    def authorize(self, authorization: str | None) -> Result[AdminClaims, AuthError]:
        match = _BEARER.match((authorization or "").strip())
        if match is None:
            return Failure(MissingToken(message="Missing Bearer token"))

        return self.deps.tokens.verify(match.group(1).strip()).bind(_require_admin)


def _require_admin(claims: AdminClaims) -> Result[AdminClaims, AuthError]:
    if claims.role != ADMIN_ROLE:
        return Failure(Forbidden(message="Forbidden"))
    return Success(claims)
