from __future__ import annotations

from dataclasses import dataclass

import bcrypt

from marketplace.core.ports.outbound.credentials import CredentialVerifier


@dataclass(frozen=True)
class BcryptCredentialVerifier(CredentialVerifier):
    """Checks a username/password pair against two bcrypt hashes."""

    username_hash: str
    password_hash: str

    def verify(self, username: str, password: str) -> bool:
        # both checks always run so timing does not reveal which one failed
        user_ok = _checkpw(username, self.username_hash)
        pass_ok = _checkpw(password, self.password_hash)
        return user_ok and pass_ok


def hash_secret(value: str, rounds: int = 12) -> str:
    return bcrypt.hashpw(value.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode(
        "ascii"
    )


def _checkpw(value: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(value.encode("utf-8"), hashed.encode("ascii"))
    except ValueError:
        # malformed hash, or a value past bcrypt's 72-byte limit
        return False
