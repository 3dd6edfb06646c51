"""Bcrypt password hasher adapter."""

from __future__ import annotations

from typing import Final

import bcrypt

from credential_gate.application.ports.password_hasher_port import (
    PasswordHasherPort,
    PasswordHashingError,
)

DEFAULT_BCRYPT_ROUNDS: Final[int] = 12
MIN_BCRYPT_ROUNDS: Final[int] = 4
MAX_BCRYPT_ROUNDS: Final[int] = 31


class BcryptPasswordHasher(PasswordHasherPort):
    """Password hashing adapter using bcrypt with a fixed cost factor.

    Each call to ``hash_password`` draws a fresh salt. Raising ``rounds`` by one
    doubles the work per hash.
    """

    def __init__(self, *, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> None:
        if not MIN_BCRYPT_ROUNDS <= rounds <= MAX_BCRYPT_ROUNDS:
            raise ValueError(
                f"bcrypt rounds must be between {MIN_BCRYPT_ROUNDS} and {MAX_BCRYPT_ROUNDS}"
            )
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash_password(self, password: str) -> str:
        encoded = password.encode("utf-8")
        try:
            return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self._rounds)).decode("utf-8")
        except (ValueError, MemoryError) as exc:
            raise PasswordHashingError("password hashing failed") from exc

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            return False
