"""Ports for password hashing and verification."""

from __future__ import annotations

from typing import Protocol


class PasswordHashingError(RuntimeError):
    """Raised when a password digest cannot be produced."""


class PasswordHasherPort(Protocol):
    """Password hashing/verification contract."""

    def hash_password(self, password: str) -> str:
        """Hash plaintext password for storage."""

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        """Verify plaintext password against stored hash."""


class AsyncPasswordHasherPort(Protocol):
    """Hashing contract for services running on the event loop."""

    async def hash_password(self, password: str) -> str:
        """Hash plaintext password without blocking the event loop."""

    async def verify_password(self, *, password: str, password_hash: str) -> bool:
        """Verify plaintext password without blocking the event loop."""
