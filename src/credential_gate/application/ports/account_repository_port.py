"""Port for account persistence used by registration and login services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID


class DuplicateUsernameError(ValueError):
    """Raised when the username key is already taken at the persistence boundary."""

    def __init__(self, *, username: str) -> None:
        super().__init__(f"username already exists: {username}")
        self.username = username


class StorageUnavailableError(RuntimeError):
    """Raised when the account store cannot be reached or fails transiently."""


@dataclass(frozen=True)
class AccountRecord:
    """Account persistence model."""

    account_id: UUID
    username: str
    email: str
    password_hash: str
    created_at: datetime


@dataclass(frozen=True)
class AccountCreateInput:
    """Payload for inserting one account row."""

    username: str
    email: str
    password_hash: str


class AccountRepositoryPort(Protocol):
    """Account repository contract keyed by username."""

    async def exists_by_username(self, *, username: str) -> bool:
        """Return whether an account already owns the username key."""

    async def create_account(self, payload: AccountCreateInput) -> UUID:
        """Insert one account and return its id.

        Raises DuplicateUsernameError or StorageUnavailableError.
        """

    async def get_password_hash(self, *, username: str) -> str | None:
        """Return the stored hash for username, or None when not found."""

    async def get_by_username(self, *, username: str) -> AccountRecord | None:
        """Return the account for username, or None when not found."""
