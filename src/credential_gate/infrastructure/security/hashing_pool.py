"""Bounded thread offload for CPU-bound password hashing."""

from __future__ import annotations

import asyncio
from typing import Final

from credential_gate.application.ports.password_hasher_port import (
    AsyncPasswordHasherPort,
    PasswordHasherPort,
)

DEFAULT_HASH_MAX_CONCURRENCY: Final[int] = 4


class HashingPool(AsyncPasswordHasherPort):
    """Run hasher calls in worker threads with at most N running at once."""

    def __init__(
        self,
        hasher: PasswordHasherPort,
        *,
        max_concurrency: int = DEFAULT_HASH_MAX_CONCURRENCY,
    ) -> None:
        if max_concurrency <= 0:
            raise ValueError("max_concurrency must be positive")
        self._hasher = hasher
        self._max_concurrency = max_concurrency
        self._slots = asyncio.Semaphore(max_concurrency)

    @property
    def max_concurrency(self) -> int:
        return self._max_concurrency

    async def hash_password(self, password: str) -> str:
        async with self._slots:
            return await asyncio.to_thread(self._hasher.hash_password, password)

    async def verify_password(self, *, password: str, password_hash: str) -> bool:
        async with self._slots:
            return await asyncio.to_thread(
                self._hasher.verify_password,
                password=password,
                password_hash=password_hash,
            )
