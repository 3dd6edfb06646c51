"""SQLAlchemy adapter for account persistence."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import cast
from uuid import UUID, uuid4

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from credential_gate.application.ports.account_repository_port import (
    AccountCreateInput,
    AccountRecord,
    AccountRepositoryPort,
    DuplicateUsernameError,
    StorageUnavailableError,
)
from credential_gate.domain.credentials import normalize_user_email, normalize_username
from credential_gate.infrastructure.db.metadata import accounts

logger = logging.getLogger(__name__)


def _is_duplicate_username_error(error: IntegrityError) -> bool:
    message = str(error.orig).lower()
    return "username_normalized" in message


class SqlAlchemyAccountRepository(AccountRepositoryPort):
    """Account repository backed by SQLAlchemy async sessions.

    Uniqueness is enforced by ``uq_accounts_username_normalized``; the
    existence check is advisory and the insert is authoritative.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def exists_by_username(self, *, username: str) -> bool:
        """Return whether an account already owns the username key."""

        statement = (
            sa.select(accounts.c.id)
            .where(accounts.c.username_normalized == normalize_username(username=username))
            .limit(1)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(statement)
        except (SQLAlchemyError, OSError) as exc:
            raise StorageUnavailableError("account existence check failed") from exc
        return result.first() is not None

    async def create_account(self, payload: AccountCreateInput) -> UUID:
        """Insert one account row and return its generated id."""

        account_id = uuid4()
        statement = sa.insert(accounts).values(
            id=account_id,
            username=payload.username,
            username_normalized=normalize_username(username=payload.username),
            email=normalize_user_email(email=payload.email),
            password_hash=payload.password_hash,
        )
        async with self._session_factory() as session:
            try:
                await session.execute(statement)
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                if _is_duplicate_username_error(exc):
                    raise DuplicateUsernameError(username=payload.username) from exc
                raise StorageUnavailableError("account insert failed") from exc
            except (SQLAlchemyError, OSError) as exc:
                await session.rollback()
                raise StorageUnavailableError("account insert failed") from exc

        logger.info("account_inserted account_id=%s", account_id)
        return account_id

    async def get_password_hash(self, *, username: str) -> str | None:
        """Return the stored hash for username, or None when not found."""

        statement = (
            sa.select(accounts.c.password_hash)
            .where(accounts.c.username_normalized == normalize_username(username=username))
            .limit(1)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(statement)
        except (SQLAlchemyError, OSError) as exc:
            raise StorageUnavailableError("password hash lookup failed") from exc
        password_hash = result.scalar_one_or_none()
        if password_hash is None:
            return None
        return cast(str, password_hash)

    async def get_by_username(self, *, username: str) -> AccountRecord | None:
        """Return the account for username, or None when not found."""

        statement = (
            sa.select(
                accounts.c.id,
                accounts.c.username,
                accounts.c.email,
                accounts.c.password_hash,
                accounts.c.created_at,
            )
            .where(accounts.c.username_normalized == normalize_username(username=username))
            .limit(1)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(statement)
        except (SQLAlchemyError, OSError) as exc:
            raise StorageUnavailableError("account lookup failed") from exc

        row = result.mappings().first()
        if row is None:
            return None
        return _to_account_record(row)


def _to_account_record(row: sa.RowMapping) -> AccountRecord:
    raw_account_id = row["id"]
    account_id = (
        raw_account_id if isinstance(raw_account_id, UUID) else UUID(str(raw_account_id))
    )
    return AccountRecord(
        account_id=account_id,
        username=cast(str, row["username"]),
        email=cast(str, row["email"]),
        password_hash=cast(str, row["password_hash"]),
        created_at=cast(datetime, row["created_at"]),
    )
