from __future__ import annotations

import logging
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from credential_gate.application.ports.account_repository_port import (
    AccountCreateInput,
    AccountRecord,
    StorageUnavailableError,
)
from credential_gate.application.services.auth_service import (
    INVALID_CREDENTIALS_REASON,
    LOGIN_FAILED_REASON,
    AuthOutcome,
    AuthService,
)

STORED_HASH = "hashed::Abcde1!"
ACCOUNT_ID = uuid4()


class FakeAccountRepository:
    def __init__(self, *, password_hash: str | None, fail: bool = False) -> None:
        self.password_hash = password_hash
        self.fail = fail
        self.lookups: list[str] = []

    async def exists_by_username(self, *, username: str) -> bool:
        return self.password_hash is not None

    async def create_account(self, payload: AccountCreateInput) -> UUID:
        raise NotImplementedError

    async def get_password_hash(self, *, username: str) -> str | None:
        self.lookups.append(username)
        if self.fail:
            raise StorageUnavailableError("database unreachable")
        return self.password_hash

    async def get_by_username(self, *, username: str) -> AccountRecord | None:
        if self.password_hash is None:
            return None
        return AccountRecord(
            account_id=ACCOUNT_ID,
            username="Alice_01",
            email="alice@example.org",
            password_hash=self.password_hash,
            created_at=datetime.now(tz=UTC),
        )


class FakeAsyncHasher:
    def __init__(self) -> None:
        self.verify_calls: list[tuple[str, str]] = []

    async def hash_password(self, password: str) -> str:
        return f"hashed::{password}"

    async def verify_password(self, *, password: str, password_hash: str) -> bool:
        self.verify_calls.append((password, password_hash))
        return password_hash == f"hashed::{password}"


@pytest.mark.asyncio
async def test_authenticate_success_returns_stored_account() -> None:
    accounts = FakeAccountRepository(password_hash=STORED_HASH)
    hasher = FakeAsyncHasher()
    service = AuthService(accounts=accounts, password_hasher=hasher)

    result = await service.authenticate(username="alice_01", password="Abcde1!")

    assert result.outcome is AuthOutcome.SUCCESS
    assert result.username == "Alice_01"
    assert result.account_id == ACCOUNT_ID
    assert result.reason is None
    assert hasher.verify_calls == [("Abcde1!", STORED_HASH)]


@pytest.mark.asyncio
async def test_wrong_password_and_unknown_user_are_indistinguishable() -> None:
    wrong_password = await AuthService(
        accounts=FakeAccountRepository(password_hash=STORED_HASH),
        password_hasher=FakeAsyncHasher(),
    ).authenticate(username="alice_01", password="Wrong1!x")
    unknown_user = await AuthService(
        accounts=FakeAccountRepository(password_hash=None),
        password_hasher=FakeAsyncHasher(),
    ).authenticate(username="nobody_01", password="Abcde1!")

    assert wrong_password.outcome is AuthOutcome.INVALID_CREDENTIALS
    assert wrong_password == unknown_user
    assert wrong_password.reason == INVALID_CREDENTIALS_REASON
    assert wrong_password.username is None


@pytest.mark.asyncio
async def test_unknown_user_skips_verification() -> None:
    hasher = FakeAsyncHasher()
    service = AuthService(
        accounts=FakeAccountRepository(password_hash=None),
        password_hasher=hasher,
    )

    await service.authenticate(username="nobody_01", password="Abcde1!")

    assert hasher.verify_calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("username", "password"),
    [("abc", "Abcde1!"), ("alice_01", "Ab 1!xy"), ("alice$01", "Abcde1!"), ("alice_01", "abc")],
)
async def test_malformed_login_input_is_neutral_and_never_reaches_storage(
    username: str,
    password: str,
) -> None:
    accounts = FakeAccountRepository(password_hash=STORED_HASH)
    hasher = FakeAsyncHasher()
    service = AuthService(accounts=accounts, password_hasher=hasher)

    result = await service.authenticate(username=username, password=password)

    assert result.outcome is AuthOutcome.INVALID_CREDENTIALS
    assert result.reason == INVALID_CREDENTIALS_REASON
    assert accounts.lookups == []
    assert hasher.verify_calls == []


@pytest.mark.asyncio
async def test_storage_failure_is_reported_as_failed(caplog: pytest.LogCaptureFixture) -> None:
    service = AuthService(
        accounts=FakeAccountRepository(password_hash=STORED_HASH, fail=True),
        password_hasher=FakeAsyncHasher(),
    )

    with caplog.at_level(logging.ERROR):
        result = await service.authenticate(username="alice_01", password="Abcde1!")

    assert result.outcome is AuthOutcome.FAILED
    assert result.reason == LOGIN_FAILED_REASON
    assert "login_failed" in caplog.text
    assert "Abcde1!" not in caplog.text
    assert STORED_HASH not in caplog.text
