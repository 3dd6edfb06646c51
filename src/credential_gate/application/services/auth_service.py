"""Application authentication service for credential verification."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID

from credential_gate.application.ports.account_repository_port import (
    AccountRepositoryPort,
    StorageUnavailableError,
)
from credential_gate.application.ports.password_hasher_port import AsyncPasswordHasherPort
from credential_gate.domain.credential_rules import (
    DEFAULT_POLICY,
    CredentialFields,
    CredentialPolicy,
    ValidationKind,
    validate_credentials,
)

INVALID_CREDENTIALS_REASON = "Invalid username or password"
LOGIN_FAILED_REASON = "Login could not be completed, please try again later"
logger = logging.getLogger(__name__)


class AuthOutcome(StrEnum):
    """Supported authentication outcomes."""

    SUCCESS = "success"
    INVALID_CREDENTIALS = "invalid_credentials"
    FAILED = "failed"


@dataclass(frozen=True)
class AuthResult:
    """Authentication result model."""

    outcome: AuthOutcome
    username: str | None = None
    account_id: UUID | None = None
    reason: str | None = None


class AuthService:
    """Authenticate login attempts against stored password hashes."""

    def __init__(
        self,
        *,
        accounts: AccountRepositoryPort,
        password_hasher: AsyncPasswordHasherPort,
        policy: CredentialPolicy = DEFAULT_POLICY,
    ) -> None:
        self._accounts = accounts
        self._password_hasher = password_hasher
        self._policy = policy

    async def authenticate(self, *, username: str, password: str) -> AuthResult:
        """Authenticate credentials with one neutral rejection for every mismatch.

        Malformed input, unknown usernames, and wrong passwords are all reported
        as ``INVALID_CREDENTIALS`` with the same reason.
        """

        validation = validate_credentials(
            ValidationKind.LOGIN,
            CredentialFields(username=username, password=password),
            self._policy,
        )
        if not validation.accepted:
            logger.info(
                "login_rejected username=%s reason=malformed rejection=%s",
                username,
                validation.rejection,
            )
            return _invalid_credentials()

        try:
            password_hash = await self._accounts.get_password_hash(username=username)
        except StorageUnavailableError:
            logger.exception("login_failed username=%s step=hash_lookup", username)
            return AuthResult(outcome=AuthOutcome.FAILED, reason=LOGIN_FAILED_REASON)

        if password_hash is None:
            logger.info("login_rejected username=%s reason=unknown_user", username)
            return _invalid_credentials()

        is_valid = await self._password_hasher.verify_password(
            password=password,
            password_hash=password_hash,
        )
        if not is_valid:
            logger.info("login_rejected username=%s reason=password_mismatch", username)
            return _invalid_credentials()

        try:
            account = await self._accounts.get_by_username(username=username)
        except StorageUnavailableError:
            logger.exception("login_failed username=%s step=account_lookup", username)
            return AuthResult(outcome=AuthOutcome.FAILED, reason=LOGIN_FAILED_REASON)
        if account is None:
            # Removed between hash lookup and account lookup.
            return _invalid_credentials()

        logger.info("login_succeeded account_id=%s", account.account_id)
        return AuthResult(
            outcome=AuthOutcome.SUCCESS,
            username=account.username,
            account_id=account.account_id,
        )


def _invalid_credentials() -> AuthResult:
    return AuthResult(outcome=AuthOutcome.INVALID_CREDENTIALS, reason=INVALID_CREDENTIALS_REASON)
