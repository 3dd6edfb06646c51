"""Application service for account registration."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID

from credential_gate.application.ports.account_repository_port import (
    AccountCreateInput,
    AccountRepositoryPort,
    DuplicateUsernameError,
    StorageUnavailableError,
)
from credential_gate.application.ports.password_hasher_port import (
    AsyncPasswordHasherPort,
    PasswordHashingError,
)
from credential_gate.domain.credential_rules import (
    DEFAULT_POLICY,
    CredentialFields,
    CredentialPolicy,
    RejectionKind,
    ValidationKind,
    validate_credentials,
)
from credential_gate.domain.registration_stage import RegistrationStage
from credential_gate.domain.transitions import assert_transition

DUPLICATE_USERNAME_REASON = "Username already exists"
REGISTRATION_FAILED_REASON = "Registration could not be completed, please try again later"
logger = logging.getLogger(__name__)


class RegistrationOutcome(StrEnum):
    """Supported registration outcomes."""

    REGISTERED = "registered"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(frozen=True)
class RegistrationResult:
    """Registration result model rendered by presentation adapters."""

    outcome: RegistrationOutcome
    stage: RegistrationStage
    account_id: UUID | None = None
    rejection: RejectionKind | None = None
    reason: str | None = None


class _Attempt:
    """Stage tracker for one registration attempt."""

    def __init__(self, *, username: str) -> None:
        self.username = username
        self.stage = RegistrationStage.RECEIVED

    def advance(self, to_stage: RegistrationStage) -> None:
        assert_transition(self.stage, to_stage)
        logger.debug(
            "registration_stage username=%s from=%s to=%s",
            self.username,
            self.stage.value,
            to_stage.value,
        )
        self.stage = to_stage


class RegistrationService:
    """Validate, de-duplicate, hash, and persist new accounts."""

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

    async def register(self, *, email: str, username: str, password: str) -> RegistrationResult:
        """Run one registration attempt to a terminal stage.

        Rejections are user-correctable and returned as values. Storage and
        hashing failures are logged and returned as ``FAILED``.
        """

        attempt = _Attempt(username=username)

        validation = validate_credentials(
            ValidationKind.REGISTRATION,
            CredentialFields(username=username, password=password, email=email),
            self._policy,
        )
        if not validation.accepted:
            assert validation.rejection is not None
            return self._reject(attempt, validation.rejection, validation.reason or "")
        attempt.advance(RegistrationStage.VALIDATED)

        try:
            already_exists = await self._accounts.exists_by_username(username=username)
        except StorageUnavailableError:
            return self._fail(attempt, "existence check")
        if already_exists:
            return self._reject(
                attempt,
                RejectionKind.DUPLICATE_USERNAME,
                DUPLICATE_USERNAME_REASON,
            )
        attempt.advance(RegistrationStage.UNIQUENESS_CHECKED)

        try:
            password_hash = await self._password_hasher.hash_password(password)
        except PasswordHashingError:
            return self._fail(attempt, "password hashing")
        attempt.advance(RegistrationStage.HASHED)

        try:
            account_id = await self._accounts.create_account(
                AccountCreateInput(username=username, email=email, password_hash=password_hash)
            )
        except DuplicateUsernameError:
            # Lost the race against a concurrent registration of the same key.
            return self._reject(
                attempt,
                RejectionKind.DUPLICATE_USERNAME,
                DUPLICATE_USERNAME_REASON,
            )
        except StorageUnavailableError:
            return self._fail(attempt, "account insert")
        attempt.advance(RegistrationStage.PERSISTED)

        logger.info("registration_persisted username=%s account_id=%s", username, account_id)
        return RegistrationResult(
            outcome=RegistrationOutcome.REGISTERED,
            stage=attempt.stage,
            account_id=account_id,
        )

    def _reject(
        self,
        attempt: _Attempt,
        rejection: RejectionKind,
        reason: str,
    ) -> RegistrationResult:
        failed_at = attempt.stage
        attempt.advance(RegistrationStage.REJECTED)
        logger.info(
            "registration_rejected username=%s stage=%s rejection=%s",
            attempt.username,
            failed_at.value,
            rejection.value,
        )
        return RegistrationResult(
            outcome=RegistrationOutcome.REJECTED,
            stage=attempt.stage,
            rejection=rejection,
            reason=reason,
        )

    def _fail(self, attempt: _Attempt, step: str) -> RegistrationResult:
        failed_at = attempt.stage
        attempt.advance(RegistrationStage.FAILED)
        logger.exception(
            "registration_failed username=%s stage=%s step=%s",
            attempt.username,
            failed_at.value,
            step,
        )
        return RegistrationResult(
            outcome=RegistrationOutcome.FAILED,
            stage=attempt.stage,
            reason=REGISTRATION_FAILED_REASON,
        )
