"""Deterministic transition guards for registration stages."""

from __future__ import annotations

from typing import Final

from credential_gate.domain.registration_stage import RegistrationStage


class InvalidRegistrationTransitionError(ValueError):
    """Raised when an attempted registration stage transition is not allowed."""


_ALLOWED_TRANSITIONS: Final[dict[RegistrationStage, frozenset[RegistrationStage]]] = {
    RegistrationStage.RECEIVED: frozenset(
        {RegistrationStage.VALIDATED, RegistrationStage.REJECTED}
    ),
    RegistrationStage.VALIDATED: frozenset(
        {
            RegistrationStage.UNIQUENESS_CHECKED,
            RegistrationStage.REJECTED,
            RegistrationStage.FAILED,
        }
    ),
    RegistrationStage.UNIQUENESS_CHECKED: frozenset(
        {RegistrationStage.HASHED, RegistrationStage.FAILED}
    ),
    # A unique-constraint violation at insert is reported as a rejection.
    RegistrationStage.HASHED: frozenset(
        {
            RegistrationStage.PERSISTED,
            RegistrationStage.REJECTED,
            RegistrationStage.FAILED,
        }
    ),
    RegistrationStage.PERSISTED: frozenset(),
    RegistrationStage.REJECTED: frozenset(),
    RegistrationStage.FAILED: frozenset(),
}


def can_transition(from_stage: RegistrationStage, to_stage: RegistrationStage) -> bool:
    """Return whether the transition is valid for the registration state machine."""

    allowed_targets = _ALLOWED_TRANSITIONS[from_stage]
    return to_stage in allowed_targets


def assert_transition(from_stage: RegistrationStage, to_stage: RegistrationStage) -> None:
    """Assert a transition is allowed, else raise deterministic domain error."""

    if not can_transition(from_stage, to_stage):
        raise InvalidRegistrationTransitionError(
            f"Invalid registration stage transition: {from_stage.value} -> {to_stage.value}"
        )
