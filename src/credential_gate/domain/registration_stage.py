"""Registration attempt stages."""

from __future__ import annotations

from enum import StrEnum


class RegistrationStage(StrEnum):
    """Stages one registration attempt moves through."""

    RECEIVED = "RECEIVED"
    VALIDATED = "VALIDATED"
    UNIQUENESS_CHECKED = "UNIQUENESS_CHECKED"
    HASHED = "HASHED"
    PERSISTED = "PERSISTED"
    REJECTED = "REJECTED"
    FAILED = "FAILED"


TERMINAL_STAGES = frozenset(
    {RegistrationStage.PERSISTED, RegistrationStage.REJECTED, RegistrationStage.FAILED}
)
