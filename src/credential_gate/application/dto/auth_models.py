"""Pydantic models for the JSON registration and login endpoints."""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict


class StrictModel(BaseModel):
    """Base model with strict unknown-field rejection."""

    model_config = ConfigDict(extra="forbid")


class RegisterRequest(StrictModel):
    """Registration payload; field rules are applied by the validator, not here."""

    email: str
    username: str
    password: str


class RegisterResponse(StrictModel):
    """Successful registration response."""

    account_id: UUID
    username: str


class LoginRequest(StrictModel):
    """Login payload."""

    username: str
    password: str


class LoginResponse(StrictModel):
    """Successful login response."""

    ok: bool
    account_id: UUID
    username: str


class RejectionResponse(StrictModel):
    """Body returned for rejected or failed requests."""

    outcome: str
    rejection: str | None = None
    reason: str
