"""FastAPI router exposing JSON registration and login endpoints."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from credential_gate.application.dto.auth_models import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    RejectionResponse,
)
from credential_gate.application.services.auth_service import AuthOutcome, AuthService
from credential_gate.application.services.registration_service import (
    RegistrationOutcome,
    RegistrationService,
)
from credential_gate.domain.credential_rules import RejectionKind


def build_auth_router(
    *,
    registration_service: RegistrationService,
    auth_service: AuthService,
) -> APIRouter:
    """Build router exposing account creation and credential verification."""

    router = APIRouter(prefix="/api", tags=["auth"])

    @router.post(
        "/accounts",
        status_code=201,
        response_model=RegisterResponse,
        responses={409: {"model": RejectionResponse}, 422: {"model": RejectionResponse}},
    )
    async def register(payload: RegisterRequest) -> RegisterResponse | JSONResponse:
        result = await registration_service.register(
            email=payload.email,
            username=payload.username,
            password=payload.password,
        )
        if result.outcome is RegistrationOutcome.REGISTERED:
            assert result.account_id is not None
            return RegisterResponse(account_id=result.account_id, username=payload.username)

        if result.outcome is RegistrationOutcome.FAILED:
            status_code = 503
        elif result.rejection is RejectionKind.DUPLICATE_USERNAME:
            status_code = 409
        else:
            status_code = 422
        body = RejectionResponse(
            outcome=result.outcome.value,
            rejection=result.rejection.value if result.rejection is not None else None,
            reason=result.reason or "",
        )
        return JSONResponse(status_code=status_code, content=body.model_dump())

    @router.post(
        "/login",
        response_model=LoginResponse,
        responses={401: {"model": RejectionResponse}, 503: {"model": RejectionResponse}},
    )
    async def login(payload: LoginRequest) -> LoginResponse | JSONResponse:
        result = await auth_service.authenticate(
            username=payload.username,
            password=payload.password,
        )
        if result.outcome is AuthOutcome.SUCCESS:
            assert result.account_id is not None and result.username is not None
            return LoginResponse(ok=True, account_id=result.account_id, username=result.username)

        status_code = 503 if result.outcome is AuthOutcome.FAILED else 401
        body = RejectionResponse(outcome=result.outcome.value, reason=result.reason or "")
        return JSONResponse(status_code=status_code, content=body.model_dump())

    return router
