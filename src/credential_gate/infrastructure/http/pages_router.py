"""FastAPI router for server-rendered registration and login pages."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, Response
from fastapi.templating import Jinja2Templates

from credential_gate.application.services.auth_service import AuthOutcome, AuthService
from credential_gate.application.services.registration_service import (
    RegistrationOutcome,
    RegistrationService,
)

_TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"


def build_pages_router(
    *,
    registration_service: RegistrationService,
    auth_service: AuthService,
) -> APIRouter:
    """Build router exposing Jinja2 server-rendered account pages."""

    templates = Jinja2Templates(directory=str(_TEMPLATE_DIR))
    router = APIRouter(tags=["pages"])

    @router.get("/", response_class=HTMLResponse)
    async def render_index(request: Request) -> Response:
        return templates.TemplateResponse(request=request, name="index.html", context={})

    @router.get("/register", response_class=HTMLResponse)
    async def render_register_form(request: Request) -> Response:
        return templates.TemplateResponse(request=request, name="register.html", context={})

    @router.post("/register", response_class=HTMLResponse)
    async def submit_register_form(
        request: Request,
        email: Annotated[str, Form()] = "",
        username: Annotated[str, Form()] = "",
        password: Annotated[str, Form()] = "",
    ) -> Response:
        result = await registration_service.register(
            email=email,
            username=username,
            password=password,
        )
        if result.outcome is RegistrationOutcome.REGISTERED:
            return templates.TemplateResponse(
                request=request,
                name="registered.html",
                context={"username": username},
            )
        status_code = 503 if result.outcome is RegistrationOutcome.FAILED else 400
        return templates.TemplateResponse(
            request=request,
            name="denied.html",
            context={"reason": result.reason},
            status_code=status_code,
        )

    @router.get("/login", response_class=HTMLResponse)
    async def render_login_form(request: Request) -> Response:
        return templates.TemplateResponse(request=request, name="login.html", context={})

    @router.post("/login", response_class=HTMLResponse)
    async def submit_login_form(
        request: Request,
        username: Annotated[str, Form()] = "",
        password: Annotated[str, Form()] = "",
    ) -> Response:
        result = await auth_service.authenticate(username=username, password=password)
        if result.outcome is AuthOutcome.SUCCESS:
            return templates.TemplateResponse(
                request=request,
                name="welcome.html",
                context={"username": result.username},
            )
        status_code = 503 if result.outcome is AuthOutcome.FAILED else 401
        return templates.TemplateResponse(
            request=request,
            name="denied.html",
            context={"reason": result.reason},
            status_code=status_code,
        )

    return router
