"""credential-api entrypoint and HTTP route wiring."""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI

from credential_gate.application.services.auth_service import AuthService
from credential_gate.application.services.registration_service import RegistrationService
from credential_gate.config.settings import Settings, load_settings
from credential_gate.infrastructure.db.account_repository import SqlAlchemyAccountRepository
from credential_gate.infrastructure.db.session import create_session_factory
from credential_gate.infrastructure.http.auth_router import build_auth_router
from credential_gate.infrastructure.http.pages_router import build_pages_router
from credential_gate.infrastructure.logging import configure_logging
from credential_gate.infrastructure.security.hashing_pool import HashingPool
from credential_gate.infrastructure.security.password_hasher import BcryptPasswordHasher

logger = logging.getLogger(__name__)


def build_services(settings: Settings) -> tuple[RegistrationService, AuthService]:
    """Build registration and authentication services sharing one store and pool."""

    session_factory = create_session_factory(settings.database_url)
    accounts = SqlAlchemyAccountRepository(session_factory)
    hashing_pool = HashingPool(
        BcryptPasswordHasher(rounds=settings.password_hash_rounds),
        max_concurrency=settings.hash_max_concurrency,
    )
    policy = settings.credential_policy()
    registration_service = RegistrationService(
        accounts=accounts,
        password_hasher=hashing_pool,
        policy=policy,
    )
    auth_service = AuthService(
        accounts=accounts,
        password_hasher=hashing_pool,
        policy=policy,
    )
    return registration_service, auth_service


def create_app(
    *,
    registration_service: RegistrationService | None = None,
    auth_service: AuthService | None = None,
) -> FastAPI:
    """Create FastAPI app for account pages and JSON credential endpoints."""

    if registration_service is None or auth_service is None:
        settings = load_settings()
        configure_logging(level=settings.log_level)
        built_registration, built_auth = build_services(settings)
        registration_service = registration_service or built_registration
        auth_service = auth_service or built_auth
        logger.info(
            "credential_api_configured hash_rounds=%s hash_max_concurrency=%s",
            settings.password_hash_rounds,
            settings.hash_max_concurrency,
        )

    app = FastAPI()
    app.include_router(
        build_pages_router(
            registration_service=registration_service,
            auth_service=auth_service,
        )
    )
    app.include_router(
        build_auth_router(
            registration_service=registration_service,
            auth_service=auth_service,
        )
    )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


def run_asgi_server() -> None:
    """Run credential-api as a long-lived ASGI process using application factory mode."""

    settings = load_settings()
    uvicorn.run(
        "apps.credential_api.main:create_app",
        host=settings.api_host,
        port=settings.api_port,
        factory=True,
    )


def main() -> None:
    """Run credential-api runtime process."""

    run_asgi_server()


if __name__ == "__main__":
    main()
