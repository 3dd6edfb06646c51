"""Runtime settings loaded from environment variables."""

from functools import lru_cache
from typing import Annotated, Self

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from credential_gate.domain.credential_rules import (
    DEFAULT_PASSWORD_MAX_LENGTH,
    DEFAULT_PASSWORD_MIN_LENGTH,
    DEFAULT_USERNAME_MAX_LENGTH,
    DEFAULT_USERNAME_MIN_LENGTH,
    CredentialPolicy,
)
from credential_gate.infrastructure.security.hashing_pool import DEFAULT_HASH_MAX_CONCURRENCY
from credential_gate.infrastructure.security.password_hasher import (
    DEFAULT_BCRYPT_ROUNDS,
    MAX_BCRYPT_ROUNDS,
    MIN_BCRYPT_ROUNDS,
)

NonEmptyStr = Annotated[str, Field(min_length=1)]
PositiveInt = Annotated[int, Field(gt=0)]
PortInt = Annotated[int, Field(ge=1, le=65535)]

# bcrypt reads at most 72 bytes and a code point encodes to at most 4 bytes.
MAX_HASHABLE_PASSWORD_LENGTH = 18


class Settings(BaseSettings):
    """Environment-driven application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: NonEmptyStr = Field(validation_alias="DATABASE_URL")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    api_host: NonEmptyStr = Field(default="127.0.0.1", validation_alias="API_HOST")
    api_port: PortInt = Field(default=8080, validation_alias="API_PORT")
    password_hash_rounds: int = Field(
        default=DEFAULT_BCRYPT_ROUNDS,
        ge=MIN_BCRYPT_ROUNDS,
        le=MAX_BCRYPT_ROUNDS,
        validation_alias="PASSWORD_HASH_ROUNDS",
    )
    hash_max_concurrency: PositiveInt = Field(
        default=DEFAULT_HASH_MAX_CONCURRENCY,
        validation_alias="HASH_MAX_CONCURRENCY",
    )
    username_min_length: PositiveInt = Field(
        default=DEFAULT_USERNAME_MIN_LENGTH,
        validation_alias="USERNAME_MIN_LENGTH",
    )
    username_max_length: PositiveInt = Field(
        default=DEFAULT_USERNAME_MAX_LENGTH,
        validation_alias="USERNAME_MAX_LENGTH",
    )
    password_min_length: PositiveInt = Field(
        default=DEFAULT_PASSWORD_MIN_LENGTH,
        validation_alias="PASSWORD_MIN_LENGTH",
    )
    password_max_length: PositiveInt = Field(
        default=DEFAULT_PASSWORD_MAX_LENGTH,
        le=MAX_HASHABLE_PASSWORD_LENGTH,
        validation_alias="PASSWORD_MAX_LENGTH",
    )

    @model_validator(mode="after")
    def _check_length_bounds(self) -> Self:
        if self.username_min_length > self.username_max_length:
            raise ValueError("USERNAME_MIN_LENGTH cannot exceed USERNAME_MAX_LENGTH")
        if self.password_min_length > self.password_max_length:
            raise ValueError("PASSWORD_MIN_LENGTH cannot exceed PASSWORD_MAX_LENGTH")
        return self

    def credential_policy(self) -> CredentialPolicy:
        """Return the validator policy described by these settings."""

        return CredentialPolicy(
            username_min_length=self.username_min_length,
            username_max_length=self.username_max_length,
            password_min_length=self.password_min_length,
            password_max_length=self.password_max_length,
        )


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache application settings."""

    return Settings()  # type: ignore[call-arg]
