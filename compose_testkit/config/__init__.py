"""Configuration management for compose-testkit.

Settings are read from environment variables prefixed with
``COMPOSE_TESTKIT_`` (or a ``.env`` file in the working directory).

Usage:
    from compose_testkit.config import settings

    settings.docker_binary
    settings.default_wait_timeout_seconds
"""

from typing import List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="COMPOSE_TESTKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Docker
    docker_binary: str = Field(
        default="docker",
        description="Docker CLI used to invoke the compose plugin",
    )
    passthrough_env: List[str] = Field(
        default_factory=lambda: ["PATH"],
        description="Ambient environment variables forwarded to compose subprocesses",
    )
    docker_client_env: List[str] = Field(
        default_factory=lambda: [
            "DOCKER_HOST",
            "DOCKER_CONTEXT",
            "DOCKER_CONFIG",
            "DOCKER_TLS_VERIFY",
            "DOCKER_CERT_PATH",
            "HOME",
        ],
        description="Variables locating the docker daemon, forwarded to the CLI and the API client",
    )
    command_timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Hard cap for a single compose subprocess (None = unlimited)",
    )

    # Waiting for services
    default_wait_timeout_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Default budget for wait_for_service_to_exit (5 minutes)",
    )
    poll_min_interval_seconds: float = Field(
        default=0.1,
        gt=0,
        le=5,
        description="First sleep between container state polls",
    )
    poll_max_interval_seconds: float = Field(
        default=2.0,
        gt=0,
        le=5,
        description="Upper bound for the sleep between container state polls",
    )
    poll_backoff_factor: float = Field(default=2.0, ge=1)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: Literal["console", "json"] = Field(default="console")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level


settings = Settings()
