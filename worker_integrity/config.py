"""
Application configuration using Pydantic Settings.
Loads configuration from environment variables with sensible defaults.
"""

import json
from functools import lru_cache
from typing import Annotated, Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from worker_integrity.constants import (
    DEFAULT_SOURCE_RUNNERS,
    REGISTRATION_TTL_SECONDS,
    UNKNOWN_GIT_SHA,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Runtime mode ("production" enables the version guard)
    app_env: str = "development"

    # Build identity (baked into the image at build time)
    git_sha: str = UNKNOWN_GIT_SHA
    build_date: str | None = None

    # Deploy-time expected identity
    expected_git_sha: str | None = None

    # Worker Configuration
    worker_role: str = "worker"
    registration_ttl_seconds: int = REGISTRATION_TTL_SECONDS
    registration_refresh_seconds: float = 3600.0
    # Comma-separated names or a JSON array
    guard_source_runners: Annotated[list[str], NoDecode] = list(DEFAULT_SOURCE_RUNNERS)

    # Redis
    redis_url: str = "redis://localhost:6379/0"
    redis_socket_timeout_seconds: float = 5.0

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Observability
    otel_exporter_otlp_endpoint: str = "http://localhost:4317"
    otel_service_name: str = "worker-integrity"
    log_level: str = "INFO"
    log_format: str = "json"  # json or console

    @field_validator("guard_source_runners", mode="before")
    @classmethod
    def split_source_runners(cls, value: Any) -> Any:
        """Parse GUARD_SOURCE_RUNNERS from `watchfiles,pdb` or `["watchfiles", "pdb"]`."""
        if not isinstance(value, str):
            return value
        if value.lstrip().startswith("["):
            return json.loads(value)
        return [name.strip() for name in value.split(",") if name.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
