"""Environment-based settings configuration.

Every value comes from the process environment, optionally seeded from a
``.env`` file. Values are passed through as-is: missing connection parameters
stay empty strings and are only interpreted when the database URL is built.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ENV_FILE = ".env"
DEFAULT_PORT = 8081


class ConfigurationError(RuntimeError):
    """Raised when the process configuration cannot be loaded."""


class EnvironmentVariables(BaseSettings):
    """Simple primitive values loaded from environment variables and .env files."""

    model_config = SettingsConfigDict(
        env_file=None,
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Environment and deployment
    environment: Literal["development", "production", "test"] = Field(
        default="development"
    )
    log_level: str = Field(default="INFO")
    log_format: Literal["plain", "json"] = Field(default="plain")
    log_file: str | None = Field(default=None)

    # HTTP server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=DEFAULT_PORT)

    # Database connection parameters
    db_host: str = Field(default="")
    db_user: str = Field(default="")
    db_password: str = Field(default="")
    db_name: str = Field(default="")
    db_port: str = Field(default="")

    # Full SQLAlchemy URL, takes precedence over the DB_* parts
    database_url: str | None = Field(default=None)


def load_settings(env_file: str | Path | None = DEFAULT_ENV_FILE) -> EnvironmentVariables:
    """Load settings from the environment, seeded from ``env_file`` when given.

    Variables already present in the process environment win over the file.

    Raises:
        ConfigurationError: ``env_file`` was given but is not a readable file,
            or a variable does not parse (e.g. a non-numeric PORT).
    """
    path = None if env_file is None else Path(env_file)
    if path is not None and (not path.is_file() or not os.access(path, os.R_OK)):
        raise ConfigurationError(f"Error loading {path} file")

    try:
        return EnvironmentVariables(_env_file=path)
    except ValidationError as exc:
        fields = ", ".join(
            ".".join(str(part) for part in error["loc"]).upper() for error in exc.errors()
        )
        raise ConfigurationError(f"Invalid environment configuration: {fields}") from exc
