"""Database engine and session factory used across the application."""

from __future__ import annotations

from typing import Any

from loguru import logger
from sqlalchemy import text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, create_engine

from book_api.core.services.database.db_utils import get_database_url
from book_api.runtime.settings import EnvironmentVariables


class DatabaseConnectionError(RuntimeError):
    """Raised when the database cannot be reached at startup."""


class DbSessionService:
    """Owns the process-wide engine and hands out sessions bound to it."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @classmethod
    def from_settings(cls, settings: EnvironmentVariables) -> DbSessionService:
        """Create the shared engine from the loaded settings."""
        url = get_database_url(settings)

        engine_kwargs: dict[str, Any] = {
            "pool_pre_ping": True,  # Validate connections before use
            "echo": False,
            "connect_args": cls._get_connect_args(url, settings),
        }

        logger.info(
            "Initializing database engine for {} ({})",
            url.render_as_string(hide_password=True),
            settings.environment,
        )
        return cls(create_engine(url, **engine_kwargs))

    @staticmethod
    def _get_connect_args(url: URL, settings: EnvironmentVariables) -> dict[str, Any]:
        """Get database-specific connection arguments."""
        connect_args: dict[str, Any] = {}

        if url.get_backend_name() == "postgresql":
            connect_args.update(
                {
                    "application_name": f"{settings.environment}_book_api",
                    # Session timezone, equivalent of TimeZone=UTC in a libpq DSN
                    "options": "-c timezone=UTC",
                }
            )

        elif url.get_backend_name() == "sqlite":
            connect_args.update(
                {
                    "check_same_thread": False,  # Handlers run in a threadpool
                    "timeout": 20,  # Lock timeout
                }
            )

            if settings.environment == "production":
                logger.warning(
                    "SQLite is not recommended for production use. "
                    "Consider PostgreSQL for better performance and reliability."
                )

        return connect_args

    @property
    def engine(self) -> Engine:
        return self._engine

    def connect(self) -> None:
        """Open one connection to prove the database is reachable.

        Raises:
            DatabaseConnectionError: the connection or probe query failed.
        """
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            raise DatabaseConnectionError(
                f"Failed to connect to the database: {exc}"
            ) from exc
        logger.info("Database connection successfully opened")

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,  # Prevent lazy loading issues
            autoflush=True,
        )

    def dispose(self) -> None:
        """Close every pooled connection."""
        self._engine.dispose()
        logger.info("Database engine disposed")
