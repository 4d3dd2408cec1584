from loguru import logger
from sqlalchemy.engine import URL, make_url

from book_api.runtime.settings import ConfigurationError, EnvironmentVariables

POSTGRES_DRIVER = "postgresql+psycopg2"


def get_database_url(settings: EnvironmentVariables) -> URL:
    """Build the database URL from DATABASE_URL or the individual DB_* values."""
    if settings.database_url:
        url = make_url(settings.database_url)
        if url.password and settings.environment == "production":
            logger.warning(
                "DATABASE_URL contains a password in production mode; "
                "consider passing it through DB_PASSWORD instead."
            )
        return url

    port: int | None = None
    if settings.db_port:
        try:
            port = int(settings.db_port)
        except ValueError as exc:
            raise ConfigurationError(
                f"DB_PORT must be a number, got {settings.db_port!r}"
            ) from exc

    # Empty parts are left out so libpq falls back to its own defaults
    return URL.create(
        POSTGRES_DRIVER,
        username=settings.db_user or None,
        password=settings.db_password or None,
        host=settings.db_host or None,
        port=port,
        database=settings.db_name or None,
        query={"sslmode": "disable"},
    )
