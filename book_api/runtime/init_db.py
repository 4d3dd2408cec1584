"""Database initialization script."""

from book_api.core.services.database import DbManageService, DbSessionService
from book_api.runtime.settings import EnvironmentVariables, load_settings


def init_db(settings: EnvironmentVariables) -> DbSessionService:
    """Connect to the database and ensure the schema exists.

    Raises:
        DatabaseConnectionError: the database is unreachable.
    """
    database_service = DbSessionService.from_settings(settings)
    database_service.connect()
    DbManageService(database_service.engine).create_all()
    return database_service


if __name__ == "__main__":
    init_db(load_settings())
