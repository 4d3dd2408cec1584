from .database import (
    DatabaseConnectionError,
    DbManageService,
    DbSessionService,
    get_database_url,
)

__all__ = [
    "DatabaseConnectionError",
    "DbManageService",
    "DbSessionService",
    "get_database_url",
]
