from .db_manage import DbManageService
from .db_session import DatabaseConnectionError, DbSessionService
from .db_utils import get_database_url

__all__ = [
    "DatabaseConnectionError",
    "DbManageService",
    "DbSessionService",
    "get_database_url",
]
