from dataclasses import dataclass

from book_api.core.services import DbSessionService


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
