"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from book_api.api.http.app_data import ApplicationDependencies
from book_api.entities.service.book import BookRepository


def get_db_session(request: Request) -> Iterator[Session]:
    """Borrow a session from the shared engine for the duration of a request."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_book_repository(session: Session = Depends(get_db_session)) -> BookRepository:
    """Get a book repository bound to the request session."""
    return BookRepository(session)


async def read_body(request: Request) -> bytes:
    """Raw request body, decoded by the handler once it is needed."""
    return await request.body()
