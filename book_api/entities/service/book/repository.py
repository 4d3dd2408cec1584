"""Book repository for data access operations."""

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select

from book_api.entities.core._base import utcnow

from .entity import Book, BookPayload
from .table import BookTable


class RepositoryError(Exception):
    """A data-layer operation failed (as opposed to finding no row)."""


class BookRepository:
    """Data-access layer for books.

    Lookups return ``None`` (or ``False``) when no live row matches and raise
    ``RepositoryError`` when the database itself fails. Soft-deleted rows are
    invisible to every method.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self._session.rollback()
            logger.bind(
                operation=operation,
                error_type=type(exc).__name__,
            ).error("Book repository operation failed: {}", exc)
            raise RepositoryError(f"{operation} failed") from exc

    def _get_row(self, book_id: int) -> BookTable | None:
        statement = select(BookTable).where(
            BookTable.id == book_id, col(BookTable.deleted_at).is_(None)
        )
        return self._session.exec(statement).first()

    def list_all(self) -> list[Book]:
        with self._guard("list"):
            statement = (
                select(BookTable)
                .where(col(BookTable.deleted_at).is_(None))
                .order_by(col(BookTable.id))
            )
            rows = self._session.exec(statement).all()
        return [Book.model_validate(row, from_attributes=True) for row in rows]

    def get(self, book_id: int) -> Book | None:
        with self._guard("get"):
            row = self._get_row(book_id)
        if row is None:
            return None
        return Book.model_validate(row, from_attributes=True)

    def create(self, payload: BookPayload) -> Book:
        now = utcnow()
        row = BookTable(**payload.model_dump(), created_at=now, updated_at=now)
        with self._guard("create"):
            self._session.add(row)
            self._session.commit()
            self._session.refresh(row)
        return Book.model_validate(row, from_attributes=True)

    def update(self, book: Book) -> Book | None:
        """Save every business field of ``book`` over the stored row."""
        with self._guard("update"):
            row = self._get_row(book.id)
            if row is None:
                return None

            row.title = book.title
            row.author = book.author
            row.description = book.description
            row.updated_at = utcnow()

            self._session.add(row)
            self._session.commit()
            self._session.refresh(row)
        return Book.model_validate(row, from_attributes=True)

    def delete(self, book_id: int) -> bool:
        """Soft-delete a book; returns ``False`` when no live row matches."""
        with self._guard("delete"):
            row = self._get_row(book_id)
            if row is None:
                return False

            row.deleted_at = utcnow()
            self._session.add(row)
            self._session.commit()
        return True
