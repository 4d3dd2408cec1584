"""Book API router with CRUD operations."""

import re

from fastapi import APIRouter, Depends, Response
from pydantic import ValidationError

from book_api.api.http.deps import get_book_repository, read_body
from book_api.api.http.errors import ApiError
from book_api.entities.service.book import (
    Book,
    BookPayload,
    BookRepository,
    RepositoryError,
)

router = APIRouter()

BOOK_NOT_FOUND = "Book not found"
PARSE_FAILED = "Failed to parse request body"

BOOK_ID_PATTERN = re.compile(r"[0-9]+")
MAX_BOOK_ID = 2**63 - 1


def _parse_book_id(book_id: str) -> int:
    """Only plain ASCII digits within the BIGINT range can match a row."""
    if BOOK_ID_PATTERN.fullmatch(book_id) is None:
        raise ApiError(404, BOOK_NOT_FOUND)
    parsed = int(book_id)
    if parsed > MAX_BOOK_ID:
        raise ApiError(404, BOOK_NOT_FOUND)
    return parsed


def _decode_payload(body: bytes) -> BookPayload:
    try:
        return BookPayload.model_validate_json(body)
    except ValidationError as exc:
        raise ApiError(400, PARSE_FAILED) from exc


@router.get("", response_model=list[Book])
def list_books(
    repository: BookRepository = Depends(get_book_repository),
) -> list[Book]:
    """List all books that have not been deleted."""
    try:
        return repository.list_all()
    except RepositoryError as e:
        raise ApiError(500, "Failed to retrieve books") from e


@router.get("/{book_id}", response_model=Book)
def get_book(
    book_id: str,
    repository: BookRepository = Depends(get_book_repository),
) -> Book:
    """Get a book by ID."""
    try:
        book = repository.get(_parse_book_id(book_id))
    except RepositoryError as e:
        raise ApiError(500, "Failed to retrieve book") from e
    if book is None:
        raise ApiError(404, BOOK_NOT_FOUND)
    return book


@router.post("", response_model=Book)
def create_book(
    body: bytes = Depends(read_body),
    repository: BookRepository = Depends(get_book_repository),
) -> Book:
    """Create a new book."""
    payload = _decode_payload(body)
    try:
        return repository.create(payload)
    except RepositoryError as e:
        raise ApiError(500, "Failed to create book") from e


@router.put("/{book_id}", response_model=Book)
def update_book(
    book_id: str,
    body: bytes = Depends(read_body),
    repository: BookRepository = Depends(get_book_repository),
) -> Book:
    """Update a book.

    Fields sent in the body overwrite the stored values; fields left out
    keep them.
    """
    try:
        book = repository.get(_parse_book_id(book_id))
    except RepositoryError as e:
        raise ApiError(500, "Failed to update book") from e
    if book is None:
        raise ApiError(404, BOOK_NOT_FOUND)

    payload = _decode_payload(body)
    book = book.model_copy(update=payload.model_dump(exclude_unset=True))

    try:
        updated_book = repository.update(book)
    except RepositoryError as e:
        raise ApiError(500, "Failed to update book") from e
    # Deleted between lookup and save
    if updated_book is None:
        raise ApiError(404, BOOK_NOT_FOUND)
    return updated_book


@router.delete("/{book_id}", status_code=204, response_class=Response)
def delete_book(
    book_id: str,
    repository: BookRepository = Depends(get_book_repository),
) -> Response:
    """Soft-delete a book."""
    try:
        deleted = repository.delete(_parse_book_id(book_id))
    except RepositoryError as e:
        raise ApiError(500, "Failed to delete book") from e
    if not deleted:
        raise ApiError(404, BOOK_NOT_FOUND)
    return Response(status_code=204)
