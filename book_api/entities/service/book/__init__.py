"""Entity package: Book."""

from .entity import Book, BookPayload
from .repository import BookRepository, RepositoryError
from .table import BookTable

__all__ = ["Book", "BookPayload", "BookRepository", "BookTable", "RepositoryError"]
