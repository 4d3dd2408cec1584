"""Book database table model."""

from book_api.entities.core._base import EntityTable


class BookTable(EntityTable, table=True):
    """Database persistence model for books.

    This represents how the Book entity is stored in the database.
    It's separate from the domain entity to keep the response shape
    independent of the storage layout.
    """

    __tablename__ = "books"

    title: str = ""
    author: str = ""
    description: str = ""
