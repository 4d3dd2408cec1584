"""Entity: Book."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from book_api.entities.core._base import Entity


class Book(Entity):
    """Book entity as returned by the API."""

    title: str = Field(default="", description="Title")
    author: str = Field(default="", description="Author")
    description: str = Field(default="", description="Description")

    def __eq__(self, other: Any) -> bool:
        """Compare books by business attributes, ignoring timestamps."""
        if not isinstance(other, Book):
            return False

        return (
            self.id == other.id
            and self.title == other.title
            and self.author == other.author
            and self.description == other.description
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((
            self.id,
            self.title,
            self.author,
            self.description,
        ))


class BookPayload(BaseModel):
    """Book-shaped request body.

    Server-assigned keys (``id`` and the timestamps) are ignored, and only the
    fields actually sent are reported by ``model_dump(exclude_unset=True)``.
    """

    model_config = ConfigDict(extra="ignore")

    title: str = ""
    author: str = ""
    description: str = ""
