"""Entity: Book."""

from typing import Any

from pydantic import Field

from src.library.entities.core._base import Entity


class Book(Entity):
    """Book entity as seen by services and API clients.

    Fields default to empty so that partial update payloads decode; empty
    fields are left untouched by an update.
    """

    name: str = Field(default="", description="Title", examples=["The Alchemist"])
    isbn: str = Field(default="", description="ISBN", examples=["9780062315007"])

    def __eq__(self, other: Any) -> bool:
        """Compare books by business attributes, ignoring timestamps."""
        if not isinstance(other, Book):
            return False

        return (
            self.id == other.id
            and self.name == other.name
            and self.isbn == other.isbn
        )

    def __hash__(self) -> int:
        return hash((self.id, self.name, self.isbn))
