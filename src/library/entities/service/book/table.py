"""Book database table model."""

from sqlmodel import Field

from src.library.entities.core._base import EntityTable


class BookTable(EntityTable, table=True):
    """Database persistence model for books."""

    __tablename__ = "books"

    name: str = Field(default="", max_length=255)
    isbn: str = Field(default="", max_length=32, index=True)
