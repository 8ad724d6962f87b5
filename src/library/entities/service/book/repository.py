"""Book primary store."""

from src.library.entities.core._repository import SqlEntityRepository
from src.library.entities.service.book.entity import Book
from src.library.entities.service.book.table import BookTable


class BookRepository(SqlEntityRepository[Book, BookTable]):
    """Data-access layer for the ``books`` table."""

    entity_name = "book"
    entity_type = Book
    table_type = BookTable
