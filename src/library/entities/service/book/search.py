"""Book search index."""

from src.library.entities.core._search import ElasticsearchEntityIndex
from src.library.entities.service.book.entity import Book


class BookSearchIndex(ElasticsearchEntityIndex[Book]):
    entity_name = "book"
    entity_type = Book
