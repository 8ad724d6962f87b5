"""Entity package: Book."""

from .entity import Book
from .repository import BookRepository
from .search import BookSearchIndex
from .table import BookTable

__all__ = ["Book", "BookRepository", "BookSearchIndex", "BookTable"]
