"""Entities module with an entity-centric structure.

Each entity has its own package containing:
- entity.py: Domain model exchanged with services and API clients
- table.py: Database persistence model
- repository.py: Primary store access
- search.py: Secondary search index access
"""

from .service.book import Book, BookRepository, BookSearchIndex, BookTable
from .service.member import Member, MemberRepository, MemberSearchIndex, MemberTable

__all__ = [
    "Book",
    "BookRepository",
    "BookSearchIndex",
    "BookTable",
    "Member",
    "MemberRepository",
    "MemberSearchIndex",
    "MemberTable",
]
