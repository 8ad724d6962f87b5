"""Book API router."""

from fastapi import APIRouter, Depends, Query, status

from src.library.api.http.deps import get_book_service, require_bearer_token
from src.library.api.http.errors import service_failure
from src.library.core.services.entity_service import BookService
from src.library.entities.service.book import Book

router = APIRouter(prefix="/book", tags=["books"])


@router.post(
    "",
    response_model=Book,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_bearer_token)],
)
async def create_book(
    book: Book,
    service: BookService = Depends(get_book_service),
) -> Book:
    """Create a new book. Any ``id`` in the payload is ignored."""
    try:
        await service.create(book)
    except Exception as e:
        raise service_failure("create book", e) from e
    return book


@router.get("", response_model=list[Book])
async def get_books(
    search: str | None = Query(default=None, description="Keyword to search for"),
    service: BookService = Depends(get_book_service),
) -> list[Book]:
    """List all books, or search the book index when ``search`` is given."""
    try:
        if search:
            return await service.search(search)
        return await service.get_all()
    except Exception as e:
        raise service_failure("get books", e) from e


@router.put(
    "",
    response_model=Book,
    dependencies=[Depends(require_bearer_token)],
)
async def update_book(
    book: Book,
    service: BookService = Depends(get_book_service),
) -> Book:
    """Update the non-empty fields of the book identified by ``id``."""
    try:
        await service.update(book)
    except Exception as e:
        raise service_failure("update book", e) from e
    return book
