"""Tests for the /book and /member routers."""

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

from src.library.api.http.app import create_app
from src.library.core.errors import EntityNotFoundError, SearchUnavailableError
from src.library.core.services.entity_service import BookService, MemberService
from src.library.entities.service.book import Book
from src.library.entities.service.member import Member


@pytest.fixture
def mock_book_service() -> Mock:
    service = Mock(spec=BookService)
    service.create = AsyncMock()
    service.update = AsyncMock()
    service.get_all = AsyncMock(return_value=[])
    service.search = AsyncMock(return_value=[])
    return service


@pytest.fixture
def mock_member_service() -> Mock:
    service = Mock(spec=MemberService)
    service.create = AsyncMock()
    service.update = AsyncMock()
    service.get_all = AsyncMock(return_value=[])
    service.search = AsyncMock(return_value=[])
    return service


@pytest.fixture
def mocked_client(app_dependencies, mock_book_service, mock_member_service):
    app_dependencies.book_service = mock_book_service
    app_dependencies.member_service = mock_member_service
    app = create_app(app_dependencies.config, app_dependencies)
    with TestClient(app) as client:
        yield client


class TestBookRouter:
    def test_create_returns_201_with_entity(self, mocked_client, mock_book_service):
        async def assign_id(book):
            book.id = 1

        mock_book_service.create.side_effect = assign_id

        response = mocked_client.post(
            "/book", json={"name": "The Alchemist", "isbn": "9780062315007"}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["id"] == 1
        assert body["name"] == "The Alchemist"
        assert body["isbn"] == "9780062315007"
        mock_book_service.create.assert_awaited_once()

    @pytest.mark.parametrize(
        "payload", ["{not json", "[1, 2, 3]", '{"name": 12, "isbn": []}', ""]
    )
    @pytest.mark.parametrize("method", ["POST", "PUT"])
    def test_invalid_payload_is_400_without_service_call(
        self, mocked_client, mock_book_service, method, payload
    ):
        response = mocked_client.request(
            method,
            "/book",
            content=payload,
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request payload"}
        mock_book_service.create.assert_not_awaited()
        mock_book_service.update.assert_not_awaited()

    def test_create_failure_is_500(self, mocked_client, mock_book_service):
        mock_book_service.create.side_effect = RuntimeError("database is locked")

        response = mocked_client.post("/book", json={"name": "Dune"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed create book: database is locked"}

    def test_get_lists_all_books(self, mocked_client, mock_book_service):
        mock_book_service.get_all.return_value = [
            Book(id=1, name="Dune", isbn="9780441172719")
        ]

        response = mocked_client.get("/book")

        assert response.status_code == 200
        assert [b["name"] for b in response.json()] == ["Dune"]
        mock_book_service.search.assert_not_awaited()

    def test_get_with_search_routes_to_search(self, mocked_client, mock_book_service):
        mock_book_service.search.return_value = [Book(id=2, name="The Alchemist")]

        response = mocked_client.get("/book", params={"search": "Alchemist"})

        assert response.status_code == 200
        assert [b["id"] for b in response.json()] == [2]
        mock_book_service.search.assert_awaited_once_with("Alchemist")
        mock_book_service.get_all.assert_not_awaited()

    def test_empty_search_param_lists_all(self, mocked_client, mock_book_service):
        response = mocked_client.get("/book?search=")

        assert response.status_code == 200
        mock_book_service.get_all.assert_awaited_once()
        mock_book_service.search.assert_not_awaited()

    def test_get_failure_is_500(self, mocked_client, mock_book_service):
        mock_book_service.get_all.side_effect = RuntimeError("connection refused")

        response = mocked_client.get("/book")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed get books: connection refused"}

    def test_search_unavailable_is_503(self, mocked_client, mock_book_service):
        mock_book_service.search.side_effect = SearchUnavailableError("book")

        response = mocked_client.get("/book", params={"search": "Dune"})

        assert response.status_code == 503
        assert response.json() == {
            "error": "Failed get books: search index for book is not configured"
        }

    def test_update_returns_refreshed_entity(self, mocked_client, mock_book_service):
        async def refresh(book):
            book.isbn = "9780062315007"

        mock_book_service.update.side_effect = refresh

        response = mocked_client.put(
            "/book", json={"id": 1, "name": "The Alchemist (Updated)"}
        )

        assert response.status_code == 200
        assert response.json()["isbn"] == "9780062315007"
        assert response.json()["name"] == "The Alchemist (Updated)"

    def test_update_unknown_is_404(self, mocked_client, mock_book_service):
        mock_book_service.update.side_effect = EntityNotFoundError("book", 99)

        response = mocked_client.put("/book", json={"id": 99, "name": "Ghost"})

        assert response.status_code == 404
        assert response.json() == {"error": "Failed update book: book 99 not found"}

    def test_update_failure_is_500(self, mocked_client, mock_book_service):
        mock_book_service.update.side_effect = RuntimeError("deadlock")

        response = mocked_client.put("/book", json={"id": 1, "name": "Dune"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed update book: deadlock"}

    def test_response_carries_request_id(self, mocked_client):
        response = mocked_client.get("/book", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"


class TestMemberRouter:
    def test_create_member(self, mocked_client, mock_member_service):
        async def assign_id(member):
            member.id = 5

        mock_member_service.create.side_effect = assign_id

        response = mocked_client.post("/member", json={"name": "Ada Lovelace"})

        assert response.status_code == 201
        assert response.json()["id"] == 5

    def test_invalid_member_payload(self, mocked_client, mock_member_service):
        response = mocked_client.post(
            "/member",
            content="name=Ada",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request payload"}
        mock_member_service.create.assert_not_awaited()

    def test_member_errors_use_member_wording(self, mocked_client, mock_member_service):
        mock_member_service.get_all.side_effect = RuntimeError("timeout")
        mock_member_service.create.side_effect = RuntimeError("duplicate")
        mock_member_service.update.side_effect = RuntimeError("gone")

        assert mocked_client.get("/member").json() == {
            "error": "Failed get members: timeout"
        }
        assert mocked_client.post("/member", json={"name": "A"}).json() == {
            "error": "Failed create member: duplicate"
        }
        assert mocked_client.put("/member", json={"id": 1}).json() == {
            "error": "Failed update member: gone"
        }

    def test_search_members(self, mocked_client, mock_member_service):
        mock_member_service.search.return_value = [Member(id=1, name="Ada")]

        response = mocked_client.get("/member", params={"search": "ada"})

        assert response.json()[0]["name"] == "Ada"
        mock_member_service.search.assert_awaited_once_with("ada")
