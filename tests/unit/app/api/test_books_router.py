"""HTTP tests for the /books endpoints."""

from datetime import datetime
from unittest.mock import patch

import pytest

from book_api.entities.service.book import BookRepository, RepositoryError

BOOK = {"title": "Dune", "author": "Frank Herbert", "description": "Desert planet"}


def _create(client, **overrides) -> dict:
    response = client.post("/books", json={**BOOK, **overrides})
    assert response.status_code == 200
    return response.json()


class TestListBooks:
    def test_empty_list(self, client):
        response = client.get("/books")

        assert response.status_code == 200
        assert response.json() == []

    def test_lists_all_created_books(self, client):
        created = [_create(client, title=f"Book {i}") for i in range(3)]

        response = client.get("/books")

        assert response.status_code == 200
        ids = {book["id"] for book in response.json()}
        assert {book["id"] for book in created} <= ids
        assert len(response.json()) >= len(created)

    def test_excludes_deleted_books(self, client):
        kept = _create(client, title="Kept")
        gone = _create(client, title="Gone")
        client.delete(f"/books/{gone['id']}")

        response = client.get("/books")

        assert [book["id"] for book in response.json()] == [kept["id"]]

    def test_query_error_returns_500(self, client):
        with patch.object(BookRepository, "list_all", side_effect=RepositoryError("list failed")):
            response = client.get("/books")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to retrieve books"}


class TestGetBook:
    def test_create_then_get(self, client):
        created = _create(client)

        response = client.get(f"/books/{created['id']}")

        assert response.status_code == 200
        book = response.json()
        assert book["id"] == created["id"]
        assert book["title"] == BOOK["title"]
        assert book["author"] == BOOK["author"]
        assert book["description"] == BOOK["description"]

    def test_missing_book_returns_404(self, client):
        response = client.get("/books/999999")

        assert response.status_code == 404
        assert response.json() == {"error": "Book not found"}

    def test_non_numeric_id_returns_404(self, client):
        response = client.get("/books/not-a-number")

        assert response.status_code == 404
        assert response.json() == {"error": "Book not found"}

    def test_lookup_error_returns_500(self, client):
        with patch.object(BookRepository, "get", side_effect=RepositoryError("get failed")):
            response = client.get("/books/1")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to retrieve book"}


class TestCreateBook:
    def test_returns_created_book(self, client):
        response = client.post("/books", json=BOOK)

        assert response.status_code == 200
        book = response.json()
        assert isinstance(book["id"], int)
        assert book["title"] == BOOK["title"]
        assert book["created_at"]
        assert book["updated_at"] == book["created_at"]
        assert book["deleted_at"] is None

    def test_ignores_client_supplied_id(self, client):
        response = client.post("/books", json={**BOOK, "id": 999999})

        assert response.status_code == 200
        assert response.json()["id"] != 999999
        assert client.get("/books/999999").status_code == 404

    @pytest.mark.parametrize(
        "content",
        [
            b"this is not json",
            b"",
            b"[1, 2, 3]",
            b'{"title": {"nested": true}}',
        ],
    )
    def test_malformed_body_returns_400_and_creates_nothing(self, client, content):
        response = client.post(
            "/books", content=content, headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Failed to parse request body"}
        assert client.get("/books").json() == []

    def test_insert_error_returns_500(self, client):
        with patch.object(BookRepository, "create", side_effect=RepositoryError("create failed")):
            response = client.post("/books", json=BOOK)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to create book"}


class TestUpdateBook:
    def test_update_title(self, client):
        created = _create(client)
        before = client.get(f"/books/{created['id']}").json()

        response = client.put(f"/books/{created['id']}", json={"title": "Dune Messiah"})

        assert response.status_code == 200
        assert response.json()["title"] == "Dune Messiah"

        fetched = client.get(f"/books/{created['id']}").json()
        assert fetched["title"] == "Dune Messiah"
        assert fetched["created_at"] == before["created_at"]
        assert datetime.fromisoformat(fetched["updated_at"]) > datetime.fromisoformat(
            before["updated_at"]
        )

    def test_absent_fields_keep_prior_values(self, client):
        created = _create(client)

        response = client.put(f"/books/{created['id']}", json={"description": ""})

        book = response.json()
        assert book["title"] == BOOK["title"]
        assert book["author"] == BOOK["author"]
        assert book["description"] == ""

    def test_id_in_body_is_ignored(self, client):
        created = _create(client)

        response = client.put(f"/books/{created['id']}", json={"id": 12345, "title": "X"})

        assert response.status_code == 200
        assert response.json()["id"] == created["id"]

    def test_missing_book_returns_404(self, client):
        response = client.put("/books/999999", json={"title": "Nope"})

        assert response.status_code == 404
        assert response.json() == {"error": "Book not found"}

    def test_missing_book_with_bad_body_returns_404(self, client):
        response = client.put(
            "/books/999999", content=b"{", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 404

    def test_malformed_body_returns_400(self, client):
        created = _create(client)

        response = client.put(
            f"/books/{created['id']}",
            content=b"{broken",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Failed to parse request body"}
        assert client.get(f"/books/{created['id']}").json()["title"] == BOOK["title"]

    def test_deleted_book_returns_404(self, client):
        created = _create(client)
        client.delete(f"/books/{created['id']}")

        response = client.put(f"/books/{created['id']}", json={"title": "Revived"})

        assert response.status_code == 404

    def test_save_error_returns_500(self, client):
        created = _create(client)

        with patch.object(BookRepository, "update", side_effect=RepositoryError("update failed")):
            response = client.put(f"/books/{created['id']}", json={"title": "X"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to update book"}


class TestDeleteBook:
    def test_delete_then_get_returns_404(self, client):
        created = _create(client)

        response = client.delete(f"/books/{created['id']}")

        assert response.status_code == 204
        assert response.content == b""
        assert client.get(f"/books/{created['id']}").status_code == 404

    def test_missing_book_returns_404(self, client):
        response = client.delete("/books/999999")

        assert response.status_code == 404
        assert response.json() == {"error": "Book not found"}

    def test_delete_twice_returns_404(self, client):
        created = _create(client)

        assert client.delete(f"/books/{created['id']}").status_code == 204
        assert client.delete(f"/books/{created['id']}").status_code == 404

    def test_delete_error_returns_500(self, client):
        created = _create(client)

        with patch.object(BookRepository, "delete", side_effect=RepositoryError("delete failed")):
            response = client.delete(f"/books/{created['id']}")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to delete book"}


class TestBookIds:
    """Ids outside plain decimal BIGINT range can never have been issued."""

    OVERSIZED_ID = "99999999999999999999"

    def test_oversized_id_returns_404_for_get_update_and_delete(self, client):
        path = f"/books/{self.OVERSIZED_ID}"

        responses = [
            client.get(path),
            client.put(path, json={"title": "Nope"}),
            client.delete(path),
        ]

        for response in responses:
            assert response.status_code == 404
            assert response.json() == {"error": "Book not found"}

    def test_largest_bigint_id_returns_404(self, client):
        assert client.get(f"/books/{2**63 - 1}").status_code == 404
        assert client.get(f"/books/{2**63}").status_code == 404

    @pytest.mark.parametrize("template", ["{}_0", "+{}", "0x{}", "{}.0", "-{}", "\u0661"])
    def test_non_canonical_id_returns_404(self, client, template):
        created = _create(client)

        response = client.get(f"/books/{template.format(created['id'])}")

        assert response.status_code == 404
        assert response.json() == {"error": "Book not found"}

    def test_underscore_separated_id_returns_404(self, client):
        for _ in range(10):
            _create(client)

        assert client.get("/books/10").status_code == 200
        assert client.get("/books/1_0").status_code == 404


class TestErrorShape:
    def test_unknown_route_uses_error_shape(self, client):
        response = client.get("/authors")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}

    def test_wrong_method_uses_error_shape(self, client):
        response = client.patch("/books")

        assert response.status_code == 405
        assert "error" in response.json()

    def test_unexpected_error_returns_500(self, client):
        with patch.object(BookRepository, "list_all", side_effect=RuntimeError("boom")):
            response = client.get("/books")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}

    def test_request_id_is_echoed(self, client):
        response = client.get("/books", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"
