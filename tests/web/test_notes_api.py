"""HTTP tests for note endpoints."""

from uuid import uuid4

import pytest


def _create(client, title="Shopping", content="<p>milk</p>", **extra):
    response = client.post("/api/notes", json={"title": title, "content": content, **extra})
    assert response.status_code == 201
    return response.json()


class TestNotesCrud:
    """Tests for create, read, update and delete of own notes."""

    def test_create_and_list(self, logged_in_client):
        note = _create(logged_in_client, tags=["home"])

        assert note["title"] == "Shopping"
        assert note["color"] == "bg-white dark:bg-dark-secondary"
        assert note["tags"] == ["home"]

        listed = logged_in_client.get("/api/notes").json()
        assert [item["id"] for item in listed] == [note["id"]]

    def test_create_requires_title(self, logged_in_client):
        response = logged_in_client.post("/api/notes", json={"content": "<p>x</p>"})

        assert response.status_code == 400
        assert response.json() == {"message": "Title is required", "type": "validation_error"}

    def test_filters(self, logged_in_client):
        _create(logged_in_client, title="Work", content="deadline", tags=["work"])
        _create(logged_in_client, title="Home", content="Groceries", tags=["home"])

        by_tag = logged_in_client.get("/api/notes", params={"tag": "work"}).json()
        by_query = logged_in_client.get("/api/notes", params={"query": "groc"}).json()

        assert [note["title"] for note in by_tag] == ["Work"]
        assert [note["title"] for note in by_query] == ["Home"]

    def test_get(self, logged_in_client):
        note = _create(logged_in_client)

        response = logged_in_client.get(f"/api/notes/{note['id']}")

        assert response.status_code == 200
        assert response.json()["content"] == "<p>milk</p>"

    def test_partial_update(self, logged_in_client):
        note = _create(logged_in_client, tags=["a"])

        response = logged_in_client.put(f"/api/notes/{note['id']}", json={"title": "Renamed"})

        assert response.status_code == 200
        assert response.json()["title"] == "Renamed"
        assert response.json()["content"] == "<p>milk</p>"
        assert response.json()["tags"] == ["a"]

    def test_delete(self, logged_in_client):
        note = _create(logged_in_client)

        response = logged_in_client.delete(f"/api/notes/{note['id']}")

        assert response.status_code == 204
        assert logged_in_client.get(f"/api/notes/{note['id']}").status_code == 404

    def test_missing_note(self, logged_in_client):
        response = logged_in_client.get(f"/api/notes/{uuid4()}")

        assert response.status_code == 404
        assert response.json() == {"message": "Note not found", "type": "not_found"}

    def test_malformed_id(self, logged_in_client):
        assert logged_in_client.get("/api/notes/not-a-uuid").status_code == 400


class TestCsrfProtection:
    """Tests for the double-submit check on state-changing note requests."""

    @pytest.fixture
    def without_header(self, logged_in_client):
        del logged_in_client.headers["X-CSRF-Token"]
        return logged_in_client

    def test_create_without_header(self, without_header):
        response = without_header.post("/api/notes", json={"title": "x", "content": "y"})

        assert response.status_code == 403
        assert response.json() == {"message": "Forbidden", "type": "access_denied"}
        assert without_header.get("/api/notes").json() == []

    def test_update_with_wrong_header(self, logged_in_client):
        note = _create(logged_in_client)

        response = logged_in_client.put(
            f"/api/notes/{note['id']}", json={"title": "Hijacked"}, headers={"X-CSRF-Token": "forged"}
        )

        assert response.status_code == 403
        assert logged_in_client.get(f"/api/notes/{note['id']}").json()["title"] == "Shopping"

    def test_delete_without_header(self, logged_in_client):
        note = _create(logged_in_client)
        del logged_in_client.headers["X-CSRF-Token"]

        assert logged_in_client.delete(f"/api/notes/{note['id']}").status_code == 403

    def test_reads_need_no_header(self, without_header):
        assert without_header.get("/api/notes").status_code == 200


class TestOwnership:
    @pytest.fixture
    def foreign_note(self, logged_in_client, password):
        """A note of testuser, with the client then logged in as otheruser."""
        note = _create(logged_in_client)
        logged_in_client.post(
            "/api/auth/register",
            json={"name": "Other User", "username": "otheruser", "email": "other@example.com", "password": password},
        )
        response = logged_in_client.post("/api/auth/login", json={"identifier": "otheruser", "password": password})
        assert response.status_code == 200
        logged_in_client.headers["X-CSRF-Token"] = logged_in_client.cookies["csrf_token"]
        return note

    def test_not_listed(self, logged_in_client, foreign_note):
        assert logged_in_client.get("/api/notes").json() == []

    def test_read_denied(self, logged_in_client, foreign_note):
        response = logged_in_client.get(f"/api/notes/{foreign_note['id']}")

        assert response.status_code == 403
        assert response.json() == {"message": "Access denied", "type": "access_denied"}

    def test_update_denied(self, logged_in_client, foreign_note):
        response = logged_in_client.put(f"/api/notes/{foreign_note['id']}", json={"title": "Mine now"})
        assert response.status_code == 403

    def test_delete_denied(self, logged_in_client, foreign_note):
        assert logged_in_client.delete(f"/api/notes/{foreign_note['id']}").status_code == 403
