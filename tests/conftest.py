"""Shared pytest fixtures.

Services run against InMemoryDatabase, a small stand-in for the async
pymongo database covering the query shapes the services use.
"""

import copy
import re
from types import SimpleNamespace
from typing import Any

import pytest
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from notevault.app import App
from notevault.config import Config
from notevault.core.core import Core
from notevault.web.rate_limit import MemoryRateLimitStore
from notevault.web.server import create_fastapi_app

TEST_PASSWORD = "Secret123!"


def _matches_value(stored: Any, expected: Any) -> bool:
    if isinstance(expected, dict) and "$regex" in expected:
        flags = re.IGNORECASE if "i" in expected.get("$options", "") else 0
        return isinstance(stored, str) and re.search(expected["$regex"], stored, flags) is not None
    if isinstance(stored, list) and not isinstance(expected, list):
        return expected in stored
    return stored == expected


def _matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
    for key, expected in query.items():
        if key == "$or":
            if not any(_matches(doc, sub) for sub in expected):
                return False
        elif not _matches_value(doc.get(key), expected):
            return False
    return True


class InMemoryCursor:
    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs

    def sort(self, field: str, direction: int = 1) -> "InMemoryCursor":
        self._docs.sort(key=lambda doc: doc[field], reverse=direction < 0)
        return self

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        return self._docs if length is None else self._docs[:length]

    def __aiter__(self) -> "InMemoryCursor":
        self._iter = iter(self._docs)
        return self

    async def __anext__(self) -> dict[str, Any]:
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration from None


class InMemoryCollection:
    def __init__(self) -> None:
        self.docs: list[dict[str, Any]] = []
        self.fail = False  # Simulate an unreachable server
        self.indexes: list[tuple[Any, dict[str, Any]]] = []

    def _check(self) -> None:
        if self.fail:
            raise ServerSelectionTimeoutError("simulated outage")

    async def create_index(self, keys: Any, **kwargs: Any) -> str:
        self.indexes.append((keys, kwargs))
        return "index"

    async def insert_one(self, doc: dict[str, Any]) -> SimpleNamespace:
        self._check()
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        self._check()
        doc = next((doc for doc in self.docs if _matches(doc, query)), None)
        return copy.deepcopy(doc)

    def find(self, query: dict[str, Any] | None = None) -> InMemoryCursor:
        self._check()
        return InMemoryCursor([copy.deepcopy(doc) for doc in self.docs if _matches(doc, query or {})])

    async def _update(self, query: dict[str, Any], update: dict[str, Any], many: bool) -> SimpleNamespace:
        self._check()
        modified = 0
        for doc in self.docs:
            if _matches(doc, query):
                changes = update.get("$set", {})
                if any(doc.get(key) != value for key, value in changes.items()):
                    modified += 1
                doc.update(copy.deepcopy(changes))
                if not many:
                    break
        return SimpleNamespace(modified_count=modified)

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> SimpleNamespace:
        return await self._update(query, update, many=False)

    async def update_many(self, query: dict[str, Any], update: dict[str, Any]) -> SimpleNamespace:
        return await self._update(query, update, many=True)

    async def delete_one(self, query: dict[str, Any]) -> SimpleNamespace:
        self._check()
        for index, doc in enumerate(self.docs):
            if _matches(doc, query):
                del self.docs[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def delete_many(self, query: dict[str, Any]) -> SimpleNamespace:
        self._check()
        kept = [doc for doc in self.docs if not _matches(doc, query)]
        deleted = len(self.docs) - len(kept)
        self.docs = kept
        return SimpleNamespace(deleted_count=deleted)


class InMemoryDatabase:
    def __init__(self) -> None:
        self.name = "notevault_test"
        self.collections: dict[str, InMemoryCollection] = {}

    def get_collection(self, name: str) -> InMemoryCollection:
        return self.collections.setdefault(name, InMemoryCollection())


@pytest.fixture
def config():
    """Configuration with explicit, independent secrets and fast bcrypt."""
    return Config(
        database_url="mongodb://localhost:27017/notevault_test",
        jwt_secret="test-session-secret-0123456789-abcdefghijklmnop",
        csrf_secret="test-csrf-secret-0123456789-abcdefghijklmnopqrs",
        bcrypt_rounds=4,
        rate_limit_max_requests=100,
        rate_limit_window_seconds=60,
    )


@pytest.fixture
def database():
    return InMemoryDatabase()


@pytest.fixture
def core(config, database):
    return Core(config, database=database)


@pytest.fixture
async def user(core):
    """A registered user with password TEST_PASSWORD."""
    return await core.services.user.create_user("Test User", "testuser", "test@example.com", TEST_PASSWORD)


@pytest.fixture
async def other_user(core):
    return await core.services.user.create_user("Other User", "otheruser", "other@example.com", TEST_PASSWORD)


@pytest.fixture
def client(config, database):
    """HTTP client against the full application, host notes.example."""
    app = App(config, database=database)
    fastapi_app = create_fastapi_app(app, config, rate_limit_store=MemoryRateLimitStore())
    with TestClient(fastapi_app, base_url="http://notes.example") as test_client:
        yield test_client


@pytest.fixture
def registered_client(client):
    """Client with an account created through the API."""
    response = client.post(
        "/api/auth/register",
        json={"name": "Test User", "username": "testuser", "email": "test@example.com", "password": TEST_PASSWORD},
    )
    assert response.status_code == 201
    return client


@pytest.fixture
def logged_in_client(registered_client):
    """Client holding auth_token and csrf_token cookies, with the CSRF header preset."""
    response = registered_client.post("/api/auth/login", json={"identifier": "testuser", "password": TEST_PASSWORD})
    assert response.status_code == 200
    registered_client.headers["X-CSRF-Token"] = registered_client.cookies["csrf_token"]
    return registered_client


@pytest.fixture
def password():
    return TEST_PASSWORD
