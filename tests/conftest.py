"""Pytest configuration and fixtures for kinext.

SECRET_KEY is set before any kinext import so get_settings() validates.
HTTP tests run the FastAPI app over httpx.ASGITransport with the
connection manager replaced by an in-memory one (InMemoryDatabaseManager)
that speaks the same collection/document/query surface as the REST
client, so the real Firestore repositories run unchanged against it.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-pytest-only-0123456789")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")
os.environ.setdefault("TENANT_WRITE_BACKOFF_SECONDS", "0")

import copy
import uuid
from enum import Enum
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from kinext.api.v1.dependencies import get_db_manager
from kinext.core.config import DATABASE_ID_RE, get_settings
from kinext.core.limiter import limiter
from kinext.domain.exceptions import PersistenceException
from kinext.infrastructure.firestore.errors import DocumentExistsError
from kinext.main import create_app


def _plain(value: Any) -> Any:
    """Store values the way the REST encoder would (enums as their value, copies)."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return copy.copy(value)


class InMemorySnapshot:
    def __init__(self, id_: str, data: dict) -> None:
        self.id = id_
        self._data = data

    def to_dict(self) -> dict:
        return copy.deepcopy(self._data)


class InMemoryDocument:
    def __init__(self, docs: dict[str, dict], doc_id: str) -> None:
        self._docs = docs
        self.id = doc_id

    async def set(self, data: dict[str, Any]) -> None:
        self._docs[self.id] = _plain(data)

    async def update(self, data: dict[str, Any]) -> bool:
        if self.id not in self._docs:
            return False
        self._docs[self.id].update(_plain(data))
        return True

    async def get(self) -> InMemorySnapshot | None:
        if self.id not in self._docs:
            return None
        return InMemorySnapshot(self.id, self._docs[self.id])

    async def delete(self) -> None:
        self._docs.pop(self.id, None)


class InMemoryQuery:
    def __init__(self, docs: dict[str, dict]) -> None:
        self._docs = docs
        self._filters: list[tuple[str, Any]] = []
        self._order: list[str] = []
        self._offset = 0
        self._limit = 100

    def where(self, field: str, op: str, value: Any) -> "InMemoryQuery":
        assert op == "==", "only equality filters are used"
        self._filters.append((field, _plain(value)))
        return self

    def order_by(self, field: str, direction: str = "ASCENDING") -> "InMemoryQuery":
        self._order.append(field)
        return self

    def offset(self, n: int) -> "InMemoryQuery":
        self._offset = n
        return self

    def limit(self, n: int) -> "InMemoryQuery":
        self._limit = n
        return self

    async def stream(self):
        matches = [
            (doc_id, data)
            for doc_id, data in self._docs.items()
            if all(data.get(f) == v for f, v in self._filters)
        ]
        for field in reversed(self._order):
            matches.sort(key=lambda item: item[1].get(field))
        for doc_id, data in matches[self._offset : self._offset + self._limit]:
            yield InMemorySnapshot(doc_id, data)


class InMemoryCollection:
    def __init__(self, docs: dict[str, dict]) -> None:
        self._docs = docs

    def document(self, doc_id: str) -> InMemoryDocument:
        return InMemoryDocument(self._docs, doc_id)

    async def create(self, doc_id: str, data: dict[str, Any]) -> None:
        if doc_id in self._docs:
            raise DocumentExistsError("Document already exists", 409)
        self._docs[doc_id] = _plain(data)

    async def add(self, data: dict[str, Any]) -> str:
        doc_id = uuid.uuid4().hex[:20]
        self._docs[doc_id] = _plain(data)
        return doc_id

    def where(self, field: str, op: str, value: Any) -> InMemoryQuery:
        return InMemoryQuery(self._docs).where(field, op, value)

    def order_by(self, field: str, direction: str = "ASCENDING") -> InMemoryQuery:
        return InMemoryQuery(self._docs).order_by(field, direction)

    def limit(self, n: int) -> InMemoryQuery:
        return InMemoryQuery(self._docs).limit(n)

    def stream(self):
        return InMemoryQuery(self._docs).stream()


class InMemoryDatabase:
    def __init__(self, name: str) -> None:
        self.name = name
        self.collections: dict[str, dict[str, dict]] = {}

    def collection(self, collection_id: str) -> InMemoryCollection:
        return InMemoryCollection(self.collections.setdefault(collection_id, {}))

    def __repr__(self) -> str:
        return f"InMemoryDatabase({self.name!r})"


class InMemoryDatabaseManager:
    """Stand-in for FirestoreConnectionManager.

    create_failures makes the next N create_database calls raise a
    PersistenceException, the way an unreachable Admin API would.
    """

    def __init__(self, admin_database: str = "kinext-admin") -> None:
        self.admin_database_name = admin_database
        self.is_open = True
        self.databases: dict[str, InMemoryDatabase] = {}
        self.created: list[str] = []
        self.create_failures = 0

    def open(self) -> None:
        self.is_open = True

    @property
    def admin(self) -> InMemoryDatabase:
        return self.database(self.admin_database_name)

    def database(self, name: str) -> InMemoryDatabase:
        if not DATABASE_ID_RE.fullmatch(name):
            raise ValueError(f"Invalid database name: {name!r}")
        if name not in self.databases:
            self.databases[name] = InMemoryDatabase(name)
        return self.databases[name]

    async def create_database(self, name: str) -> None:
        if self.create_failures > 0:
            self.create_failures -= 1
            raise PersistenceException("databases.create", details={"db_name": name})
        if name not in self.created:
            self.created.append(name)
        self.database(name)

    async def aclose(self) -> None:
        self.is_open = False


@pytest.fixture(autouse=True)
def _reset_rate_limits() -> None:
    """Rate limit counters are process-wide; start every test from zero."""
    limiter.reset()


@pytest.fixture
def settings():
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture
def db_manager() -> InMemoryDatabaseManager:
    return InMemoryDatabaseManager()


@pytest.fixture
def app(db_manager: InMemoryDatabaseManager):
    application = create_app()
    application.state.db_manager = db_manager
    application.dependency_overrides[get_db_manager] = lambda: db_manager
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _register_and_login(client: AsyncClient, email: str) -> dict[str, Any]:
    password = "correct-horse-battery"
    resp = await client.post(
        "/api/v1/auth/register",
        json={
            "name": email.split("@")[0],
            "email": email,
            "password": password,
            "terms_accepted": True,
        },
    )
    assert resp.status_code == 201, resp.text
    registered = resp.json()
    resp = await client.post(
        "/api/v1/auth/login", json={"email": email, "password": password}
    )
    assert resp.status_code == 200, resp.text
    token = resp.json()["access_token"]
    return {**registered, "headers": {"Authorization": f"Bearer {token}"}}


@pytest.fixture
def register_and_login():
    """Register a user through the API and return {user_id, db_name, ..., headers}."""
    return _register_and_login
