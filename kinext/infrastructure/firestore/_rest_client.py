"""Firestore REST v1 client over one shared httpx.AsyncClient.

Tokens come from google-auth service account credentials. Every database
of the project is reached through the same client and connection pool:
FirestoreDatabase only fixes the `projects/{project}/databases/{id}`
prefix, so switching tenant is a string operation. Creating a database
goes through the Admin endpoint and waits on its long-running operation.

The surface mirrors the parts of the google-cloud-firestore API the
repositories use: collection(), document(), create/add/set/update/get/
delete, where/order_by/offset/limit and stream().
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Any

import httpx
from google.auth.exceptions import GoogleAuthError

from kinext.infrastructure.firestore._rest_encoding import (
    _encode_value,
    decode_fields,
    document_id,
    encode_document,
)
from kinext.infrastructure.firestore.errors import (
    DatabaseExistsError,
    DocumentExistsError,
    FirestoreError,
    OperationTimeoutError,
)

_FIRESTORE_SCOPES = [
    "https://www.googleapis.com/auth/datastore",
    "https://www.googleapis.com/auth/cloud-platform",
]
_BASE = "https://firestore.googleapis.com/v1"

Params = list[tuple[str, str]] | dict[str, str] | None


def _get_credentials(key_dict: dict):
    """Service account credentials scoped for Firestore data and admin calls."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=_FIRESTORE_SCOPES
    )


def _get_access_token(credentials) -> str:
    # Blocking refresh; called from a worker thread.
    from google.auth.transport.requests import Request

    if not credentials.valid:
        credentials.refresh(Request())
    return credentials.token


def _error_message(resp: httpx.Response) -> str:
    """The `error.message` of a Google API error body, or the start of the raw text."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:200]
    if isinstance(body, list):
        body = body[0] if body else {}
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return str(body["error"].get("message", ""))
    return ""


class DocumentSnapshot:
    """A read document: its id and decoded fields."""

    def __init__(self, id_: str, data: dict):
        self.id = id_
        self._data = data

    def to_dict(self) -> dict:
        return self._data


class DocumentReference:
    def __init__(self, client: FirestoreRESTClient, path: str):
        self._client = client
        self._path = path

    @property
    def id(self) -> str:
        return document_id(self._path)

    async def set(self, data: dict[str, Any]) -> None:
        """Write the whole document, creating it if needed."""
        await self._client.call("PATCH", self._path, body=encode_document(data))

    async def update(self, data: dict[str, Any]) -> bool:
        """Merge only the given top-level fields; False if the document is missing."""
        params = [("updateMask.fieldPaths", name) for name in data]
        params.append(("currentDocument.exists", "true"))
        out = await self._client.call(
            "PATCH", self._path, body=encode_document(data), params=params
        )
        return out is not None

    async def get(self) -> DocumentSnapshot | None:
        out = await self._client.call("GET", self._path)
        if not out:
            return None
        return DocumentSnapshot(self.id, decode_fields(out.get("fields")))

    async def delete(self) -> None:
        """Delete; a missing document is not an error."""
        await self._client.call("DELETE", self._path)


# Client-library operator spellings to REST FieldFilter operators.
_OPERATORS = {
    "==": "EQUAL",
    "!=": "NOT_EQUAL",
    "<": "LESS_THAN",
    "<=": "LESS_THAN_OR_EQUAL",
    ">": "GREATER_THAN",
    ">=": "GREATER_THAN_OR_EQUAL",
    "in": "IN",
    "not-in": "NOT_IN",
    "array-contains": "ARRAY_CONTAINS",
    "array-contains-any": "ARRAY_CONTAINS_ANY",
}


class Query:
    """Chainable structured query over one collection, run with runQuery."""

    def __init__(self, client: FirestoreRESTClient, parent: str, collection_id: str):
        self._client = client
        self._parent = parent
        self._collection_id = collection_id
        self._filters: list[dict[str, Any]] = []
        self._orders: list[dict[str, Any]] = []
        self._offset = 0
        self._limit = 100

    def where(self, field: str, op: str, value: Any) -> Query:
        self._filters.append({
            "fieldFilter": {
                "field": {"fieldPath": field},
                "op": _OPERATORS.get(op, op),
                "value": _encode_value(value),
            }
        })
        return self

    def order_by(self, field: str, direction: str = "ASCENDING") -> Query:
        self._orders.append({"field": {"fieldPath": field}, "direction": direction})
        return self

    def offset(self, n: int) -> Query:
        self._offset = n
        return self

    def limit(self, n: int) -> Query:
        self._limit = n
        return self

    def to_structured_query(self) -> dict[str, Any]:
        query: dict[str, Any] = {"from": [{"collectionId": self._collection_id}]}
        if len(self._filters) > 1:
            query["where"] = {"compositeFilter": {"op": "AND", "filters": self._filters}}
        elif self._filters:
            query["where"] = self._filters[0]
        if self._orders:
            query["orderBy"] = self._orders
        if self._offset:
            query["offset"] = self._offset
        if self._limit:
            query["limit"] = self._limit
        return query

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        rows = await self._client.call(
            "POST",
            f"{self._parent}:runQuery",
            body={"structuredQuery": self.to_structured_query()},
        )
        if isinstance(rows, dict):
            rows = [rows] if rows else []
        # Rows without a document only carry readTime (empty result or progress).
        for row in rows or []:
            doc = row.get("document")
            if doc is None:
                continue
            yield DocumentSnapshot(document_id(doc.get("name", "")), decode_fields(doc.get("fields")))


class CollectionReference:
    def __init__(self, client: FirestoreRESTClient, path: str):
        self._client = client
        self._path = path.rstrip("/")

    def document(self, document_id: str) -> DocumentReference:
        return DocumentReference(self._client, f"{self._path}/{document_id}")

    async def create(self, document_id: str, data: dict[str, Any]) -> None:
        """Insert under a chosen id; DocumentExistsError if the id is taken."""
        await self._client.call(
            "POST",
            self._path,
            body=encode_document(data),
            params={"documentId": document_id},
        )

    async def add(self, data: dict[str, Any]) -> str:
        """Insert under an id chosen by Firestore and return it."""
        out = await self._client.call("POST", self._path, body=encode_document(data))
        new_id = document_id((out or {}).get("name", ""))
        if not new_id:
            raise FirestoreError(f"createDocument on {self._path} returned no document name")
        return new_id

    def _query(self) -> Query:
        parent, collection_id = self._path.rsplit("/", 1)
        return Query(self._client, parent, collection_id)

    def where(self, field: str, op: str, value: Any) -> Query:
        return self._query().where(field, op, value)

    def order_by(self, field: str, direction: str = "ASCENDING") -> Query:
        return self._query().order_by(field, direction)

    def limit(self, n: int) -> Query:
        return self._query().limit(n)

    def stream(self) -> AsyncIterator[DocumentSnapshot]:
        """First 100 documents of the collection."""
        return self._query().stream()


class FirestoreDatabase:
    """One named database of the project; shares the client's pool."""

    def __init__(self, client: FirestoreRESTClient, database_id: str) -> None:
        self._client = client
        self.name = database_id
        self._documents = f"projects/{client.project_id}/databases/{database_id}/documents"

    def collection(self, collection_id: str) -> CollectionReference:
        return CollectionReference(self._client, f"{self._documents}/{collection_id}")

    def __repr__(self) -> str:
        return f"FirestoreDatabase({self.name!r})"


class FirestoreRESTClient:
    """Authenticated REST calls for one project.

    The HTTP client is created here unless one is injected; an injected
    client is left open by aclose().
    """

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.project_id = project_id
        self._credentials = credentials
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def get_token(self) -> str:
        """Bearer token for the service account; refresh failures raise FirestoreError."""
        try:
            return await asyncio.to_thread(_get_access_token, self._credentials)
        except GoogleAuthError as e:
            raise FirestoreError(f"Could not obtain Firestore access token: {e}") from e

    async def call(
        self,
        method: str,
        path: str,
        *,
        body: dict | None = None,
        params: Params = None,
        conflict_error: type[FirestoreError] = DocumentExistsError,
    ) -> Any:
        """Send one request to `{_BASE}/{path}` and return the decoded JSON.

        404 gives None and an empty 2xx body gives {}. 409 raises
        conflict_error. Token refresh failures, transport errors and any
        other non-2xx raise FirestoreError.
        """
        url = f"{_BASE}/{path}"
        headers = {"Authorization": f"Bearer {await self.get_token()}"}
        try:
            resp = await self._http.request(method, url, headers=headers, json=body, params=params)
        except httpx.HTTPError as e:
            raise FirestoreError(f"{method} {url} failed: {e}") from e
        if resp.status_code == 404:
            return None
        if resp.status_code == 409:
            raise conflict_error(_error_message(resp) or "Already exists", 409)
        if not resp.is_success:
            raise FirestoreError(
                f"{method} {url} returned {resp.status_code}: {_error_message(resp)}",
                resp.status_code,
            )
        return resp.json() if resp.content else {}

    def database(self, database_id: str) -> FirestoreDatabase:
        return FirestoreDatabase(self, database_id)

    async def get_database(self, database_id: str) -> dict | None:
        """The database resource, or None if there is no such database."""
        return await self.call("GET", f"projects/{self.project_id}/databases/{database_id}")

    async def create_database(
        self,
        database_id: str,
        location_id: str,
        *,
        timeout: float = 120.0,
        poll_interval: float = 2.0,
    ) -> None:
        """Create a Native-mode database and wait until it is usable.

        Raises:
            DatabaseExistsError: The id is already in use.
            OperationTimeoutError: Still running after `timeout` seconds.
            FirestoreError: The operation finished with an error.
        """
        operation = await self.call(
            "POST",
            f"projects/{self.project_id}/databases",
            body={"type": "FIRESTORE_NATIVE", "locationId": location_id},
            params={"databaseId": database_id},
            conflict_error=DatabaseExistsError,
        )
        await self._wait_for_operation(operation or {}, timeout, poll_interval)

    async def _wait_for_operation(
        self, operation: dict, timeout: float, poll_interval: float
    ) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not operation.get("done"):
            name = operation.get("name")
            if not name:
                raise FirestoreError("Long-running operation has no name")
            if loop.time() >= deadline:
                raise OperationTimeoutError(f"Operation {name} did not finish in {timeout}s")
            await asyncio.sleep(poll_interval)
            operation = await self.call("GET", name)
            if operation is None:
                raise FirestoreError(f"Operation {name} not found")
        error = operation.get("error")
        if error:
            raise FirestoreError(
                f"Operation failed: {error.get('message', error)}", error.get("code")
            )
