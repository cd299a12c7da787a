"""Firestore-backed repository for tenant domain collections (implements IDocumentRepository).

One instance per (database, collection). Documents are plain dicts; the
API layer validates their shape with pydantic before they get here and
after they come back.
"""

from __future__ import annotations

from typing import Any

from kinext.infrastructure.firestore._rest_client import FirestoreDatabase
from kinext.infrastructure.firestore.errors import persistence_errors


class FirestoreDocumentRepository:
    """CRUD over one collection of one database."""

    def __init__(self, database: FirestoreDatabase, collection_id: str) -> None:
        self._db_name = database.name
        self._collection_id = collection_id
        self._coll = database.collection(collection_id)

    def _op(self, action: str) -> str:
        return f"{self._collection_id}.{action}"

    async def list_documents(self, skip: int = 0, limit: int = 100) -> list[dict[str, Any]]:
        """Return a page of documents, each with its `id`."""
        results: list[dict[str, Any]] = []
        with persistence_errors(self._op("list"), db_name=self._db_name):
            async for snapshot in self._coll.limit(limit).offset(skip).stream():
                results.append({"id": snapshot.id, **snapshot.to_dict()})
        return results

    async def get(self, doc_id: str) -> dict[str, Any] | None:
        with persistence_errors(self._op("get"), db_name=self._db_name):
            doc = await self._coll.document(doc_id).get()
        if not doc:
            return None
        return {"id": doc.id, **doc.to_dict()}

    async def exists(self, doc_id: str) -> bool:
        return await self.get(doc_id) is not None

    async def find_one(self, field: str, value: Any) -> dict[str, Any] | None:
        """Return the first document whose `field` equals `value` (server-side filter)."""
        with persistence_errors(self._op("find"), db_name=self._db_name):
            async for snapshot in self._coll.where(field, "==", value).limit(1).stream():
                return {"id": snapshot.id, **snapshot.to_dict()}
        return None

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Insert with a server-assigned id; return the stored document with its id."""
        with persistence_errors(self._op("create"), db_name=self._db_name):
            doc_id = await self._coll.add(data)
        return {"id": doc_id, **data}

    async def update(self, doc_id: str, data: dict[str, Any]) -> dict[str, Any] | None:
        """Merge fields into an existing document; None if it does not exist."""
        if not data:
            return await self.get(doc_id)
        with persistence_errors(self._op("update"), db_name=self._db_name):
            updated = await self._coll.document(doc_id).update(data)
        if not updated:
            return None
        return await self.get(doc_id)

    async def delete(self, doc_id: str) -> bool:
        """Delete a document; return False if it was not there."""
        if not await self.exists(doc_id):
            return False
        with persistence_errors(self._op("delete"), db_name=self._db_name):
            await self._coll.document(doc_id).delete()
        return True
