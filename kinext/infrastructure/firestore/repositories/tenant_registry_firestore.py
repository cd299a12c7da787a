"""Firestore-backed tenant registry (implements ITenantRegistry).

Lives in the admin database, collection `instances`. The document id is
the tenant database name, so two users can never be registered to the
same database: the second create fails atomically instead of overwriting.
"""

from __future__ import annotations

from kinext.application.dtos.tenant import TenantRegistryEntry
from kinext.domain.exceptions import TenantNameCollisionException
from kinext.infrastructure.firestore._rest_client import FirestoreDatabase
from kinext.infrastructure.firestore.collections import COLLECTION_INSTANCES
from kinext.infrastructure.firestore.errors import (
    DocumentExistsError,
    persistence_errors,
)
from kinext.shared.utils.datetime import utc_now


class FirestoreTenantRegistry:
    """Tenant registry using Firestore. Entries are write-once."""

    def __init__(self, admin_database: FirestoreDatabase) -> None:
        self._coll = admin_database.collection(COLLECTION_INSTANCES)

    @staticmethod
    def _to_result(data: dict) -> TenantRegistryEntry:
        return TenantRegistryEntry(
            user_id=data.get("user_id", ""),
            db_name=data.get("db_name", ""),
            created_at=data.get("created_at"),
        )

    async def get_by_user_id(self, user_id: str) -> TenantRegistryEntry | None:
        """Return the entry for a user (server-side where query, at most one doc)."""
        with persistence_errors("instances.get_by_user_id", user_id=user_id):
            q = self._coll.where("user_id", "==", user_id).limit(1)
            async for snapshot in q.stream():
                return self._to_result(snapshot.to_dict())
        return None

    async def get_by_db_name(self, db_name: str) -> TenantRegistryEntry | None:
        with persistence_errors("instances.get", db_name=db_name):
            doc = await self._coll.document(db_name).get()
        if not doc:
            return None
        return self._to_result(doc.to_dict())

    async def create_entry(self, user_id: str, db_name: str) -> TenantRegistryEntry:
        """Create entry; raise TenantNameCollisionException if db_name exists (atomic via doc ID)."""
        now = utc_now()
        with persistence_errors("instances.create", user_id=user_id, db_name=db_name):
            try:
                await self._coll.create(db_name, {
                    "user_id": user_id,
                    "db_name": db_name,
                    "created_at": now,
                })
            except DocumentExistsError:
                raise TenantNameCollisionException(db_name) from None
        return TenantRegistryEntry(user_id=user_id, db_name=db_name, created_at=now)
