"""CRUD for the per-tenant domain collections (CMS, CRM, careers).

Every record service is bound to one database handle: the one the
resolver picked for the request. References to other records (page_id,
contact_id, company_id, job_id) are checked against that same database,
so a record can never point into another tenant.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from kinext.application.interfaces.repositories import IDocumentRepository
from kinext.domain.exceptions import (
    DuplicateResourceException,
    ResourceNotFoundException,
    ValidationException,
)
from kinext.shared.utils.datetime import utc_now

RepositoryFactory = Callable[[Any, str], IDocumentRepository]


@dataclass(frozen=True)
class RecordDefinition:
    """How one domain collection behaves.

    references maps a field to the collection its value must exist in.
    unique_fields are unique within the tenant. created_field is stamped
    on create unless the caller set it; updated_field is stamped on every
    write.
    """

    resource_type: str
    collection: str
    references: dict[str, str] = field(default_factory=dict)
    unique_fields: tuple[str, ...] = ()
    created_field: str | None = None
    updated_field: str | None = None


class TenantRecordService:
    """List/get/create/update/delete for one collection of one database."""

    def __init__(
        self,
        database: Any,
        definition: RecordDefinition,
        repository_for: RepositoryFactory,
    ) -> None:
        self.definition = definition
        self._database = database
        self._repository_for = repository_for
        self._repo = repository_for(database, definition.collection)

    async def list_records(self, skip: int = 0, limit: int = 100) -> list[dict[str, Any]]:
        return await self._repo.list_documents(skip=skip, limit=limit)

    async def get(self, doc_id: str) -> dict[str, Any]:
        record = await self._repo.get(doc_id)
        if record is None:
            raise ResourceNotFoundException(self.definition.resource_type, doc_id)
        return record

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        await self._check_references(data)
        await self._check_unique(data)
        now = utc_now()
        if self.definition.created_field and data.get(self.definition.created_field) is None:
            data[self.definition.created_field] = now
        if self.definition.updated_field:
            data[self.definition.updated_field] = now
        return await self._repo.create(data)

    async def update(self, doc_id: str, data: dict[str, Any]) -> dict[str, Any]:
        """Merge the given fields. Only fields present are checked and written."""
        await self.get(doc_id)
        await self._check_references(data)
        await self._check_unique(data, exclude_id=doc_id)
        if data and self.definition.updated_field:
            data[self.definition.updated_field] = utc_now()
        updated = await self._repo.update(doc_id, data)
        if updated is None:
            raise ResourceNotFoundException(self.definition.resource_type, doc_id)
        return updated

    async def delete(self, doc_id: str) -> None:
        if not await self._repo.delete(doc_id):
            raise ResourceNotFoundException(self.definition.resource_type, doc_id)

    async def _check_references(self, data: dict[str, Any]) -> None:
        for field_name, collection in self.definition.references.items():
            value = data.get(field_name)
            if value is None:
                continue
            repo = self._repository_for(self._database, collection)
            if not await repo.exists(value):
                raise ValidationException(
                    f"{field_name} does not reference an existing record",
                    field=field_name,
                )

    async def _check_unique(self, data: dict[str, Any], exclude_id: str | None = None) -> None:
        for field_name in self.definition.unique_fields:
            value = data.get(field_name)
            if value is None:
                continue
            existing = await self._repo.find_one(field_name, value)
            if existing is not None and existing["id"] != exclude_id:
                raise DuplicateResourceException(
                    self.definition.resource_type, field_name, str(value)
                )
