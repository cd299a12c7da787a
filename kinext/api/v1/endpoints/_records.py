"""Router factory for the per-tenant record collections.

Each collection gets the same five routes. The database behind them is
whatever the caller's session resolves to, so two tenants using the same
URL never see each other's records.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Path, Query, Request, Response

from kinext.api.v1.dependencies import record_service
from kinext.application.services.tenant_records import (
    RecordDefinition,
    TenantRecordService,
)
from kinext.core.limiter import limit_writes

RecordId = Annotated[str, Path(pattern=r"^[A-Za-z0-9_-]{1,128}$")]


def build_record_router(
    definition: RecordDefinition,
    create_schema: Any,
    update_schema: Any,
    response_schema: Any,
) -> APIRouter:
    """Return list/create/get/update/delete routes for one collection.

    create_schema may be a model or an annotated union (discriminated body).
    """
    router = APIRouter()
    Service = Annotated[TenantRecordService, Depends(record_service(definition))]

    @router.get("", response_model=list[response_schema])
    async def list_records(
        service: Service,
        skip: int = Query(0, ge=0),
        limit: int = Query(100, ge=1, le=500),
    ):
        return await service.list_records(skip=skip, limit=limit)

    @router.post("", response_model=response_schema, status_code=201)
    @limit_writes
    async def create_record(request: Request, body: create_schema, service: Service):
        return await service.create(body.model_dump(mode="python", exclude={"id"}))

    @router.get("/{record_id}", response_model=response_schema)
    async def get_record(record_id: RecordId, service: Service):
        return await service.get(record_id)

    @router.patch("/{record_id}", response_model=response_schema)
    @limit_writes
    async def update_record(
        request: Request,
        record_id: RecordId,
        body: update_schema,
        service: Service,
    ):
        return await service.update(record_id, body.model_dump(exclude_unset=True))

    @router.delete("/{record_id}", status_code=204)
    @limit_writes
    async def delete_record(request: Request, record_id: RecordId, service: Service):
        await service.delete(record_id)
        return Response(status_code=204)

    return router
