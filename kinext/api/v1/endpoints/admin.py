"""Admin API: operator actions on tenants (admin role only)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from kinext.api.v1.dependencies import get_provisioning_service, require_admin
from kinext.application.dtos.session import AuthenticatedSession
from kinext.application.services.provisioning_service import TenantProvisioningService
from kinext.schemas.auth import ReconcileResponse

router = APIRouter()


@router.post("/tenants/{user_id}/reconcile", response_model=ReconcileResponse)
async def reconcile_tenant(
    user_id: Annotated[str, Path(pattern=r"^[A-Za-z0-9_-]{1,128}$")],
    _admin: Annotated[AuthenticatedSession, Depends(require_admin)],
    service: Annotated[TenantProvisioningService, Depends(get_provisioning_service)],
):
    """Finish provisioning for a user whose tenant phase failed. Idempotent."""
    result = await service.reconcile(user_id)
    return ReconcileResponse(user_id=result.user_id, db_name=result.db_name)
