"""Application services: tenant naming, provisioning, resolution, tenant records."""

from kinext.application.services.database_resolver import DatabaseResolver
from kinext.application.services.provisioning_service import TenantProvisioningService
from kinext.application.services.tenant_naming import (
    fnv1a_32,
    is_valid_database_name,
    tenant_database_name,
)
from kinext.application.services.tenant_records import (
    RecordDefinition,
    TenantRecordService,
)

__all__ = [
    "DatabaseResolver",
    "RecordDefinition",
    "TenantProvisioningService",
    "TenantRecordService",
    "fnv1a_32",
    "is_valid_database_name",
    "tenant_database_name",
]
