"""Composition root for the tenant core.

Builds the provisioning service and the database resolver from a
connection manager and settings. Used by the API dependencies and by
scripts so both wire the same implementations.
"""

from __future__ import annotations

from functools import partial

from kinext.application.services.database_resolver import DatabaseResolver
from kinext.application.services.provisioning_service import TenantProvisioningService
from kinext.core.config import Settings, get_settings
from kinext.infrastructure.firestore.client import FirestoreConnectionManager
from kinext.infrastructure.firestore.repositories import (
    FirestoreTenantRegistry,
    FirestoreUserRepository,
)
from kinext.infrastructure.security.password import get_password_hash


def build_provisioning_service(
    manager: FirestoreConnectionManager,
    settings: Settings | None = None,
) -> TenantProvisioningService:
    settings = settings or get_settings()
    return TenantProvisioningService(
        manager=manager,
        admin_users=FirestoreUserRepository(
            manager.admin, password_hash_rounds=settings.password_hash_rounds
        ),
        registry=FirestoreTenantRegistry(manager.admin),
        tenant_users_for=FirestoreUserRepository,
        hash_password=partial(get_password_hash, rounds=settings.password_hash_rounds),
        tenant_db_prefix=settings.tenant_db_prefix,
        tenant_write_attempts=settings.tenant_write_attempts,
        tenant_write_backoff_seconds=settings.tenant_write_backoff_seconds,
    )


def build_database_resolver(
    manager: FirestoreConnectionManager,
    settings: Settings | None = None,
) -> DatabaseResolver:
    settings = settings or get_settings()
    return DatabaseResolver(
        manager,
        FirestoreTenantRegistry(manager.admin),
        strict=settings.strict_tenant_resolution,
    )
