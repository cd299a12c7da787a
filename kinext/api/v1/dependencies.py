"""Presentation-layer dependency injection.

Provides FastAPI Depends() for the connection manager, the caller's
session and the database it resolves to, and the application services
built on them. Routes depend only on these; services are wired in
kinext.infrastructure.composition.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from kinext.application.dtos.session import AuthenticatedSession
from kinext.application.services.database_resolver import DatabaseResolver
from kinext.application.services.provisioning_service import TenantProvisioningService
from kinext.application.services.tenant_records import RecordDefinition, TenantRecordService
from kinext.core.config import get_settings
from kinext.domain.enums import UserRole
from kinext.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    PersistenceException,
)
from kinext.infrastructure.composition import (
    build_database_resolver,
    build_provisioning_service,
)
from kinext.infrastructure.firestore.client import FirestoreConnectionManager
from kinext.infrastructure.firestore.repositories import (
    FirestoreDocumentRepository,
    FirestoreTenantRegistry,
    FirestoreUserRepository,
)
from kinext.infrastructure.security.jwt import decode_session

_http_bearer = HTTPBearer(auto_error=False)


def get_db_manager(request: Request) -> FirestoreConnectionManager:
    """Return the process-wide connection manager installed by the lifespan.

    Opens it on first use; missing credentials surface as a persistence error.
    """
    manager = getattr(request.app.state, "db_manager", None)
    if manager is None:
        raise PersistenceException("firestore.open", "Database manager is not available")
    if not manager.is_open:
        try:
            manager.open()
        except ValueError as e:
            raise PersistenceException("firestore.open", str(e)) from e
    return manager


DbManager = Annotated[FirestoreConnectionManager, Depends(get_db_manager)]


async def get_optional_session(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> AuthenticatedSession | None:
    """Return the session from the bearer token; None when no token was sent.

    A token that is present but invalid or expired is rejected (401) rather
    than treated as anonymous.
    """
    if credentials is None:
        return None
    try:
        return decode_session(credentials.credentials)
    except ValueError:
        raise AuthenticationException("Invalid or expired token") from None


async def get_current_session(
    session: Annotated[AuthenticatedSession | None, Depends(get_optional_session)],
) -> AuthenticatedSession:
    """Return the session; raise 401 if the request is anonymous."""
    if session is None:
        raise AuthenticationException("Not authenticated")
    return session


async def require_admin(
    session: Annotated[AuthenticatedSession, Depends(get_current_session)],
) -> AuthenticatedSession:
    if session.role != UserRole.ADMIN.value:
        raise AuthorizationException("Administrator role required")
    return session


def get_database_resolver(manager: DbManager) -> DatabaseResolver:
    return build_database_resolver(manager, get_settings())


async def get_database(
    session: Annotated[AuthenticatedSession | None, Depends(get_optional_session)],
    resolver: Annotated[DatabaseResolver, Depends(get_database_resolver)],
) -> Any:
    """Database handle for this request: the caller's tenant database, or admin."""
    return await resolver.resolve(session)


def get_provisioning_service(manager: DbManager) -> TenantProvisioningService:
    return build_provisioning_service(manager, get_settings())


def get_admin_users(manager: DbManager) -> FirestoreUserRepository:
    """User directory in the admin database (authoritative identities)."""
    return FirestoreUserRepository(
        manager.admin, password_hash_rounds=get_settings().password_hash_rounds
    )


def get_tenant_registry(manager: DbManager) -> FirestoreTenantRegistry:
    return FirestoreTenantRegistry(manager.admin)


def record_service(definition: RecordDefinition):
    """Dependency factory: a record service for one collection of the resolved database."""

    def _service(
        database: Annotated[Any, Depends(get_database)],
    ) -> TenantRecordService:
        return TenantRecordService(database, definition, FirestoreDocumentRepository)

    return _service
