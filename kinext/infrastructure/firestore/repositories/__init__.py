"""Firestore-backed repository implementations."""

from kinext.infrastructure.firestore.repositories.document_repo_firestore import (
    FirestoreDocumentRepository,
)
from kinext.infrastructure.firestore.repositories.tenant_registry_firestore import (
    FirestoreTenantRegistry,
)
from kinext.infrastructure.firestore.repositories.user_repo_firestore import (
    FirestoreUserRepository,
)

__all__ = [
    "FirestoreDocumentRepository",
    "FirestoreTenantRegistry",
    "FirestoreUserRepository",
]
