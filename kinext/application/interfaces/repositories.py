"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from kinext.application.dtos.tenant import TenantRegistryEntry
    from kinext.application.dtos.user import UserIdentity


class IUserRepository(Protocol):
    """Protocol for the `users` collection of one database (admin or tenant)."""

    async def get_by_id(self, user_id: str) -> UserIdentity | None:
        """Return user by ID."""

    async def get_by_email(self, email: str) -> UserIdentity | None:
        """Return user by email (case-insensitive)."""

    async def get_by_phone(self, phone_number: str) -> UserIdentity | None:
        """Return user by phone number."""

    async def create_user(
        self,
        *,
        name: str,
        email: str,
        hashed_password: str | None,
        role: str,
        terms_accepted: bool,
        phone_number: str | None = None,
        newsletter_subscription: bool | None = None,
        image: str | None = None,
    ) -> UserIdentity:
        """Insert a new user; the database assigns the id. Enforces email/phone uniqueness."""

    async def copy_identity(self, user: UserIdentity) -> None:
        """Write the given identity under its existing id (idempotent overwrite)."""

    async def authenticate(self, email: str, password: str) -> UserIdentity | None:
        """Verify email/password; return user or None."""


class ITenantRegistry(Protocol):
    """Protocol for the tenant registry (`instances` in the admin database)."""

    async def get_by_user_id(self, user_id: str) -> TenantRegistryEntry | None:
        """Return the registry entry for a user, or None."""

    async def get_by_db_name(self, db_name: str) -> TenantRegistryEntry | None:
        """Return the registry entry holding a database name, or None."""

    async def create_entry(self, user_id: str, db_name: str) -> TenantRegistryEntry:
        """Insert a new entry; raise TenantNameCollisionException if db_name is taken."""


class IDocumentRepository(Protocol):
    """Protocol for a domain collection inside one tenant database."""

    async def list_documents(self, skip: int = 0, limit: int = 100) -> list[dict[str, Any]]:
        """Return documents (each with an `id` key)."""

    async def get(self, doc_id: str) -> dict[str, Any] | None:
        """Return one document or None."""

    async def exists(self, doc_id: str) -> bool:
        """Return True if the document exists."""

    async def find_one(self, field: str, value: Any) -> dict[str, Any] | None:
        """Return the first document whose field equals value."""

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Insert with a server-assigned id; return the stored document."""

    async def update(self, doc_id: str, data: dict[str, Any]) -> dict[str, Any] | None:
        """Merge fields; return the updated document or None if missing."""

    async def delete(self, doc_id: str) -> bool:
        """Delete; return False if it did not exist."""
