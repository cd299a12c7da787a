"""Tenant provisioning: one isolated database per registered user.

Two-phase write:
    admin phase  - validate, check uniqueness, hash password, insert the
                   identity into the admin `users` collection (id assigned
                   by the database), register `user_id -> db_name`.
    tenant phase - create the tenant database and copy the identity into its
                   `users` collection under the same id.

Every step of the admin phase depends on the previous one and runs in
order. The tenant phase is idempotent; it is retried with exponential
backoff and, if it still fails, the admin records stay in place and
reconcile(user_id) finishes the job later.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from kinext.application.dtos.tenant import ProvisioningResult, TenantRegistryEntry
from kinext.application.dtos.user import RegistrationData, UserIdentity
from kinext.application.interfaces.repositories import ITenantRegistry, IUserRepository
from kinext.application.interfaces.services import IDatabaseManager
from kinext.application.services.tenant_naming import tenant_database_name
from kinext.domain.enums import UserRole
from kinext.domain.exceptions import (
    DuplicateEmailException,
    DuplicatePhoneException,
    PersistenceException,
    ResourceNotFoundException,
    TenantNameCollisionException,
    ValidationException,
)

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("name", "email", "password")


class TenantProvisioningService:
    """Creates the admin identity, the registry entry and the tenant database for a signup."""

    def __init__(
        self,
        manager: IDatabaseManager,
        admin_users: IUserRepository,
        registry: ITenantRegistry,
        tenant_users_for: Callable[[Any], IUserRepository],
        hash_password: Callable[[str], str],
        tenant_db_prefix: str,
        tenant_write_attempts: int = 3,
        tenant_write_backoff_seconds: float = 0.5,
    ) -> None:
        self.manager = manager
        self.admin_users = admin_users
        self.registry = registry
        self.tenant_users_for = tenant_users_for
        self.hash_password = hash_password
        self.tenant_db_prefix = tenant_db_prefix
        self.tenant_write_attempts = max(1, tenant_write_attempts)
        self.tenant_write_backoff_seconds = tenant_write_backoff_seconds

    async def provision(self, data: RegistrationData) -> ProvisioningResult:
        """Provision a new tenant for a registration.

        Raises:
            ValidationException: Required field missing or terms not accepted.
            ConflictException: Email or phone already registered.
            PersistenceException: A database write failed. details["phase"] is
                "admin" (nothing usable was created) or "tenant" (admin records
                exist; call reconcile).
        """
        self._validate(data)
        email = data.email.strip().lower()
        phone_number = data.phone_number.strip() if data.phone_number else None

        try:
            if await self.admin_users.get_by_email(email) is not None:
                raise DuplicateEmailException()
            if phone_number and await self.admin_users.get_by_phone(phone_number) is not None:
                raise DuplicatePhoneException()

            hashed = await asyncio.to_thread(self.hash_password, data.password)
            user = await self.admin_users.create_user(
                name=data.name.strip(),
                email=email,
                hashed_password=hashed,
                role=UserRole.USER.value,
                terms_accepted=True,
                phone_number=phone_number,
                newsletter_subscription=data.newsletter_subscription,
                image=data.image,
            )
            logger.info("Created admin identity %s", user.id)

            db_name = tenant_database_name(user.id, self.tenant_db_prefix)
            await self.registry.create_entry(user.id, db_name)
            logger.info("Registered tenant database %s for user %s", db_name, user.id)
        except PersistenceException as exc:
            exc.details.setdefault("phase", "admin")
            raise

        await self._provision_tenant_side(user, db_name)
        logger.info("Provisioned tenant %s for user %s", db_name, user.id)
        return ProvisioningResult(user_id=user.id, db_name=db_name)

    async def reconcile(self, user_id: str) -> ProvisioningResult:
        """Finish an interrupted provisioning for an existing admin identity.

        Creates the registry entry if the admin phase stopped before it, then
        re-runs the tenant phase. Safe to call on a fully provisioned user.
        """
        user = await self.admin_users.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        entry: TenantRegistryEntry | None = await self.registry.get_by_user_id(user_id)
        if entry is None:
            entry = await self._create_missing_entry(user_id)
        await self._provision_tenant_side(user, entry.db_name)
        logger.info("Reconciled tenant %s for user %s", entry.db_name, user_id)
        return ProvisioningResult(user_id=user_id, db_name=entry.db_name)

    async def _create_missing_entry(self, user_id: str) -> TenantRegistryEntry:
        db_name = tenant_database_name(user_id, self.tenant_db_prefix)
        try:
            entry = await self.registry.create_entry(user_id, db_name)
        except TenantNameCollisionException:
            # A concurrent reconcile for the same user may have written it first.
            entry = await self.registry.get_by_user_id(user_id)
            if entry is None or entry.db_name != db_name:
                raise
            return entry
        logger.warning("Reconcile created missing registry entry %s for user %s", db_name, user_id)
        return entry

    async def _provision_tenant_side(self, user: UserIdentity, db_name: str) -> None:
        """Create the tenant database and copy the identity, with bounded retries."""
        attempts = self.tenant_write_attempts
        for attempt in range(1, attempts + 1):
            try:
                await self.manager.create_database(db_name)
                tenant_users = self.tenant_users_for(self.manager.database(db_name))
                await tenant_users.copy_identity(user)
                return
            except PersistenceException as exc:
                if attempt == attempts:
                    logger.error(
                        "Tenant phase for user %s (%s) failed after %d attempts; "
                        "admin records kept, reconcile required",
                        user.id,
                        db_name,
                        attempts,
                    )
                    raise PersistenceException(
                        "tenant.provision",
                        f"Tenant database {db_name} could not be initialized",
                        {"phase": "tenant", "user_id": user.id, "db_name": db_name},
                    ) from exc
                delay = self.tenant_write_backoff_seconds * 2 ** (attempt - 1)
                logger.warning(
                    "Tenant phase attempt %d/%d for %s failed (%s); retrying in %.2fs",
                    attempt,
                    attempts,
                    db_name,
                    exc.message,
                    delay,
                )
                await asyncio.sleep(delay)

    @staticmethod
    def _validate(data: RegistrationData) -> None:
        for field_name in _REQUIRED_FIELDS:
            value = getattr(data, field_name)
            if not value or not str(value).strip():
                raise ValidationException(
                    f"Missing required field: {field_name}", field=field_name
                )
        if "@" not in data.email:
            raise ValidationException("Invalid email address", field="email")
        if data.terms_accepted is not True:
            raise ValidationException(
                "Terms and conditions must be accepted", field="terms_accepted"
            )
