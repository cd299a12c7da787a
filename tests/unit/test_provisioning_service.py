"""Tests for TenantProvisioningService against the in-memory database manager.

The real Firestore repositories run on top of InMemoryDatabaseManager, so
these cover the claim documents and the registry's write-once id too.
"""

import asyncio

import pytest

from kinext.application.dtos.tenant import ProvisioningResult
from kinext.application.dtos.user import RegistrationData
from kinext.application.services import provisioning_service as provisioning_module
from kinext.application.services.tenant_naming import tenant_database_name
from kinext.domain.exceptions import (
    DuplicateEmailException,
    DuplicatePhoneException,
    PersistenceException,
    ResourceNotFoundException,
    TenantNameCollisionException,
    ValidationException,
)
from kinext.infrastructure.composition import build_provisioning_service
from kinext.infrastructure.firestore.errors import FirestoreError
from kinext.infrastructure.firestore.repositories import (
    FirestoreTenantRegistry,
    FirestoreUserRepository,
)
from kinext.infrastructure.security.password import verify_password


def _registration(**overrides) -> RegistrationData:
    values = {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "password": "analytical-engine",
        "terms_accepted": True,
    }
    values.update(overrides)
    return RegistrationData(**values)


@pytest.fixture
def service(db_manager, settings):
    return build_provisioning_service(db_manager, settings)


@pytest.fixture
def registry(db_manager):
    return FirestoreTenantRegistry(db_manager.admin)


class TestProvision:
    async def test_creates_identity_registry_entry_and_tenant_database(
        self, service, db_manager, registry
    ) -> None:
        result = await service.provision(_registration())

        assert result.db_name == tenant_database_name(result.user_id, "kinext-")
        entry = await registry.get_by_user_id(result.user_id)
        assert entry is not None
        assert entry.db_name == result.db_name
        assert db_manager.created == [result.db_name]

        admin_user = await FirestoreUserRepository(db_manager.admin).get_by_id(result.user_id)
        tenant_user = await FirestoreUserRepository(
            db_manager.database(result.db_name)
        ).get_by_id(result.user_id)
        assert admin_user is not None and tenant_user is not None
        assert tenant_user.id == admin_user.id
        assert tenant_user.email == admin_user.email == "ada@example.com"
        assert tenant_user.name == "Ada Lovelace"
        assert tenant_user.role == "user"

    async def test_password_is_hashed(self, service, db_manager) -> None:
        result = await service.provision(_registration())
        user = await FirestoreUserRepository(db_manager.admin).get_by_id(result.user_id)
        assert user.hashed_password != "analytical-engine"
        assert verify_password("analytical-engine", user.hashed_password)

    async def test_email_is_normalized(self, service, db_manager) -> None:
        result = await service.provision(_registration(email="  Ada@Example.COM "))
        user = await FirestoreUserRepository(db_manager.admin).get_by_id(result.user_id)
        assert user.email == "ada@example.com"

    async def test_two_users_get_two_databases(self, service) -> None:
        first = await service.provision(_registration())
        second = await service.provision(_registration(email="grace@example.com"))
        assert first.user_id != second.user_id
        assert first.db_name != second.db_name


class TestProvisionConflicts:
    async def test_duplicate_email_creates_nothing_new(self, service, db_manager) -> None:
        await service.provision(_registration())
        with pytest.raises(DuplicateEmailException):
            await service.provision(_registration(email="ADA@example.com", name="Other"))

        instances = db_manager.admin.collections["instances"]
        users = db_manager.admin.collections["users"]
        assert len(instances) == 1
        assert len(users) == 1
        assert len(db_manager.created) == 1

    async def test_duplicate_phone(self, service) -> None:
        await service.provision(_registration(phone_number="+256700000001"))
        with pytest.raises(DuplicatePhoneException):
            await service.provision(
                _registration(email="grace@example.com", phone_number="+256700000001")
            )

    async def test_name_collision_does_not_overwrite(
        self, service, registry, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        await registry.create_entry("someone-else", "kinext-deadbeef")
        monkeypatch.setattr(
            provisioning_module, "tenant_database_name", lambda _uid, _prefix: "kinext-deadbeef"
        )

        with pytest.raises(TenantNameCollisionException) as exc_info:
            await service.provision(_registration())

        assert exc_info.value.details["phase"] == "admin"
        entry = await registry.get_by_db_name("kinext-deadbeef")
        assert entry.user_id == "someone-else"


class TestProvisionValidation:
    @pytest.mark.parametrize(
        ("overrides", "field"),
        [
            ({"terms_accepted": False}, "terms_accepted"),
            ({"name": "  "}, "name"),
            ({"email": ""}, "email"),
            ({"email": "not-an-email"}, "email"),
            ({"password": ""}, "password"),
        ],
    )
    async def test_rejected_before_any_write(
        self, service, db_manager, overrides, field
    ) -> None:
        with pytest.raises(ValidationException) as exc_info:
            await service.provision(_registration(**overrides))
        assert exc_info.value.details["field"] == field
        assert "users" not in db_manager.admin.collections or not db_manager.admin.collections["users"]
        assert db_manager.created == []


class TestTenantPhaseFailures:
    async def test_transient_failure_is_retried(self, service, db_manager) -> None:
        db_manager.create_failures = 1
        result = await service.provision(_registration())
        assert db_manager.created == [result.db_name]

    async def test_exhausted_retries_keep_admin_records(
        self, service, db_manager, registry
    ) -> None:
        db_manager.create_failures = 10
        with pytest.raises(PersistenceException) as exc_info:
            await service.provision(_registration())

        details = exc_info.value.details
        assert details["phase"] == "tenant"
        user_id = details["user_id"]
        assert await FirestoreUserRepository(db_manager.admin).get_by_id(user_id) is not None
        entry = await registry.get_by_user_id(user_id)
        assert entry.db_name == details["db_name"]
        assert db_manager.created == []

    async def test_reconcile_finishes_interrupted_provisioning(
        self, service, db_manager
    ) -> None:
        db_manager.create_failures = 10
        with pytest.raises(PersistenceException) as exc_info:
            await service.provision(_registration())
        user_id = exc_info.value.details["user_id"]

        db_manager.create_failures = 0
        result = await service.reconcile(user_id)

        assert result.user_id == user_id
        assert db_manager.created == [result.db_name]
        tenant_user = await FirestoreUserRepository(
            db_manager.database(result.db_name)
        ).get_by_id(user_id)
        assert tenant_user is not None

    async def test_reconcile_is_idempotent(self, service, db_manager) -> None:
        result = await service.provision(_registration())
        again = await service.reconcile(result.user_id)
        assert again == result
        assert db_manager.created == [result.db_name]

    async def test_reconcile_creates_missing_registry_entry(
        self, service, db_manager, registry
    ) -> None:
        user = await FirestoreUserRepository(db_manager.admin).create_user(
            name="Orphan",
            email="orphan@example.com",
            hashed_password=None,
            role="user",
            terms_accepted=True,
        )
        result = await service.reconcile(user.id)
        assert result.db_name == tenant_database_name(user.id, "kinext-")
        assert (await registry.get_by_user_id(user.id)).db_name == result.db_name

    async def test_reconcile_unknown_user(self, service) -> None:
        with pytest.raises(ResourceNotFoundException):
            await service.reconcile("missing-user")


class TestUniquenessClaims:
    async def test_failed_insert_releases_claims(
        self, service, db_manager, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        repo = FirestoreUserRepository(db_manager.admin)

        async def unavailable(data):
            raise FirestoreError("users unavailable", 503)

        monkeypatch.setattr(repo._coll, "add", unavailable)
        with pytest.raises(PersistenceException):
            await repo.create_user(
                name="Ada",
                email="ada@example.com",
                hashed_password=None,
                role="user",
                terms_accepted=True,
                phone_number="+256700000001",
            )

        assert db_manager.admin.collections["user_emails"] == {}
        assert db_manager.admin.collections["user_phones"] == {}

        result = await service.provision(_registration(phone_number="+256700000001"))
        assert result.user_id

    async def test_concurrent_signups_for_one_email(self, service, db_manager) -> None:
        outcomes = await asyncio.gather(
            service.provision(_registration()),
            service.provision(_registration(name="Ada Two")),
            return_exceptions=True,
        )

        successes = [o for o in outcomes if isinstance(o, ProvisioningResult)]
        conflicts = [o for o in outcomes if isinstance(o, DuplicateEmailException)]
        assert len(successes) == 1
        assert len(conflicts) == 1
        assert len(db_manager.admin.collections["instances"]) == 1
        assert len(db_manager.admin.collections["users"]) == 1
        assert db_manager.created == [successes[0].db_name]


class TestConcurrentReconcile:
    async def _orphan(self, db_manager) -> str:
        user = await FirestoreUserRepository(db_manager.admin).create_user(
            name="Orphan",
            email="orphan@example.com",
            hashed_password=None,
            role="user",
            terms_accepted=True,
        )
        return user.id

    async def test_losing_reconcile_uses_the_winners_entry(
        self, service, db_manager, registry, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        user_id = await self._orphan(db_manager)
        db_name = tenant_database_name(user_id, "kinext-")
        # The other reconcile wrote the entry after this one looked it up.
        await registry.create_entry(user_id, db_name)
        lookup = service.registry.get_by_user_id
        calls = []

        async def stale_first_read(uid):
            calls.append(uid)
            return None if len(calls) == 1 else await lookup(uid)

        monkeypatch.setattr(service.registry, "get_by_user_id", stale_first_read)

        result = await service.reconcile(user_id)

        assert result.db_name == db_name
        assert len(calls) == 2
        assert len(db_manager.admin.collections["instances"]) == 1
        assert db_manager.created == [db_name]

    async def test_name_owned_by_another_user_still_raises(
        self, service, db_manager, registry, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        user_id = await self._orphan(db_manager)
        await registry.create_entry("someone-else", "kinext-deadbeef")
        monkeypatch.setattr(
            provisioning_module, "tenant_database_name", lambda _uid, _prefix: "kinext-deadbeef"
        )

        with pytest.raises(TenantNameCollisionException):
            await service.reconcile(user_id)
        assert (await registry.get_by_db_name("kinext-deadbeef")).user_id == "someone-else"
