"""Firestore-backed user repository (implements IUserRepository).

Works on the `users` collection of whichever database it is given: the
admin database (authoritative identity, uniqueness claims) or a tenant
database (duplicated identity written with copy_identity).
"""

from __future__ import annotations

import asyncio
import logging
from functools import lru_cache
from typing import Any

from kinext.application.dtos.user import UserIdentity
from kinext.core.config import get_settings
from kinext.domain.exceptions import (
    ConflictException,
    DuplicateEmailException,
    DuplicatePhoneException,
)
from kinext.infrastructure.firestore._rest_client import FirestoreDatabase
from kinext.infrastructure.firestore.collections import (
    COLLECTION_USER_EMAILS,
    COLLECTION_USER_PHONES,
    COLLECTION_USERS,
)
from kinext.infrastructure.firestore.errors import (
    DocumentExistsError,
    FirestoreError,
    persistence_errors,
)
from kinext.infrastructure.security.password import get_password_hash, verify_password
from kinext.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


@lru_cache
def _dummy_hash(rounds: int) -> str:
    """A valid bcrypt hash at the given cost, checked when the email is unknown."""
    return get_password_hash("not-a-real-password", rounds=rounds)


def _claim_doc_id(value: str) -> str:
    """Firestore document ID from a unique value (cannot contain '/')."""
    return value.replace("/", "_")


class FirestoreUserRepository:
    """User repository using Firestore. Email and phone uniqueness via claim documents."""

    def __init__(
        self, database: FirestoreDatabase, password_hash_rounds: int | None = None
    ) -> None:
        self._db = database
        self._hash_rounds = password_hash_rounds
        self._coll = database.collection(COLLECTION_USERS)

    def _to_result(self, doc_id: str, data: dict) -> UserIdentity:
        return UserIdentity(
            id=doc_id,
            name=data.get("name", ""),
            email=data.get("email", ""),
            role=data.get("role", "user"),
            phone_number=data.get("phone_number"),
            terms_accepted=data.get("terms_accepted", False),
            newsletter_subscription=data.get("newsletter_subscription"),
            image=data.get("image"),
            hashed_password=data.get("hashed_password"),
            created_at=data.get("created_at"),
        )

    @staticmethod
    def _to_document(user: UserIdentity) -> dict[str, Any]:
        return {
            "name": user.name,
            "email": user.email,
            "hashed_password": user.hashed_password,
            "role": user.role,
            "phone_number": user.phone_number,
            "terms_accepted": user.terms_accepted,
            "newsletter_subscription": user.newsletter_subscription,
            "image": user.image,
            "created_at": user.created_at or utc_now(),
        }

    async def get_by_id(self, user_id: str) -> UserIdentity | None:
        """Return user by ID."""
        with persistence_errors("users.get", user_id=user_id):
            doc = await self._coll.document(user_id).get()
        if not doc:
            return None
        return self._to_result(doc.id, doc.to_dict())

    async def _find_one(self, field: str, value: str) -> UserIdentity | None:
        with persistence_errors(f"users.find_by_{field}"):
            async for snapshot in self._coll.where(field, "==", value).limit(1).stream():
                return self._to_result(snapshot.id, snapshot.to_dict())
        return None

    async def get_by_email(self, email: str) -> UserIdentity | None:
        """Return user by email (emails are stored lowercased)."""
        return await self._find_one("email", email.strip().lower())

    async def get_by_phone(self, phone_number: str) -> UserIdentity | None:
        return await self._find_one("phone_number", phone_number.strip())

    async def _claim(
        self,
        collection_id: str,
        value: str,
        conflict: type[ConflictException],
    ) -> tuple[str, str]:
        """Atomically reserve a unique value; raise `conflict` if already taken."""
        doc_id = _claim_doc_id(value)
        with persistence_errors(f"{collection_id}.create"):
            try:
                await self._db.collection(collection_id).create(
                    doc_id, {"value": value, "created_at": utc_now()}
                )
            except DocumentExistsError:
                raise conflict() from None
        return collection_id, doc_id

    async def _release_claims(self, claims: list[tuple[str, str]]) -> None:
        for collection_id, doc_id in claims:
            try:
                await self._db.collection(collection_id).document(doc_id).delete()
            except FirestoreError:
                logger.exception(
                    "Could not release uniqueness claim %s/%s; it must be removed manually",
                    collection_id,
                    doc_id,
                )

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
        """Claim email (and phone), then insert the user with a server-assigned id.

        Claims taken by this call are released if a later step fails.
        """
        email = email.strip().lower()
        claims: list[tuple[str, str]] = []
        try:
            claims.append(
                await self._claim(COLLECTION_USER_EMAILS, email, DuplicateEmailException)
            )
            if phone_number:
                claims.append(
                    await self._claim(
                        COLLECTION_USER_PHONES, phone_number, DuplicatePhoneException
                    )
                )
            user = UserIdentity(
                id="",
                name=name,
                email=email,
                role=role,
                phone_number=phone_number,
                terms_accepted=terms_accepted,
                newsletter_subscription=newsletter_subscription,
                image=image,
                hashed_password=hashed_password,
                created_at=utc_now(),
            )
            with persistence_errors("users.create"):
                user_id = await self._coll.add(self._to_document(user))
        except Exception:
            await self._release_claims(claims)
            raise
        return self._to_result(user_id, self._to_document(user))

    async def copy_identity(self, user: UserIdentity) -> None:
        """Write the identity under its existing id (same id as in the admin database)."""
        with persistence_errors("users.copy_identity", user_id=user.id, db_name=self._db.name):
            await self._coll.document(user.id).set(self._to_document(user))

    async def authenticate(self, email: str, password: str) -> UserIdentity | None:
        """Verify email/password; return user or None."""
        user = await self.get_by_email(email)
        if user is None or not user.hashed_password:
            rounds = self._hash_rounds or get_settings().password_hash_rounds
            dummy_hash = await asyncio.to_thread(_dummy_hash, rounds)
            await asyncio.to_thread(verify_password, password, dummy_hash)
            return None
        if not await asyncio.to_thread(verify_password, password, user.hashed_password):
            return None
        return user
