"""DTOs for user identity and registration (no dependency on the driver)."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class RegistrationData:
    """Input to provisioning. Password is plaintext here and never persisted as-is."""

    name: str
    email: str
    password: str = field(repr=False)
    terms_accepted: bool
    phone_number: str | None = None
    newsletter_subscription: bool | None = None
    image: str | None = None


@dataclass(frozen=True)
class UserIdentity:
    """Identity record. The same id lives in the admin and the tenant `users` collections.

    hashed_password is only set for credential accounts and is excluded from repr.
    """

    id: str
    name: str
    email: str
    role: str = "user"
    phone_number: str | None = None
    terms_accepted: bool = False
    newsletter_subscription: bool | None = None
    image: str | None = None
    hashed_password: str | None = field(default=None, repr=False)
    created_at: datetime | None = None
