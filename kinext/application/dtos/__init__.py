"""Application DTOs (no dependency on the database driver)."""

from kinext.application.dtos.session import AuthenticatedSession
from kinext.application.dtos.tenant import ProvisioningResult, TenantRegistryEntry
from kinext.application.dtos.user import RegistrationData, UserIdentity

__all__ = [
    "AuthenticatedSession",
    "ProvisioningResult",
    "RegistrationData",
    "TenantRegistryEntry",
    "UserIdentity",
]
