"""DTOs for tenant registry and provisioning use cases."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TenantRegistryEntry:
    """Registry row in the admin database: which database belongs to which user.

    Written once at provisioning and never mutated.
    """

    user_id: str
    db_name: str
    created_at: datetime | None = None


@dataclass(frozen=True)
class ProvisioningResult:
    """Result of provision() and reconcile()."""

    user_id: str
    db_name: str
