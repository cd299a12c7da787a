"""Tenant database naming: FNV-1a 32-bit hash of the user id behind a fixed prefix.

The name is computed once, at provisioning, and stored in the tenant
registry. Resolution always reads the registry; it never recomputes the
name from the user id.
"""

from kinext.core.config import DATABASE_ID_RE

FNV32_OFFSET_BASIS = 0x811C9DC5
FNV32_PRIME = 0x01000193
_MASK_32 = 0xFFFFFFFF


def fnv1a_32(value: str) -> int:
    """FNV-1a 32-bit hash of the UTF-8 bytes of value (unsigned)."""
    h = FNV32_OFFSET_BASIS
    for byte in value.encode("utf-8"):
        h ^= byte
        h = (h * FNV32_PRIME) & _MASK_32
    return h


def tenant_database_name(user_id: str, prefix: str) -> str:
    """Return `<prefix><8 lowercase hex digits>` for a user id.

    Example:
        >>> tenant_database_name("a", "kinext-")
        'kinext-e40c292c'
    """
    return f"{prefix}{fnv1a_32(user_id):08x}"


def is_valid_database_name(name: str) -> bool:
    """Return True if name is usable as a Firestore database id."""
    return bool(DATABASE_ID_RE.fullmatch(name))
