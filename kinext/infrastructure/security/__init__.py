"""Security primitives: password hashing and session tokens."""

from kinext.infrastructure.security.jwt import create_access_token, decode_session
from kinext.infrastructure.security.password import get_password_hash, verify_password

__all__ = [
    "create_access_token",
    "decode_session",
    "get_password_hash",
    "verify_password",
]
