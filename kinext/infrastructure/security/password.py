"""Password hashing for credential accounts.

Passwords are reduced to a base64 SHA-256 digest before bcrypt, so inputs
longer than bcrypt's 72-byte window still count in full. The bcrypt cost
comes from settings.password_hash_rounds unless a caller passes one.
Both functions are CPU-bound; call them through asyncio.to_thread.
"""

import base64
import hashlib

import bcrypt

from kinext.core.config import get_settings


def _bcrypt_input(password: str) -> bytes:
    digest = hashlib.sha256(password.encode("utf-8")).digest()
    return base64.b64encode(digest)


def get_password_hash(password: str, rounds: int | None = None) -> str:
    if rounds is None:
        rounds = get_settings().password_hash_rounds
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_bcrypt_input(password), salt).decode("ascii")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """True on a match; a malformed stored hash counts as a mismatch."""
    try:
        return bcrypt.checkpw(_bcrypt_input(plain_password), hashed_password.encode("ascii"))
    except (ValueError, TypeError, UnicodeEncodeError):
        return False
