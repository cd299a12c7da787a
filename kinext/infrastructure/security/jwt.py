"""Signed session tokens (python-jose, HS256 by default).

A token carries the admin user id in `sub`, plus the email and role at
login time. The database resolver only needs `sub`; the tenant database
name is never put in the token, so it always comes from the registry.
"""

from datetime import timedelta
from typing import Any

from jose import JWTError, jwt

from kinext.application.dtos.session import AuthenticatedSession
from kinext.core.config import get_settings
from kinext.shared.utils.datetime import utc_now

_REQUIRED_CLAIMS = {"require_exp": True, "require_sub": True}


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Sign `data` with `iat` and `exp` added.

    The lifetime defaults to settings.access_token_expire_minutes.
    """
    settings = get_settings()
    issued = utc_now()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    claims = {**data, "iat": issued, "exp": issued + expires_delta}
    return jwt.encode(
        claims, settings.secret_key.get_secret_value(), algorithm=settings.algorithm
    )


def decode_session(token: str) -> AuthenticatedSession:
    """Verify signature and expiry and return the session the token carries.

    Raises:
        ValueError: Bad signature, expired, malformed, or no `sub`.
    """
    settings = get_settings()
    try:
        claims = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options=_REQUIRED_CLAIMS,
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    subject = claims.get("sub")
    if not subject:
        raise ValueError("Token has an empty subject")
    return AuthenticatedSession(
        user_id=str(subject),
        email=claims.get("email"),
        role=claims.get("role") or "user",
    )
