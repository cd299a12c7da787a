"""DTO for the authenticated caller, as handed over by the auth layer."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthenticatedSession:
    """A validated session. Only user_id is needed to resolve the tenant database."""

    user_id: str
    email: str | None = None
    role: str = "user"
