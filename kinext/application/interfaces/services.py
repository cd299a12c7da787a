"""Service interfaces (ports) for the application layer."""

from __future__ import annotations

from typing import Any, Protocol


class IDatabaseManager(Protocol):
    """Owner of the database connection pool; hands out handles by name.

    Handles are opaque to the application layer. They expose `.name` and are
    passed back into repository factories.
    """

    @property
    def admin(self) -> Any:
        """Handle on the admin database."""

    def database(self, name: str) -> Any:
        """Handle on a named database (cached; no new connection)."""

    async def create_database(self, name: str) -> None:
        """Create the database if missing (idempotent)."""
