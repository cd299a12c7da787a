"""Per-request database resolution.

Maps the caller's session to a database handle: the admin database for
anonymous callers, the registered tenant database for authenticated ones.
The tenant registry is the only source for the name; the naming hash is
never re-derived here.
"""

from __future__ import annotations

import logging
from typing import Any

from kinext.application.dtos.session import AuthenticatedSession
from kinext.application.interfaces.repositories import ITenantRegistry
from kinext.application.interfaces.services import IDatabaseManager
from kinext.domain.exceptions import TenantNotFoundException

logger = logging.getLogger(__name__)


class DatabaseResolver:
    """Resolve a session to a database handle (shared pool, handle cached per name).

    When strict is False (default), an authenticated user without a registry
    entry is served from the admin database and a warning is logged. When
    strict is True the same case raises TenantNotFoundException.
    """

    def __init__(
        self,
        manager: IDatabaseManager,
        registry: ITenantRegistry,
        *,
        strict: bool = False,
    ) -> None:
        self.manager = manager
        self.registry = registry
        self.strict = strict

    async def resolve(self, session: AuthenticatedSession | None) -> Any:
        if session is None or not session.user_id:
            return self.manager.admin
        entry = await self.registry.get_by_user_id(session.user_id)
        if entry is None:
            if self.strict:
                raise TenantNotFoundException(session.user_id)
            logger.warning(
                "No tenant registered for user %s; falling back to admin database",
                session.user_id,
            )
            return self.manager.admin
        return self.manager.database(entry.db_name)
