"""Firestore connection manager (REST-based, no firebase-admin).

One manager per process, constructed explicitly (FastAPI lifespan, scripts,
tests) and passed to whoever needs database handles. It owns the single
FirestoreRESTClient and its HTTP connection pool; database handles are
views selected by name and cached per name.

Credentials come from FIREBASE_SERVICE_ACCOUNT_KEY (JSON string) or
FIREBASE_SERVICE_ACCOUNT_PATH (file path).

Lifecycle:
    manager = FirestoreConnectionManager(settings)
    manager.open()            # optional; first use opens lazily
    manager.admin             # admin database handle
    manager.database(name)    # tenant database handle (cached)
    await manager.aclose()    # closes the HTTP pool; handles become unusable
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import httpx

from kinext.core.config import DATABASE_ID_RE, Settings
from kinext.infrastructure.firestore._rest_client import (
    FirestoreDatabase,
    FirestoreRESTClient,
    _get_credentials,
)
from kinext.infrastructure.firestore.errors import (
    DatabaseExistsError,
    persistence_errors,
)

logger = logging.getLogger(__name__)


def _load_key_dict(settings: Settings) -> dict | None:
    """Return service account dict from env key or file path."""
    key_json = settings.firebase_service_account_key.get_secret_value() if settings.firebase_service_account_key else None
    if key_json:
        try:
            return json.loads(key_json)
        except json.JSONDecodeError as e:
            raise ValueError("FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON") from e
    path = settings.firebase_service_account_path
    if path:
        resolved = Path(path).expanduser().resolve()
        if not resolved.is_file():
            raise ValueError(
                f"FIREBASE_SERVICE_ACCOUNT_PATH set but file not found: {path} (resolved: {resolved})"
            )
        with open(resolved, encoding="utf-8") as f:
            return json.load(f)
    return None


class FirestoreConnectionManager:
    """Process-wide owner of the Firestore client and the per-name handle cache."""

    def __init__(
        self,
        settings: Settings,
        *,
        credentials=None,
        project_id: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings
        self._credentials = credentials
        self._project_id = project_id or settings.firestore_project_id
        self._http_client = http_client
        self._client: FirestoreRESTClient | None = None
        self._databases: dict[str, FirestoreDatabase] = {}

    @property
    def is_open(self) -> bool:
        return self._client is not None

    @property
    def admin_database_name(self) -> str:
        return self._settings.admin_database

    def open(self) -> None:
        """Load credentials and create the pooled client. Idempotent.

        Raises:
            ValueError: Credentials are missing or malformed.
        """
        if self._client is not None:
            return
        credentials = self._credentials
        project_id = self._project_id
        if credentials is None:
            key_dict = _load_key_dict(self._settings)
            if not key_dict:
                raise ValueError(
                    "Firestore is not configured: set FIREBASE_SERVICE_ACCOUNT_KEY (full JSON string) "
                    "or FIREBASE_SERVICE_ACCOUNT_PATH (path to JSON file)."
                )
            project_id = project_id or key_dict.get("project_id")
            credentials = _get_credentials(key_dict)
        if not project_id:
            raise ValueError("Firebase service account JSON missing 'project_id'")
        self._client = FirestoreRESTClient(
            project_id,
            credentials,
            http_client=self._http_client,
            timeout=self._settings.http_timeout_seconds,
        )
        logger.info(
            "Firestore client opened (project=%s, admin database=%s)",
            project_id,
            self._settings.admin_database,
        )

    @property
    def client(self) -> FirestoreRESTClient:
        if self._client is None:
            self.open()
        assert self._client is not None
        return self._client

    @property
    def admin(self) -> FirestoreDatabase:
        """Handle on the admin database (user directory and tenant registry)."""
        return self.database(self._settings.admin_database)

    def database(self, name: str) -> FirestoreDatabase:
        """Return the cached handle for a database, creating the view on first use."""
        handle = self._databases.get(name)
        if handle is None:
            if not DATABASE_ID_RE.fullmatch(name):
                raise ValueError(f"Invalid database name: {name!r}")
            handle = self.client.database(name)
            self._databases[name] = handle
        return handle

    async def create_database(self, name: str) -> None:
        """Create a database if it does not exist yet (idempotent).

        No-op when create_tenant_databases is disabled. Failures surface as
        PersistenceException.
        """
        if not self._settings.create_tenant_databases:
            return
        if not DATABASE_ID_RE.fullmatch(name):
            raise ValueError(f"Invalid database name: {name!r}")
        with persistence_errors("databases.create", db_name=name):
            try:
                await self.client.create_database(
                    name,
                    self._settings.tenant_database_location,
                    timeout=self._settings.database_operation_timeout_seconds,
                    poll_interval=self._settings.database_operation_poll_seconds,
                )
            except DatabaseExistsError:
                logger.debug("Database %s already exists", name)
                return
        logger.info("Created database %s", name)

    async def aclose(self) -> None:
        """Close the Firestore client's HTTP connection pool. Call from app shutdown."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            self._databases.clear()
            logger.info("Firestore HTTP client closed")
