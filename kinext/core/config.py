"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Required fields (SECRET_KEY) and the shape of database
names are validated at load time; Firestore credentials are checked when
the connection manager opens.
"""

import re
from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Firestore database ids: lowercase letters, digits and hyphens, 4-63 chars,
# starting with a letter and ending with a letter or digit.
DATABASE_ID_RE = re.compile(r"^[a-z][a-z0-9-]{2,61}[a-z0-9]$")
_PREFIX_RE = re.compile(r"^[a-z][a-z0-9-]{0,54}$")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except SECRET_KEY. The tenant
    prefix must leave room for the 8 hex digits appended to it, and the
    admin database name must itself be a valid database id.
    """

    # App
    app_name: str = "kinext"
    app_version: str = "1.0.0"
    debug: bool = False

    # Firestore: use key (env) or path (file). Project id defaults to the key's project_id.
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None
    firestore_project_id: str | None = None
    http_timeout_seconds: float = 30.0

    # Databases
    admin_database: str = "kinext-admin"
    tenant_db_prefix: str = "kinext-"
    tenant_database_location: str = "nam5"
    # When False, tenant databases are expected to exist already (e.g. created by ops).
    create_tenant_databases: bool = True
    database_operation_timeout_seconds: float = 120.0
    database_operation_poll_seconds: float = 2.0

    # Provisioning (tenant-side phase is retried, then left for reconcile)
    tenant_write_attempts: int = 3
    tenant_write_backoff_seconds: float = 0.5

    # Resolution: when True an authenticated user without a registry entry is an error
    # instead of being served from the admin database.
    strict_tenant_resolution: bool = False

    # Security
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 480  # 8 hours
    password_hash_rounds: int = 12

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Request / middleware
    request_id_header: str = "X-Request-ID"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_required_and_names(self) -> "Settings":
        """Validate required env and database naming."""
        if not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required. Generate with: openssl rand -hex 32."
            )
        if not DATABASE_ID_RE.fullmatch(self.admin_database):
            raise ValueError(
                f"ADMIN_DATABASE {self.admin_database!r} is not a valid Firestore database id "
                "(4-63 chars: lowercase letters, digits, hyphens; start with a letter)."
            )
        if not _PREFIX_RE.fullmatch(self.tenant_db_prefix):
            raise ValueError(
                f"TENANT_DB_PREFIX {self.tenant_db_prefix!r} must start with a lowercase letter, "
                "use only lowercase letters, digits and hyphens, and be at most 55 characters."
            )
        if re.fullmatch(re.escape(self.tenant_db_prefix) + r"[0-9a-f]{8}", self.admin_database):
            raise ValueError(
                "ADMIN_DATABASE must not have the shape of a tenant database name "
                "(TENANT_DB_PREFIX followed by 8 hex digits)."
            )
        if self.tenant_write_attempts < 1:
            raise ValueError("TENANT_WRITE_ATTEMPTS must be at least 1")
        if not 4 <= self.password_hash_rounds <= 31:
            raise ValueError("PASSWORD_HASH_ROUNDS must be between 4 and 31")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
