"""Domain exceptions for the Kinext application.

Defines domain-level exceptions that represent business rule violations
and persistence failures. Infrastructure translates driver errors into
these; the presentation layer maps them to HTTP responses in exception
handlers via error_code.
"""

from typing import Any


class KinextException(Exception):
    """Base exception for all Kinext application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation for API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(KinextException):
    """Raised when input validation fails (missing field, terms not accepted, bad reference)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ConflictException(KinextException):
    """Raised when a write would duplicate a value that must be unique."""

    def __init__(
        self,
        message: str,
        error_code: str = "CONFLICT",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, details)


class DuplicateEmailException(ConflictException):
    """Raised when registering an email that already exists in the admin directory."""

    def __init__(self) -> None:
        super().__init__(
            "A user with this email already exists",
            "DUPLICATE_EMAIL",
            {"field": "email"},
        )


class DuplicatePhoneException(ConflictException):
    """Raised when registering a phone number that already exists in the admin directory."""

    def __init__(self) -> None:
        super().__init__(
            "A user with this phone number already exists",
            "DUPLICATE_PHONE",
            {"field": "phone_number"},
        )


class DuplicateResourceException(ConflictException):
    """Raised when a tenant record repeats a per-tenant unique field (page slug, contact email)."""

    def __init__(self, resource_type: str, field: str, value: str) -> None:
        super().__init__(
            f"{resource_type} with {field} '{value}' already exists",
            "DUPLICATE_RESOURCE",
            {"resource_type": resource_type, "field": field},
        )


class PersistenceException(KinextException):
    """Raised when a database operation fails (unreachable, rejected, timed out).

    Details carry the operation name and, during provisioning, the phase
    ("admin" or "tenant") so callers know whether reconcile can finish it.
    """

    def __init__(
        self,
        operation: str,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        merged = {"operation": operation}
        merged.update(details or {})
        super().__init__(
            message or f"Database operation failed: {operation}",
            "PERSISTENCE_ERROR",
            merged,
        )


class TenantNameCollisionException(PersistenceException):
    """Raised when a generated tenant database name is already registered to another user."""

    def __init__(self, db_name: str) -> None:
        super().__init__(
            "instances.create",
            f"Tenant database name already registered: {db_name}",
            {"db_name": db_name},
        )
        self.error_code = "TENANT_NAME_COLLISION"


class TenantNotFoundException(KinextException):
    """Raised when an authenticated user has no tenant registry entry (strict resolution only)."""

    def __init__(self, user_id: str) -> None:
        """Initialize with the user whose tenant could not be resolved.

        Args:
            user_id: The authenticated user id without a registry entry.
        """
        super().__init__(
            f"No tenant database registered for user: {user_id}",
            "TENANT_NOT_FOUND",
            {"user_id": user_id},
        )


class ResourceNotFoundException(KinextException):
    """Raised when a requested record does not exist in the resolved database."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class AuthenticationException(KinextException):
    """Raised when authentication fails (e.g. invalid credentials or token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(KinextException):
    """Raised when the session lacks the role required for the operation."""

    def __init__(self, message: str = "Permission denied") -> None:
        super().__init__(message, "AUTHORIZATION_ERROR")
