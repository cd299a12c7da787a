"""Firestore transport errors and their translation to domain exceptions.

The REST client raises FirestoreError subclasses; repositories wrap their
calls in persistence_errors() so the application layer only ever sees
domain exceptions (PersistenceException and friends).
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from kinext.domain.exceptions import PersistenceException

logger = logging.getLogger(__name__)


class FirestoreError(Exception):
    """Raised when a Firestore REST call fails (transport error or non-success status)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class DocumentExistsError(FirestoreError):
    """Raised when createDocument returns 409 (document ID already exists)."""


class DatabaseExistsError(FirestoreError):
    """Raised when databases.create returns 409 (database ID already exists)."""


class OperationTimeoutError(FirestoreError):
    """Raised when a long-running admin operation does not finish in time."""


@contextmanager
def persistence_errors(operation: str, **details: str) -> Iterator[None]:
    """Translate FirestoreError raised in the block into PersistenceException.

    DocumentExistsError is not caught here; callers that use atomic creates
    handle it themselves (it usually means a uniqueness conflict).
    """
    try:
        yield
    except DocumentExistsError:
        raise
    except FirestoreError as exc:
        logger.error("Firestore operation %s failed: %s", operation, exc)
        raise PersistenceException(operation, details=dict(details)) from exc
