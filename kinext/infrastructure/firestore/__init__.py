"""Firestore integration: REST client, connection manager, repositories."""

from kinext.infrastructure.firestore._rest_client import FirestoreDatabase
from kinext.infrastructure.firestore.client import FirestoreConnectionManager

__all__ = [
    "FirestoreConnectionManager",
    "FirestoreDatabase",
]
