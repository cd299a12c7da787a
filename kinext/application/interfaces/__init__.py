"""Ports (Protocols) implemented by infrastructure."""

from kinext.application.interfaces.repositories import (
    IDocumentRepository,
    ITenantRegistry,
    IUserRepository,
)
from kinext.application.interfaces.services import IDatabaseManager

__all__ = [
    "IDatabaseManager",
    "IDocumentRepository",
    "ITenantRegistry",
    "IUserRepository",
]
