"""Application lifespan: startup and shutdown.

Wiring only. Opens the process-wide Firestore connection manager on
startup and closes its HTTP pool on shutdown.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from kinext.core.config import get_settings
from kinext.infrastructure.firestore.client import FirestoreConnectionManager
from kinext.shared.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the connection manager, yield, then close it.

    A manager that cannot open (no credentials) is still installed; the
    readiness probe reports it and requests fail with a persistence error
    instead of the process refusing to start.
    """
    settings = get_settings()
    setup_logging()

    manager = FirestoreConnectionManager(settings)
    try:
        manager.open()
    except ValueError as e:
        logger.error("Firestore connection not opened: %s", e)
    app.state.db_manager = manager

    yield

    await manager.aclose()
    app.state.db_manager = None
