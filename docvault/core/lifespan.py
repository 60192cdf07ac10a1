"""Application lifespan: startup and shutdown.

Wires outbound collaborators onto app.state. Object storage, rasterizer and
broadcast channel are deployment-provided; they start as None and are set
by the embedding application (or tests) before requests need them.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from docvault.core.config import get_settings
from docvault.infrastructure.services import LoggingActivitySink
from docvault.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit dispose the SQL engine."""
    setup_logging()
    settings = get_settings()

    # ---- Startup ----
    for name in ("object_storage", "rasterizer", "broadcast"):
        if not hasattr(app.state, name):
            setattr(app.state, name, None)
    if not hasattr(app.state, "activity_sink"):
        app.state.activity_sink = LoggingActivitySink()
    if app.state.object_storage is None:
        logger.warning("No object storage configured; downloads and file replacement will answer 503")
    logger.info("%s %s started", settings.app_name, settings.app_version)

    yield

    # ---- Shutdown ----
    from docvault.infrastructure.persistence import database

    if getattr(database, "engine", None) is not None:
        await database.engine.dispose()
        logger.info("Database engine disposed")
