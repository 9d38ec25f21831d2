"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Builds the process-wide
collaborators once and shares them through app.state: the document store,
the blob uploader and the per-slot in-flight tracker.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from propdesk.application.use_cases.documents import SlotInFlightTracker
from propdesk.core.config import get_settings
from propdesk.infrastructure.external.blob import BlobUploaderFactory
from propdesk.infrastructure.store_factory import create_document_store
from propdesk.shared.telemetry import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: logging, document store (and change feed), blob uploader.
    Shutdown closes them in reverse order.
    """
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    app.state.store = await create_document_store(settings)
    app.state.blob_uploader = BlobUploaderFactory.create_uploader(settings)
    app.state.in_flight = SlotInFlightTracker()
    logger.info(
        "%s started (store=%s, blob=%s)",
        settings.app_name,
        settings.store_backend,
        settings.blob_backend,
    )

    yield

    # ---- Shutdown ----
    if getattr(app.state, "blob_uploader", None) is not None:
        await app.state.blob_uploader.aclose()
        app.state.blob_uploader = None
        logger.info("Blob uploader closed")

    if getattr(app.state, "store", None) is not None:
        await app.state.store.aclose()
        app.state.store = None
        logger.info("Document store closed")
