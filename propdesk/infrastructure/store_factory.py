"""Document store factory: Firestore (REST + change feed) or in-memory."""

from __future__ import annotations

import logging

from propdesk.application.interfaces.store import IDocumentStore
from propdesk.core.config import Settings

logger = logging.getLogger(__name__)


async def create_document_store(settings: Settings) -> IDocumentStore:
    """Create and connect the store selected by settings.store_backend.

    For Firestore, Redis is optional: when disabled or unreachable, live
    queries fall back to polling every change_feed_poll_seconds.
    """
    backend = settings.store_backend.lower()
    if backend == "memory":
        from propdesk.infrastructure.memory import InMemoryDocumentStore

        logger.info("Using in-memory document store")
        return InMemoryDocumentStore()
    if backend == "firestore":
        from propdesk.infrastructure.firebase import FirestoreDocumentStore, create_firestore_client
        from propdesk.infrastructure.messaging import StoreChangePublisher, StoreChangeSubscriber

        client = create_firestore_client(settings)
        publisher = subscriber = None
        if settings.redis_enabled:
            publisher = StoreChangePublisher(settings=settings)
            subscriber = StoreChangeSubscriber(settings=settings)
            await publisher.connect()
            await subscriber.connect()
        return FirestoreDocumentStore(
            client,
            publisher=publisher,
            subscriber=subscriber,
            poll_seconds=settings.change_feed_poll_seconds,
        )
    raise ValueError(f"Unknown store backend: {backend}. Supported: 'firestore', 'memory'")
