"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the shared store, blob uploader and in-flight
tracker (built once in lifespan and kept on app.state) and for the use cases
built on them. Routes depend only on these dependencies, not on infra directly.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from propdesk.application.interfaces.services import IBlobUploader
from propdesk.application.interfaces.store import IDocumentStore
from propdesk.application.use_cases.documents import (
    DocumentChecklistEngine,
    MediaGallery,
    SlotInFlightTracker,
)
from propdesk.application.use_cases.entities import (
    EntityQueryService,
    EntityTransitionCoordinator,
    OwnerProfileService,
)
from propdesk.application.use_cases.listings import PublicListingService
from propdesk.core.config import Settings, get_settings
from propdesk.domain.enums import EntityCollection
from propdesk.domain.exceptions import AuthenticationException


def get_store(request: Request) -> IDocumentStore:
    """Document store created in lifespan."""
    return request.app.state.store


def get_blob_uploader(request: Request) -> IBlobUploader:
    """Blob uploader created in lifespan."""
    return request.app.state.blob_uploader


def get_in_flight(request: Request) -> SlotInFlightTracker:
    """Process-wide tracker of slot operations in flight."""
    return request.app.state.in_flight


def get_identity(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> str:
    """Acting user id from the header set by the upstream auth layer.

    Raises:
        AuthenticationException: header missing or blank.
    """
    identity = (request.headers.get(settings.identity_header_name) or "").strip()
    if not identity:
        raise AuthenticationException(f"Missing {settings.identity_header_name} header")
    return identity


def get_entity_queries(
    store: Annotated[IDocumentStore, Depends(get_store)],
) -> EntityQueryService:
    return EntityQueryService(store)


def get_coordinator(
    store: Annotated[IDocumentStore, Depends(get_store)],
    queries: Annotated[EntityQueryService, Depends(get_entity_queries)],
) -> EntityTransitionCoordinator:
    return EntityTransitionCoordinator(store, queries)


def get_profile_service(
    store: Annotated[IDocumentStore, Depends(get_store)],
) -> OwnerProfileService:
    return OwnerProfileService(store)


def get_public_listing_service(
    store: Annotated[IDocumentStore, Depends(get_store)],
    profiles: Annotated[OwnerProfileService, Depends(get_profile_service)],
) -> PublicListingService:
    return PublicListingService(store, profiles)


def get_checklist_engine(
    store: Annotated[IDocumentStore, Depends(get_store)],
    uploader: Annotated[IBlobUploader, Depends(get_blob_uploader)],
    in_flight: Annotated[SlotInFlightTracker, Depends(get_in_flight)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> DocumentChecklistEngine:
    """Unsubscribed engine; the route subscribes it to one entity and closes it."""
    return DocumentChecklistEngine(
        store,
        uploader,
        in_flight=in_flight,
        max_upload_size=settings.max_upload_size,
        allowed_content_types=settings.allowed_content_type_list,
    )


async def get_media_gallery(
    collection: EntityCollection,
    entity_id: str,
    identity: Annotated[str, Depends(get_identity)],
    store: Annotated[IDocumentStore, Depends(get_store)],
    uploader: Annotated[IBlobUploader, Depends(get_blob_uploader)],
    queries: Annotated[EntityQueryService, Depends(get_entity_queries)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> MediaGallery:
    """Gallery of an entity the caller owns (not-found otherwise)."""
    await queries.get_entity(identity, collection, entity_id)
    return MediaGallery(
        store,
        uploader,
        collection,
        entity_id,
        max_upload_size=settings.max_upload_size,
        allowed_content_types=settings.allowed_content_type_list,
    )
