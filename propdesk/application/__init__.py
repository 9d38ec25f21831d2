"""Application layer: interfaces, DTOs, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (document store, blob upload).
"""

from propdesk.application.interfaces import IBlobUploader, IDocumentStore, ISubscription
from propdesk.application.services.authorization_service import can_access
from propdesk.application.use_cases import (
    DocumentChecklistEngine,
    EntityQueryService,
    EntityTransitionCoordinator,
    MediaGallery,
    OwnerProfileService,
    PublicListingService,
    PublicVisibilityGate,
    SlotInFlightTracker,
)

__all__ = [
    "DocumentChecklistEngine",
    "EntityQueryService",
    "EntityTransitionCoordinator",
    "IBlobUploader",
    "IDocumentStore",
    "ISubscription",
    "MediaGallery",
    "OwnerProfileService",
    "PublicListingService",
    "PublicVisibilityGate",
    "SlotInFlightTracker",
    "can_access",
]
