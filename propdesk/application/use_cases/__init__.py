"""Application use cases: one entry point per workflow."""

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
from propdesk.application.use_cases.listings import (
    PublicListingService,
    PublicVisibilityGate,
)

__all__ = [
    "DocumentChecklistEngine",
    "EntityQueryService",
    "EntityTransitionCoordinator",
    "MediaGallery",
    "OwnerProfileService",
    "PublicListingService",
    "PublicVisibilityGate",
    "SlotInFlightTracker",
]
