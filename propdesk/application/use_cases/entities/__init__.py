"""Entity use cases: reads, transitions and owner profiles."""

from propdesk.application.use_cases.entities.entity_queries import (
    Entity,
    EntityQueryService,
    entity_from_stored,
)
from propdesk.application.use_cases.entities.owner_profiles import OwnerProfileService
from propdesk.application.use_cases.entities.transition_coordinator import (
    EntityTransitionCoordinator,
)

__all__ = [
    "Entity",
    "EntityQueryService",
    "EntityTransitionCoordinator",
    "OwnerProfileService",
    "entity_from_stored",
]
