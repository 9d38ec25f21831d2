"""Domain layer: entities, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from propdesk.domain.entities import (
    Address,
    LandDetails,
    OwnerProfile,
    Property,
    Prospect,
)
from propdesk.domain.enums import (
    EntityCollection,
    GateState,
    PropertyStatus,
    ProspectStatus,
    SlotState,
)
from propdesk.domain.exceptions import (
    PropdeskException,
    ResourceNotFoundException,
    TransportFailure,
    UploadFailure,
    ValidationException,
    WriteError,
)

__all__ = [
    # Entities
    "Address",
    "LandDetails",
    "OwnerProfile",
    "Property",
    "Prospect",
    # Enums
    "EntityCollection",
    "GateState",
    "PropertyStatus",
    "ProspectStatus",
    "SlotState",
    # Exceptions
    "PropdeskException",
    "ResourceNotFoundException",
    "TransportFailure",
    "UploadFailure",
    "ValidationException",
    "WriteError",
]
