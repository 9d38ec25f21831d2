"""Domain entities.

Pure domain models; mapping to and from stored documents uses the field
names the web client writes (camelCase).
"""

from propdesk.domain.entities.owner_profile import OwnerProfile
from propdesk.domain.entities.property import Address, LandDetails, Property
from propdesk.domain.entities.prospect import Prospect

__all__ = [
    "Address",
    "LandDetails",
    "OwnerProfile",
    "Property",
    "Prospect",
]
