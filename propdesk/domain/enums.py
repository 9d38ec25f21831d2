"""Domain enumerations for the propdesk application.

Enum values are the strings stored in documents, so they match what the
web client writes.
"""

from enum import Enum


class EntityCollection(str, Enum):
    """Top-level store collections that own document checklists and media."""

    PROPERTIES = "properties"
    PROSPECTS = "prospects"


class ProspectStatus(str, Enum):
    """Prospect lifecycle. Converted is terminal."""

    NEW = "New"
    ACTIVE = "Active"
    CONVERTED = "Converted"


class PropertyStatus(str, Enum):
    """Property lifecycle. Sold properties move to sales history."""

    OWNED = "Owned"
    FOR_SALE = "For Sale"
    SOLD = "Sold"


class PropertyType(str, Enum):
    """Kinds of property."""

    OPEN_LAND = "Open Land"
    FLAT = "Flat"
    VILLA = "Villa"
    COMMERCIAL_COMPLEX_UNIT = "Commercial Complex Unit"
    APARTMENT = "Apartment"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid property type strings."""
        return [t.value for t in cls]


class AreaUnit(str, Enum):
    """Units for land area."""

    SQUARE_FEET = "Square Feet"
    ACRE = "Acre"


class LandType(str, Enum):
    """Land classification."""

    AGRICULTURAL = "Agricultural"
    RESIDENTIAL = "Residential"
    COMMERCIAL = "Commercial"
    TRIBAL = "Tribal"


class SlotState(str, Enum):
    """Derived state of one document slot (never stored).

    Uploading and Updating are local and optimistic; Empty and Filled come
    from the last confirmed snapshot.
    """

    EMPTY = "empty"
    UPLOADING = "uploading"
    FILLED = "filled"
    UPDATING = "updating"


class GateState(str, Enum):
    """Public listing gate states. Invalid and Disabled are terminal."""

    LOADING = "loading"
    INVALID = "invalid"
    DISABLED = "disabled"
    ENABLED = "enabled"


class NotificationVariant(str, Enum):
    """User-facing notification style."""

    DEFAULT = "default"
    DESTRUCTIVE = "destructive"
