"""DTOs for prospect conversion and entity edits."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from propdesk.domain.enums import AreaUnit, PropertyType


@dataclass(frozen=True)
class PropertyDraft:
    """Values for Property fields a prospect does not carry.

    Area and purchase price default to 1 so the derived property passes
    non-zero validation until the owner edits the real values.
    """

    area: float = 1.0
    area_unit: AreaUnit = AreaUnit.SQUARE_FEET
    purchase_price: float = 1.0
    purchase_date: datetime | None = None
    property_type: PropertyType | None = None
    remarks: str | None = None


@dataclass(frozen=True)
class ConversionResult:
    """Result of a committed conversion."""

    prospect_id: str
    new_property_id: str

