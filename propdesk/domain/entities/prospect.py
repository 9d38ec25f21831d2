"""Prospect domain entity (a property not yet acquired)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from propdesk.domain.entities.property import Address
from propdesk.domain.enums import PropertyType, ProspectStatus
from propdesk.domain.exceptions import ValidationException


@dataclass
class Prospect:
    """Domain entity for a prospect.

    A prospect converts to a Property at most once; after conversion its
    status is Converted and stays that way.
    """

    id: str
    owner_uid: str
    name: str
    address: Address
    status: ProspectStatus = ProspectStatus.NEW
    property_type: PropertyType | None = None
    contact_info: str | None = None
    date_added: datetime | None = None
    update_time: datetime | None = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate prospect business rules. Raises ValidationException if invalid."""
        if not self.owner_uid:
            raise ValidationException("Prospect must have an owner", field="ownerUid")
        if not self.name:
            raise ValidationException("Prospect name is required", field="name")

    @property
    def is_converted(self) -> bool:
        return self.status == ProspectStatus.CONVERTED

    @classmethod
    def from_dict(
        cls,
        prospect_id: str,
        data: dict[str, Any],
        update_time: datetime | None = None,
    ) -> Prospect:
        """Build from a stored document (camelCase fields)."""
        raw_type = data.get("propertyType")
        return cls(
            id=prospect_id,
            owner_uid=data.get("ownerUid", ""),
            name=data.get("name", ""),
            address=Address.from_dict(data.get("address")),
            status=ProspectStatus(data.get("status") or ProspectStatus.NEW.value),
            property_type=PropertyType(raw_type) if raw_type else None,
            contact_info=data.get("contactInfo"),
            date_added=data.get("dateAdded"),
            update_time=update_time,
        )

    def to_dict(self) -> dict[str, Any]:
        """Stored document fields (id is the document key, not a field)."""
        out: dict[str, Any] = {
            "name": self.name,
            "ownerUid": self.owner_uid,
            "address": self.address.to_dict(),
            "status": self.status.value,
            "dateAdded": self.date_added,
            "contactInfo": self.contact_info,
        }
        if self.property_type is not None:
            out["propertyType"] = self.property_type.value
        return out
