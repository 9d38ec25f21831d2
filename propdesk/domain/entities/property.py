"""Property domain entity and its value parts (address, land details)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from propdesk.domain.enums import AreaUnit, PropertyStatus, PropertyType
from propdesk.domain.exceptions import ValidationException


def _optional_float(value: Any) -> float | None:
    """Numeric stored field that may be absent; other clients may store numbers as strings."""
    if value is None:
        return None
    try:
        return float(value)
    except TypeError as e:
        raise ValueError(f"Not a number: {value!r}") from e


@dataclass(frozen=True)
class Address:
    """Postal address; latitude/longitude are optional map coordinates."""

    street: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    landmark: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Address:
        data = data or {}
        return cls(
            street=data.get("street", "") or "",
            city=data.get("city", "") or "",
            state=data.get("state", "") or "",
            zip=data.get("zip", "") or "",
            landmark=data.get("landmark"),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zip": self.zip,
        }
        if self.landmark is not None:
            out["landmark"] = self.landmark
        if self.latitude is not None:
            out["latitude"] = self.latitude
        if self.longitude is not None:
            out["longitude"] = self.longitude
        return out


@dataclass(frozen=True)
class LandDetails:
    """Land area and registry numbers."""

    area: float
    area_unit: AreaUnit = AreaUnit.SQUARE_FEET
    khasra_number: str | None = None
    landbook_number: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> LandDetails:
        data = data or {}
        return cls(
            area=float(data.get("area") or 0),
            area_unit=AreaUnit(data.get("areaUnit") or AreaUnit.SQUARE_FEET.value),
            khasra_number=data.get("khasraNumber"),
            landbook_number=data.get("landbookNumber"),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"area": self.area, "areaUnit": self.area_unit.value}
        if self.khasra_number is not None:
            out["khasraNumber"] = self.khasra_number
        if self.landbook_number is not None:
            out["landbookNumber"] = self.landbook_number
        return out


@dataclass
class Property:
    """Owned real estate record.

    A property is publicly visible only when is_listed_publicly is set and it
    carries a listing price (see PublicVisibilityGate).
    """

    id: str
    owner_uid: str
    name: str
    address: Address
    land_details: LandDetails
    property_type: PropertyType
    purchase_date: datetime | None
    purchase_price: float
    status: PropertyStatus = PropertyStatus.OWNED
    is_listed_publicly: bool = False
    listing_price: float | None = None
    sold_price: float | None = None
    sold_date: datetime | None = None
    remarks: str | None = None
    land_type: str | None = None
    is_diverted: bool | None = None
    latitude: float | None = None
    longitude: float | None = None
    update_time: datetime | None = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate property business rules. Raises ValidationException if invalid."""
        if not self.owner_uid:
            raise ValidationException("Property must have an owner", field="ownerUid")
        if not self.name:
            raise ValidationException("Property name is required", field="name")

    def has_listing_price(self) -> bool:
        """Return True if a positive listing price is set."""
        return bool(self.listing_price) and self.listing_price > 0

    @property
    def is_sold(self) -> bool:
        return self.status == PropertyStatus.SOLD

    @classmethod
    def from_dict(
        cls,
        property_id: str,
        data: dict[str, Any],
        update_time: datetime | None = None,
    ) -> Property:
        """Build from a stored document (camelCase fields)."""
        raw_type = data.get("propertyType") or PropertyType.OPEN_LAND.value
        return cls(
            id=property_id,
            owner_uid=data.get("ownerUid", ""),
            name=data.get("name", ""),
            address=Address.from_dict(data.get("address")),
            land_details=LandDetails.from_dict(data.get("landDetails")),
            property_type=PropertyType(raw_type),
            purchase_date=data.get("purchaseDate"),
            purchase_price=float(data.get("purchasePrice") or 0),
            status=PropertyStatus(data.get("status") or PropertyStatus.OWNED.value),
            is_listed_publicly=bool(data.get("isListedPublicly", False)),
            listing_price=_optional_float(data.get("listingPrice")),
            sold_price=_optional_float(data.get("soldPrice")),
            sold_date=data.get("soldDate"),
            remarks=data.get("remarks"),
            land_type=data.get("landType"),
            is_diverted=data.get("isDiverted"),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            update_time=update_time,
        )

    def to_dict(self) -> dict[str, Any]:
        """Stored document fields (id is the document key, not a field)."""
        out: dict[str, Any] = {
            "name": self.name,
            "ownerUid": self.owner_uid,
            "address": self.address.to_dict(),
            "landDetails": self.land_details.to_dict(),
            "propertyType": self.property_type.value,
            "purchaseDate": self.purchase_date,
            "purchasePrice": self.purchase_price,
            "status": self.status.value,
            "isListedPublicly": self.is_listed_publicly,
        }
        optional = {
            "listingPrice": self.listing_price,
            "soldPrice": self.sold_price,
            "soldDate": self.sold_date,
            "remarks": self.remarks,
            "landType": self.land_type,
            "isDiverted": self.is_diverted,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }
        out.update({k: v for k, v in optional.items() if v is not None})
        return out
