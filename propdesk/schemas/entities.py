"""Prospect and property API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from propdesk.application.dtos.conversion import ConversionResult, PropertyDraft
from propdesk.domain.enums import AreaUnit, PropertyStatus, PropertyType, ProspectStatus
from propdesk.schemas.base import StoreFieldsModel


class AddressIn(StoreFieldsModel):
    street: str = Field(default="", max_length=500)
    city: str = Field(default="", max_length=200)
    state: str = Field(default="", max_length=200)
    zip: str = Field(default="", max_length=20)
    landmark: str | None = Field(default=None, max_length=500)
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)


class LandDetailsIn(StoreFieldsModel):
    area: float = Field(..., gt=0)
    area_unit: AreaUnit = AreaUnit.SQUARE_FEET
    khasra_number: str | None = Field(default=None, max_length=100)
    landbook_number: str | None = Field(default=None, max_length=100)


class ProspectCreateRequest(StoreFieldsModel):
    """Request body for creating a prospect."""

    name: str = Field(..., min_length=1, max_length=500)
    address: AddressIn = Field(default_factory=AddressIn)
    status: ProspectStatus | None = None
    property_type: PropertyType | None = None
    contact_info: str | None = Field(default=None, max_length=1000)


class PropertyDraftIn(BaseModel):
    """Values for the derived property that a prospect does not carry."""

    area: float = Field(default=1.0, gt=0)
    area_unit: AreaUnit = AreaUnit.SQUARE_FEET
    purchase_price: float = Field(default=1.0, gt=0)
    purchase_date: datetime | None = None
    property_type: PropertyType | None = None
    remarks: str | None = Field(default=None, max_length=2000)

    def to_draft(self) -> PropertyDraft:
        return PropertyDraft(
            area=self.area,
            area_unit=self.area_unit,
            purchase_price=self.purchase_price,
            purchase_date=self.purchase_date,
            property_type=self.property_type,
            remarks=self.remarks,
        )


class ProspectUpdateRequest(StoreFieldsModel):
    """Request body for editing a prospect (partial).

    Setting status to Converted converts the prospect; property_draft then
    shapes the new property and is never stored on the prospect.
    """

    name: str | None = Field(default=None, min_length=1, max_length=500)
    address: AddressIn | None = None
    status: ProspectStatus | None = None
    property_type: PropertyType | None = None
    contact_info: str | None = Field(default=None, max_length=1000)
    property_draft: PropertyDraftIn | None = Field(default=None, exclude=True)


class PropertyCreateRequest(StoreFieldsModel):
    """Request body for creating a property."""

    name: str = Field(..., min_length=1, max_length=500)
    address: AddressIn = Field(default_factory=AddressIn)
    land_details: LandDetailsIn
    property_type: PropertyType = PropertyType.OPEN_LAND
    purchase_date: datetime | None = None
    purchase_price: float = Field(..., gt=0)
    status: PropertyStatus = PropertyStatus.OWNED
    is_listed_publicly: bool = False
    listing_price: float | None = Field(default=None, ge=0)
    remarks: str | None = Field(default=None, max_length=2000)
    land_type: str | None = Field(default=None, max_length=100)
    is_diverted: bool | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)

    def to_store(self) -> dict[str, Any]:
        # Defaults count as sent on create.
        return self.model_dump(by_alias=True, exclude_none=True)


class PropertyUpdateRequest(StoreFieldsModel):
    """Request body for editing a property (partial)."""

    name: str | None = Field(default=None, min_length=1, max_length=500)
    address: AddressIn | None = None
    land_details: LandDetailsIn | None = None
    property_type: PropertyType | None = None
    purchase_date: datetime | None = None
    purchase_price: float | None = Field(default=None, gt=0)
    status: PropertyStatus | None = None
    is_listed_publicly: bool | None = None
    listing_price: float | None = Field(default=None, ge=0)
    remarks: str | None = Field(default=None, max_length=2000)
    land_type: str | None = Field(default=None, max_length=100)
    is_diverted: bool | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)


class MarkSoldRequest(BaseModel):
    sold_price: float = Field(..., gt=0)
    sold_date: datetime | None = None


class ListingRequest(BaseModel):
    """Turn the public listing on or off."""

    listed: bool
    listing_price: float | None = Field(default=None, ge=0)


class AddressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    street: str
    city: str
    state: str
    zip: str
    landmark: str | None = None
    latitude: float | None = None
    longitude: float | None = None


class LandDetailsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    area: float
    area_unit: AreaUnit
    khasra_number: str | None = None
    landbook_number: str | None = None


class ProspectResponse(BaseModel):
    """Prospect response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_uid: str
    name: str
    address: AddressResponse
    status: ProspectStatus
    property_type: PropertyType | None = None
    contact_info: str | None = None
    date_added: datetime | None = None
    update_time: datetime | None = None


class PropertyResponse(BaseModel):
    """Property response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_uid: str
    name: str
    address: AddressResponse
    land_details: LandDetailsResponse
    property_type: PropertyType
    purchase_date: datetime | None = None
    purchase_price: float
    status: PropertyStatus
    is_listed_publicly: bool
    listing_price: float | None = None
    sold_price: float | None = None
    sold_date: datetime | None = None
    remarks: str | None = None
    land_type: str | None = None
    is_diverted: bool | None = None
    latitude: float | None = None
    longitude: float | None = None
    update_time: datetime | None = None


class ConversionResponse(BaseModel):
    """Result of converting a prospect to a property."""

    model_config = ConfigDict(from_attributes=True)

    prospect_id: str
    new_property_id: str

    @classmethod
    def from_result(cls, result: ConversionResult) -> "ConversionResponse":
        return cls.model_validate(result)
