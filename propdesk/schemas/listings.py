"""Public listing API schemas.

Public responses carry only what a visitor may see: no owner id, purchase
price or remarks.
"""

from pydantic import BaseModel, ConfigDict

from propdesk.application.dtos.listings import PublicListingsView, PublicPropertyDetail
from propdesk.domain.enums import GateState, PropertyType
from propdesk.schemas.documents import MediaFileResponse
from propdesk.schemas.entities import AddressResponse, LandDetailsResponse


class PublicListingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    address: AddressResponse
    land_details: LandDetailsResponse
    property_type: PropertyType
    listing_price: float
    land_type: str | None = None
    latitude: float | None = None
    longitude: float | None = None


class PublicListingsResponse(BaseModel):
    """Gate state plus the visible listings (empty unless enabled)."""

    state: GateState
    owner_display_name: str | None = None
    listings: list[PublicListingResponse]

    @classmethod
    def from_view(cls, view: PublicListingsView) -> "PublicListingsResponse":
        return cls(
            state=view.state,
            owner_display_name=view.owner_display_name,
            listings=[PublicListingResponse.model_validate(p) for p in view.listings],
        )


class PublicPropertyResponse(BaseModel):
    """One public property with its gallery."""

    property: PublicListingResponse
    media: list[MediaFileResponse]

    @classmethod
    def from_detail(cls, detail: PublicPropertyDetail) -> "PublicPropertyResponse":
        return cls(
            property=PublicListingResponse.model_validate(detail.property),
            media=[MediaFileResponse.model_validate(m) for m in detail.media],
        )
