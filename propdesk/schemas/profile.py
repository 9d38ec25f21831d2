"""Owner profile API schemas."""

from pydantic import BaseModel, ConfigDict, Field

from propdesk.schemas.base import StoreFieldsModel


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    uid: str
    display_name: str
    public_listings_enabled: bool
    primary_number: str | None = None
    secondary_number: str | None = None
    email: str | None = None


class ProfileUpdateRequest(StoreFieldsModel):
    """Request body for editing the profile (partial)."""

    display_name: str | None = Field(default=None, max_length=200)
    public_listings_enabled: bool | None = None
    primary_number: str | None = Field(default=None, max_length=32)
    secondary_number: str | None = Field(default=None, max_length=32)
    email: str | None = Field(default=None, max_length=320)
