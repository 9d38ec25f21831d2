"""Public listing API. No identity required; owners opt in through their profile."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from propdesk.api.v1.dependencies import get_public_listing_service
from propdesk.application.use_cases.listings import PublicListingService
from propdesk.schemas.listings import PublicListingsResponse, PublicPropertyResponse

router = APIRouter()


@router.get("", response_model=PublicListingsResponse)
async def get_public_listings(
    listings: Annotated[PublicListingService, Depends(get_public_listing_service)],
    owner: Annotated[str | None, Query(description="Owner token (user id)")] = None,
):
    """Gate state and the owner's publicly listed properties.

    Always 200: an unknown owner and one who has not opted in both read as
    disabled.
    """
    view = await listings.listings_view(owner)
    return PublicListingsResponse.from_view(view)


@router.get("/properties/{property_id}", response_model=PublicPropertyResponse)
async def get_public_property(
    property_id: str,
    listings: Annotated[PublicListingService, Depends(get_public_listing_service)],
):
    detail = await listings.get_public_property(property_id)
    return PublicPropertyResponse.from_detail(detail)
