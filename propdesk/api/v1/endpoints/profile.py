"""Owner profile API (the caller's own profile)."""

from typing import Annotated

from fastapi import APIRouter, Depends

from propdesk.api.v1.dependencies import get_identity, get_profile_service
from propdesk.application.use_cases.entities import OwnerProfileService
from propdesk.schemas.profile import ProfileResponse, ProfileUpdateRequest

router = APIRouter()


@router.get("", response_model=ProfileResponse)
async def get_profile(
    identity: Annotated[str, Depends(get_identity)],
    profiles: Annotated[OwnerProfileService, Depends(get_profile_service)],
):
    return ProfileResponse.model_validate(await profiles.get_profile(identity))


@router.patch("", response_model=ProfileResponse)
async def update_profile(
    body: ProfileUpdateRequest,
    identity: Annotated[str, Depends(get_identity)],
    profiles: Annotated[OwnerProfileService, Depends(get_profile_service)],
):
    """Edit display name, contact numbers or the public listings switch."""
    updated = await profiles.update_profile(identity, body.to_store())
    return ProfileResponse.model_validate(updated)
