"""Prospect API: thin routes delegating to EntityQueryService and EntityTransitionCoordinator."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from propdesk.api.v1.dependencies import get_coordinator, get_entity_queries, get_identity
from propdesk.application.dtos.conversion import ConversionResult
from propdesk.application.use_cases.entities import EntityQueryService, EntityTransitionCoordinator
from propdesk.domain.enums import EntityCollection
from propdesk.schemas.entities import (
    ConversionResponse,
    PropertyDraftIn,
    ProspectCreateRequest,
    ProspectResponse,
    ProspectUpdateRequest,
)

router = APIRouter()


@router.get("", response_model=list[ProspectResponse])
async def list_prospects(
    identity: Annotated[str, Depends(get_identity)],
    queries: Annotated[EntityQueryService, Depends(get_entity_queries)],
):
    """The caller's prospects that are not converted yet."""
    prospects = await queries.list_prospects(identity)
    return [ProspectResponse.model_validate(p) for p in prospects]


@router.post("", response_model=ProspectResponse, status_code=201)
async def create_prospect(
    body: ProspectCreateRequest,
    identity: Annotated[str, Depends(get_identity)],
    coordinator: Annotated[EntityTransitionCoordinator, Depends(get_coordinator)],
):
    created = await coordinator.create_prospect(identity, body.to_store())
    return ProspectResponse.model_validate(created)


@router.get("/{prospect_id}", response_model=ProspectResponse)
async def get_prospect(
    prospect_id: str,
    identity: Annotated[str, Depends(get_identity)],
    queries: Annotated[EntityQueryService, Depends(get_entity_queries)],
):
    prospect = await queries.get_prospect(identity, prospect_id)
    return ProspectResponse.model_validate(prospect)


@router.patch("/{prospect_id}", response_model=ProspectResponse | ConversionResponse)
async def update_prospect(
    prospect_id: str,
    body: ProspectUpdateRequest,
    identity: Annotated[str, Depends(get_identity)],
    coordinator: Annotated[EntityTransitionCoordinator, Depends(get_coordinator)],
):
    """Edit a prospect. Setting status to Converted converts it to a property."""
    draft = body.property_draft.to_draft() if body.property_draft else None
    saved = await coordinator.save_prospect(identity, prospect_id, body.to_store(), draft)
    if isinstance(saved, ConversionResult):
        return ConversionResponse.from_result(saved)
    return ProspectResponse.model_validate(saved)


@router.post("/{prospect_id}/convert", response_model=ConversionResponse, status_code=201)
async def convert_prospect(
    prospect_id: str,
    identity: Annotated[str, Depends(get_identity)],
    coordinator: Annotated[EntityTransitionCoordinator, Depends(get_coordinator)],
    body: PropertyDraftIn | None = None,
):
    """Create a property from the prospect and mark the prospect Converted (atomic)."""
    result = await coordinator.convert_by_id(identity, prospect_id, body.to_draft() if body else None)
    return ConversionResponse.from_result(result)


@router.delete("/{prospect_id}", status_code=204)
async def delete_prospect(
    prospect_id: str,
    identity: Annotated[str, Depends(get_identity)],
    coordinator: Annotated[EntityTransitionCoordinator, Depends(get_coordinator)],
) -> Response:
    await coordinator.delete_entity(identity, EntityCollection.PROSPECTS, prospect_id)
    return Response(status_code=204)
