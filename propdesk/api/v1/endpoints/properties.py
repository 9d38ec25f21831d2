"""Property API: portfolio, sales history, sale and public listing switches."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from propdesk.api.v1.dependencies import get_coordinator, get_entity_queries, get_identity
from propdesk.application.use_cases.entities import EntityQueryService, EntityTransitionCoordinator
from propdesk.domain.enums import EntityCollection
from propdesk.schemas.entities import (
    ListingRequest,
    MarkSoldRequest,
    PropertyCreateRequest,
    PropertyResponse,
    PropertyUpdateRequest,
)

router = APIRouter()


@router.get("", response_model=list[PropertyResponse])
async def list_properties(
    identity: Annotated[str, Depends(get_identity)],
    queries: Annotated[EntityQueryService, Depends(get_entity_queries)],
):
    """The caller's properties that are not sold."""
    properties = await queries.list_properties(identity)
    return [PropertyResponse.model_validate(p) for p in properties]


@router.get("/sold", response_model=list[PropertyResponse])
async def list_sold_properties(
    identity: Annotated[str, Depends(get_identity)],
    queries: Annotated[EntityQueryService, Depends(get_entity_queries)],
):
    """Sales history."""
    properties = await queries.list_sold_properties(identity)
    return [PropertyResponse.model_validate(p) for p in properties]


@router.post("", response_model=PropertyResponse, status_code=201)
async def create_property(
    body: PropertyCreateRequest,
    identity: Annotated[str, Depends(get_identity)],
    coordinator: Annotated[EntityTransitionCoordinator, Depends(get_coordinator)],
):
    created = await coordinator.create_property(identity, body.to_store())
    return PropertyResponse.model_validate(created)


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(
    property_id: str,
    identity: Annotated[str, Depends(get_identity)],
    queries: Annotated[EntityQueryService, Depends(get_entity_queries)],
):
    prop = await queries.get_property(identity, property_id)
    return PropertyResponse.model_validate(prop)


@router.patch("/{property_id}", response_model=PropertyResponse)
async def update_property(
    property_id: str,
    body: PropertyUpdateRequest,
    identity: Annotated[str, Depends(get_identity)],
    coordinator: Annotated[EntityTransitionCoordinator, Depends(get_coordinator)],
):
    updated = await coordinator.update_entity(
        identity, EntityCollection.PROPERTIES, property_id, body.to_store()
    )
    return PropertyResponse.model_validate(updated)


@router.post("/{property_id}/sold", response_model=PropertyResponse)
async def mark_property_sold(
    property_id: str,
    body: MarkSoldRequest,
    identity: Annotated[str, Depends(get_identity)],
    coordinator: Annotated[EntityTransitionCoordinator, Depends(get_coordinator)],
):
    """Record the sale; the property leaves the portfolio and the public listing."""
    sold = await coordinator.mark_property_sold(identity, property_id, body.sold_price, body.sold_date)
    return PropertyResponse.model_validate(sold)


@router.put("/{property_id}/listing", response_model=PropertyResponse)
async def set_public_listing(
    property_id: str,
    body: ListingRequest,
    identity: Annotated[str, Depends(get_identity)],
    coordinator: Annotated[EntityTransitionCoordinator, Depends(get_coordinator)],
):
    updated = await coordinator.set_public_listing(identity, property_id, body.listed, body.listing_price)
    return PropertyResponse.model_validate(updated)


@router.delete("/{property_id}", status_code=204)
async def delete_property(
    property_id: str,
    identity: Annotated[str, Depends(get_identity)],
    coordinator: Annotated[EntityTransitionCoordinator, Depends(get_coordinator)],
) -> Response:
    await coordinator.delete_entity(identity, EntityCollection.PROPERTIES, property_id)
    return Response(status_code=204)
