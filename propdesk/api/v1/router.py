"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from propdesk.api.v1.dependencies (no manual store/service construction).
"""

from fastapi import APIRouter

from propdesk.api.v1.endpoints import (
    documents,
    health,
    media,
    profile,
    properties,
    prospects,
    public_listings,
    websocket as ws_endpoint,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(prospects.router, prefix="/prospects", tags=["prospects"])
api_router.include_router(properties.router, prefix="/properties", tags=["properties"])
api_router.include_router(documents.router, tags=["documents"])
api_router.include_router(media.router, tags=["media"])
api_router.include_router(profile.router, prefix="/profile", tags=["profile"])
api_router.include_router(
    public_listings.router, prefix="/public-listings", tags=["public-listings"]
)
api_router.include_router(ws_endpoint.router, tags=["websocket"])
