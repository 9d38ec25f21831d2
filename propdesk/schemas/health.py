"""Health check API schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health (liveness)."""

    status: str = Field(default="ok", description="Service status")
    store_backend: str = Field(..., description="Configured document store backend")
    blob_backend: str = Field(..., description="Configured blob upload backend")
