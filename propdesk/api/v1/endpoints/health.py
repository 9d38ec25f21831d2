"""Health check endpoint. No dependencies; used for liveness probes."""

from fastapi import APIRouter

from propdesk.core.config import get_settings
from propdesk.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return ok status with the configured backends."""
    settings = get_settings()
    return HealthResponse(store_backend=settings.store_backend, blob_backend=settings.blob_backend)
