"""Pydantic request/response schemas for the API."""

from propdesk.schemas.documents import (
    ChecklistResponse,
    DocumentRecordResponse,
    DocumentViewResponse,
    MediaFileResponse,
    NotificationResponse,
    SlotOperationResponse,
    SlotViewResponse,
)
from propdesk.schemas.entities import (
    ConversionResponse,
    ListingRequest,
    MarkSoldRequest,
    PropertyCreateRequest,
    PropertyDraftIn,
    PropertyResponse,
    PropertyUpdateRequest,
    ProspectCreateRequest,
    ProspectResponse,
    ProspectUpdateRequest,
)
from propdesk.schemas.health import HealthResponse
from propdesk.schemas.listings import (
    PublicListingResponse,
    PublicListingsResponse,
    PublicPropertyResponse,
)
from propdesk.schemas.profile import ProfileResponse, ProfileUpdateRequest
from propdesk.schemas.websocket import (
    ChecklistMessage,
    ErrorMessage,
    NotificationMessage,
    PublicListingsMessage,
)

__all__ = [
    "ChecklistMessage",
    "ChecklistResponse",
    "ConversionResponse",
    "DocumentRecordResponse",
    "DocumentViewResponse",
    "ErrorMessage",
    "HealthResponse",
    "ListingRequest",
    "MarkSoldRequest",
    "MediaFileResponse",
    "NotificationMessage",
    "NotificationResponse",
    "ProfileResponse",
    "ProfileUpdateRequest",
    "PropertyCreateRequest",
    "PropertyDraftIn",
    "PropertyResponse",
    "PropertyUpdateRequest",
    "ProspectCreateRequest",
    "ProspectResponse",
    "ProspectUpdateRequest",
    "PublicListingResponse",
    "PublicListingsResponse",
    "PublicListingsMessage",
    "PublicPropertyResponse",
    "SlotOperationResponse",
    "SlotViewResponse",
]
