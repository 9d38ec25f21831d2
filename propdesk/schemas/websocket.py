"""WebSocket message schemas (server to client)."""

from typing import Literal

from pydantic import BaseModel

from propdesk.schemas.documents import NotificationResponse, SlotViewResponse
from propdesk.schemas.listings import PublicListingsResponse


class ChecklistMessage(BaseModel):
    """Full checklist, sent on every change."""

    type: Literal["checklist"] = "checklist"
    version: int
    slots: list[SlotViewResponse]


class NotificationMessage(BaseModel):
    type: Literal["notification"] = "notification"
    notification: NotificationResponse


class PublicListingsMessage(BaseModel):
    """Gate state with the current listings, sent on every change."""

    type: Literal["listings"] = "listings"
    view: PublicListingsResponse


class ErrorMessage(BaseModel):
    type: Literal["error"] = "error"
    error: str
    message: str
