"""Document checklist and media API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from propdesk.application.dtos.documents import SlotOperationResult, SlotView
from propdesk.application.dtos.notification import Notification
from propdesk.domain.enums import NotificationVariant, SlotState


class NotificationResponse(BaseModel):
    """User-facing notification for an operation."""

    model_config = ConfigDict(from_attributes=True)

    title: str
    description: str
    variant: NotificationVariant = NotificationVariant.DEFAULT

    @classmethod
    def from_notification(cls, notification: Notification) -> "NotificationResponse":
        return cls.model_validate(notification)


class DocumentRecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    document_type: str
    file_name: str
    url: str
    content_type: str
    size_bytes: int
    upload_timestamp: datetime | None = None


class SlotViewResponse(BaseModel):
    """One checklist row."""

    slot_id: str
    display_name: str
    state: SlotState
    record: DocumentRecordResponse | None = None

    @classmethod
    def from_view(cls, view: SlotView) -> "SlotViewResponse":
        return cls(
            slot_id=view.slot.slot_id,
            display_name=view.slot.display_name,
            state=view.state,
            record=DocumentRecordResponse.model_validate(view.record) if view.record else None,
        )


class ChecklistResponse(BaseModel):
    """Required documents of one entity, in catalog order."""

    entity_collection: str
    entity_id: str
    slots: list[SlotViewResponse]


class SlotOperationResponse(BaseModel):
    """Outcome of an upload or delete on a slot."""

    slot_id: str
    ok: bool
    notification: NotificationResponse
    error_code: str | None = None
    url: str | None = None
    state: SlotState | None = Field(default=None, description="Confirmed slot state after the operation")

    @classmethod
    def from_result(cls, result: SlotOperationResult, state: SlotState | None = None) -> "SlotOperationResponse":
        return cls(
            slot_id=result.slot_id,
            ok=result.ok,
            notification=NotificationResponse.from_notification(result.notification),
            error_code=result.error_code,
            url=result.url,
            state=state,
        )


class DocumentViewResponse(BaseModel):
    """URL for inline preview of the document in a slot."""

    slot_id: str
    url: str


class MediaFileResponse(BaseModel):
    """One gallery item."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    file_name: str
    url: str
    content_type: str
    size_bytes: int
    upload_timestamp: datetime | None = None
