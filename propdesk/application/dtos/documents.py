"""DTOs for document checklist and media operations (no store dependency)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from propdesk.application.dtos.notification import Notification
from propdesk.application.dtos.store import SERVER_TIMESTAMP, StoredDocument
from propdesk.domain.enums import SlotState


@dataclass(frozen=True)
class DocumentSlot:
    """One entry in the fixed catalog of required documents."""

    slot_id: str
    display_name: str


@dataclass(frozen=True)
class FilePayload:
    """Raw file handed to the blob uploader."""

    file_name: str
    content_type: str
    data: bytes

    @property
    def size_bytes(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class DocumentRecord:
    """Metadata of the document occupying one slot (record id == slot id).

    upload_timestamp is assigned by the store; None only while a write that
    used SERVER_TIMESTAMP has not been read back.
    """

    id: str
    document_type: str
    file_name: str
    url: str
    content_type: str
    size_bytes: int
    upload_timestamp: datetime | None = None

    @classmethod
    def from_stored(cls, doc: StoredDocument) -> DocumentRecord:
        data = doc.data
        return cls(
            id=doc.id,
            document_type=data.get("documentType", ""),
            file_name=data.get("fileName", ""),
            url=data.get("url", ""),
            content_type=data.get("contentType", ""),
            size_bytes=int(data.get("sizeBytes") or 0),
            upload_timestamp=data.get("uploadTimestamp"),
        )

    @classmethod
    def for_upload(cls, slot: DocumentSlot, payload: FilePayload, url: str) -> DocumentRecord:
        return cls(
            id=slot.slot_id,
            document_type=slot.display_name,
            file_name=payload.file_name,
            url=url,
            content_type=payload.content_type,
            size_bytes=payload.size_bytes,
        )

    def to_write(self) -> dict[str, Any]:
        """Fields for the upsert; uploadTimestamp is always server-assigned."""
        return {
            "id": self.id,
            "documentType": self.document_type,
            "fileName": self.file_name,
            "url": self.url,
            "contentType": self.content_type,
            "sizeBytes": self.size_bytes,
            "uploadTimestamp": SERVER_TIMESTAMP,
        }


@dataclass(frozen=True)
class SlotView:
    """Checklist row: slot, derived state, and the confirmed record if any."""

    slot: DocumentSlot
    state: SlotState
    record: DocumentRecord | None


@dataclass(frozen=True)
class SlotOperationResult:
    """Outcome of upload/delete on a slot, with the notification shown to the user."""

    slot_id: str
    ok: bool
    notification: Notification
    error_code: str | None = None
    url: str | None = None


@dataclass(frozen=True)
class MediaFile:
    """One gallery item under {collection}/{entityId}/media/{id}."""

    id: str
    file_name: str
    url: str
    content_type: str
    size_bytes: int
    upload_timestamp: datetime | None = None

    @classmethod
    def from_stored(cls, doc: StoredDocument) -> MediaFile:
        data = doc.data
        return cls(
            id=doc.id,
            file_name=data.get("fileName", ""),
            url=data.get("url", ""),
            content_type=data.get("contentType", ""),
            size_bytes=int(data.get("sizeBytes") or 0),
            upload_timestamp=data.get("uploadTimestamp"),
        )
