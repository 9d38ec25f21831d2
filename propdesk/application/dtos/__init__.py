"""Application DTOs (no store backend dependency)."""

from propdesk.application.dtos.conversion import (
    ConversionResult,
    PropertyDraft,
)
from propdesk.application.dtos.documents import (
    DocumentRecord,
    DocumentSlot,
    FilePayload,
    MediaFile,
    SlotOperationResult,
    SlotView,
)
from propdesk.application.dtos.listings import PublicListingsView, PublicPropertyDetail
from propdesk.application.dtos.notification import Notification
from propdesk.application.dtos.store import (
    SERVER_TIMESTAMP,
    FieldFilter,
    Precondition,
    Snapshot,
    StoredDocument,
    Write,
    WriteBatch,
    WriteKind,
)

__all__ = [
    "SERVER_TIMESTAMP",
    "ConversionResult",
    "DocumentRecord",
    "DocumentSlot",
    "FieldFilter",
    "FilePayload",
    "MediaFile",
    "Notification",
    "Precondition",
    "PropertyDraft",
    "PublicListingsView",
    "PublicPropertyDetail",
    "SlotOperationResult",
    "SlotView",
    "Snapshot",
    "StoredDocument",
    "Write",
    "WriteBatch",
    "WriteKind",
]
