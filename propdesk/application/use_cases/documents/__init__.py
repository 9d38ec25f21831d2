"""Document use cases: required-document checklist and media gallery."""

from propdesk.application.use_cases.documents.catalog import (
    DEFAULT_CATALOG,
    REQUIRED_DOCUMENTS,
    DocumentCatalog,
)
from propdesk.application.use_cases.documents.checklist_engine import DocumentChecklistEngine
from propdesk.application.use_cases.documents.in_flight import SlotInFlightTracker
from propdesk.application.use_cases.documents.media_gallery import (
    MediaGallery,
    media_from_snapshot,
)

__all__ = [
    "DEFAULT_CATALOG",
    "REQUIRED_DOCUMENTS",
    "DocumentCatalog",
    "DocumentChecklistEngine",
    "MediaGallery",
    "SlotInFlightTracker",
    "media_from_snapshot",
]
