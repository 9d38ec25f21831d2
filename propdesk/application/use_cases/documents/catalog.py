"""Fixed catalog of required document slots."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from propdesk.application.dtos.documents import DocumentSlot

REQUIRED_DOCUMENTS: tuple[DocumentSlot, ...] = (
    DocumentSlot("registry-document", "Registry Document"),
    DocumentSlot("land-book", "Land Book (Bhu Pustika) Document"),
    DocumentSlot("owner-aadhaar-card", "Owner's Aadhaar Card"),
    DocumentSlot("owner-pan-card", "Owner's PAN Card"),
)


class DocumentCatalog:
    """Ordered, immutable set of slots; slot ids are unique."""

    def __init__(self, slots: Sequence[DocumentSlot] = REQUIRED_DOCUMENTS) -> None:
        self._slots = tuple(slots)
        self._by_id = {s.slot_id: s for s in self._slots}
        if len(self._by_id) != len(self._slots):
            raise ValueError("Duplicate slot id in document catalog")

    def get(self, slot_id: str) -> DocumentSlot | None:
        return self._by_id.get(slot_id)

    def __contains__(self, slot_id: object) -> bool:
        return slot_id in self._by_id

    def __iter__(self) -> Iterator[DocumentSlot]:
        return iter(self._slots)

    def __len__(self) -> int:
        return len(self._slots)


DEFAULT_CATALOG = DocumentCatalog()
