"""Document store interface (port) for the application layer.

Backends: Firestore (REST + change feed) and an in-process memory store.
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from propdesk.application.dtos.store import (
        FieldFilter,
        Snapshot,
        StoredDocument,
        Write,
        WriteBatch,
    )


class ISubscription(Protocol):
    """Live query: an ordered stream of full snapshots until cancelled.

    Each snapshot replaces the previous one. cancel() stops the producer;
    calling it again is a no-op. Iterating after a producer error raises
    that error once, then the stream ends.
    """

    def __aiter__(self) -> AsyncIterator[Snapshot]:
        ...

    async def __anext__(self) -> Snapshot:
        ...

    async def cancel(self) -> None:
        """Stop the subscription and release its producer."""

    @property
    def closed(self) -> bool:
        ...


class IDocumentStore(Protocol):
    """Protocol for a strongly consistent document store (DIP)."""

    def new_id(self) -> str:
        """Return a fresh document id."""

    async def get(self, path: str) -> StoredDocument | None:
        """Return the document at path or None if missing."""

    async def set(self, path: str, data: dict[str, Any]) -> None:
        """Replace the whole document at path."""

    async def upsert(self, path: str, data: dict[str, Any]) -> None:
        """Overwrite fields present in data, keep others, create if missing."""

    async def update(self, path: str, data: dict[str, Any]) -> None:
        """Upsert requiring the document to exist (ResourceNotFoundException otherwise)."""

    async def delete(self, path: str) -> None:
        """Delete the document at path (no error if already missing)."""

    def batch(self) -> WriteBatch:
        """Return a new atomic write batch bound to this store."""

    async def commit(self, writes: Sequence[Write]) -> None:
        """Apply all writes atomically: all land or none do."""

    async def query(
        self,
        collection_path: str,
        filters: Sequence[FieldFilter] = (),
    ) -> Snapshot:
        """Return matching documents ordered by id."""

    def subscribe(
        self,
        collection_path: str,
        filters: Sequence[FieldFilter] = (),
    ) -> ISubscription:
        """Start a live query on collection_path. Must be called inside a running loop."""

    async def aclose(self) -> None:
        """Release connections held by the store."""
