"""IDocumentStore backed by the Firestore REST API.

Live queries re-run the query whenever the change feed reports a commit on
the collection (or a poll interval elapses) and deliver a snapshot only when
the result differs from the last one delivered.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from propdesk.application.dtos.store import (
    FieldFilter,
    Snapshot,
    StoredDocument,
    Write,
    WriteBatch,
    WriteKind,
    document_id,
    parent_collection,
)
from propdesk.infrastructure.firebase._rest_client import DocumentSnapshot, FirestoreRESTClient
from propdesk.infrastructure.messaging.change_feed import (
    StoreChangePublisher,
    StoreChangeSubscriber,
    poll_ticks,
)
from propdesk.infrastructure.messaging.subscription import QueueSubscription
from propdesk.shared.utils import generate_cuid

logger = logging.getLogger(__name__)


def _to_stored(path: str, snap: DocumentSnapshot) -> StoredDocument:
    return StoredDocument(id=snap.id, path=path, data=snap.to_dict(), update_time=snap.update_time)


class FirestoreDocumentStore:
    """Firestore-backed document store with a Redis change feed."""

    def __init__(
        self,
        client: FirestoreRESTClient,
        *,
        publisher: StoreChangePublisher | None = None,
        subscriber: StoreChangeSubscriber | None = None,
        poll_seconds: float = 5.0,
    ) -> None:
        self._client = client
        self._publisher = publisher
        self._subscriber = subscriber
        self._poll_seconds = poll_seconds

    def new_id(self) -> str:
        return generate_cuid()

    async def get(self, path: str) -> StoredDocument | None:
        snap = await self._client.document(path).get()
        if snap is None:
            return None
        return _to_stored(path, snap)

    async def set(self, path: str, data: dict[str, Any]) -> None:
        await self.commit([Write(WriteKind.SET, path, dict(data))])

    async def upsert(self, path: str, data: dict[str, Any]) -> None:
        await self.commit([Write(WriteKind.UPSERT, path, dict(data))])

    async def update(self, path: str, data: dict[str, Any]) -> None:
        await self.commit([Write(WriteKind.UPDATE, path, dict(data))])

    async def delete(self, path: str) -> None:
        await self.commit([Write(WriteKind.DELETE, path)])

    def batch(self) -> WriteBatch:
        return WriteBatch(self)

    async def commit(self, writes: Sequence[Write]) -> None:
        """Commit atomically, then announce the touched collections on the change feed."""
        if not writes:
            return
        await self._client.commit(writes)
        if self._publisher is None:
            return
        touched: dict[str, list[str]] = {}
        for w in writes:
            touched.setdefault(parent_collection(w.path), []).append(document_id(w.path))
        for collection_path, ids in touched.items():
            await self._publisher.publish(collection_path, ids)

    async def query(
        self, collection_path: str, filters: Iterable[FieldFilter] = ()
    ) -> Snapshot:
        ref = self._client.collection(collection_path)
        filters = tuple(filters)
        q = ref.where(filters[0].field, filters[0].op, filters[0].value) if filters else None
        for f in filters[1:]:
            q = q.where(f.field, f.op, f.value)
        stream = q.stream() if q is not None else ref.stream()
        docs = [
            _to_stored(f"{collection_path}/{snap.id}", snap) async for snap in stream
        ]
        return tuple(sorted(docs, key=lambda d: d.id))

    def subscribe(
        self, collection_path: str, filters: Iterable[FieldFilter] = ()
    ) -> QueueSubscription:
        """Live query over collection_path; first snapshot is delivered right away."""
        filter_tuple = tuple(filters)

        async def produce(subscription: QueueSubscription) -> None:
            if self._subscriber is not None:
                ticks = self._subscriber.watch(collection_path, self._poll_seconds)
            else:
                ticks = poll_ticks(self._poll_seconds)
            last: Snapshot | None = None
            try:
                async for _ in ticks:
                    snapshot = await self.query(collection_path, filter_tuple)
                    if snapshot != last:
                        subscription.push(snapshot)
                        last = snapshot
            finally:
                await ticks.aclose()

        return QueueSubscription(f"firestore:{collection_path}", produce)

    async def aclose(self) -> None:
        await self._client.aclose()
        for feed in (self._publisher, self._subscriber):
            if feed is not None:
                await feed.disconnect()
