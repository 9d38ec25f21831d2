"""Process-local document store for development and tests.

Same contract as the Firestore backend: atomic batches, preconditions,
server timestamps and live query snapshots. State lives in this process only.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from propdesk.application.dtos.store import (
    SERVER_TIMESTAMP,
    FieldFilter,
    Snapshot,
    StoredDocument,
    Write,
    WriteBatch,
    WriteKind,
    document_id,
    parent_collection,
)
from propdesk.domain.exceptions import ResourceNotFoundException
from propdesk.infrastructure.exceptions import PreconditionFailedError
from propdesk.infrastructure.messaging.subscription import QueueSubscription
from propdesk.shared.utils import generate_cuid, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Entry:
    data: dict[str, Any]
    update_time: datetime


@dataclass(frozen=True)
class _Listener:
    collection_path: str
    filters: tuple[FieldFilter, ...]
    subscription: QueueSubscription


_SUPPORTED_OPS = ("==", "!=")


def _check_filters(filters: tuple[FieldFilter, ...]) -> tuple[FieldFilter, ...]:
    for f in filters:
        if f.op not in _SUPPORTED_OPS:
            raise ValueError(f"Unsupported filter operator: {f.op!r}")
    return filters


def _matches(data: dict[str, Any], filters: tuple[FieldFilter, ...]) -> bool:
    for f in filters:
        value = data.get(f.field)
        if f.op == "==":
            if value != f.value:
                return False
        elif f.op == "!=":
            if value == f.value:
                return False
        else:
            raise ValueError(f"Unsupported filter operator: {f.op!r}")
    return True


def _resolve(data: dict[str, Any], now: datetime) -> dict[str, Any]:
    return {
        key: now if value is SERVER_TIMESTAMP else copy.deepcopy(value)
        for key, value in data.items()
    }


class InMemoryDocumentStore:
    """IDocumentStore kept in a dict of path -> document.

    commit() stages every write on a copy and swaps it in only when all
    writes applied, so a failing batch leaves no trace.
    """

    def __init__(self) -> None:
        self._docs: dict[str, _Entry] = {}
        self._listeners: list[_Listener] = []
        self._last_commit: datetime | None = None

    def new_id(self) -> str:
        return generate_cuid()

    async def get(self, path: str) -> StoredDocument | None:
        entry = self._docs.get(path)
        if entry is None:
            return None
        return StoredDocument(
            id=document_id(path),
            path=path,
            data=copy.deepcopy(entry.data),
            update_time=entry.update_time,
        )

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

    def _commit_time(self) -> datetime:
        now = utc_now()
        if self._last_commit is not None and now <= self._last_commit:
            now = self._last_commit + timedelta(microseconds=1)
        return now

    def _apply_write(self, staged: dict[str, _Entry], write: Write, now: datetime) -> None:
        """Apply one write to the staged state, checking its precondition first."""
        current = staged.get(write.path)
        precondition = write.effective_precondition()
        if precondition is not None:
            if precondition.exists is True and current is None:
                raise ResourceNotFoundException("document", write.path)
            if precondition.exists is False and current is not None:
                raise PreconditionFailedError(write.path, "document already exists")
            if precondition.update_time is not None:
                if current is None:
                    raise ResourceNotFoundException("document", write.path)
                if current.update_time != precondition.update_time:
                    raise PreconditionFailedError(write.path, "document changed since it was read")

        if write.kind == WriteKind.DELETE:
            staged.pop(write.path, None)
            return
        data = _resolve(write.data, now)
        if write.kind in (WriteKind.UPSERT, WriteKind.UPDATE) and current is not None:
            data = {**current.data, **data}
        staged[write.path] = _Entry(data=data, update_time=now)

    async def commit(self, writes: list[Write]) -> None:
        """Apply writes atomically and push fresh snapshots to affected listeners."""
        if not writes:
            return
        now = self._commit_time()
        staged = dict(self._docs)
        for write in writes:
            self._apply_write(staged, write, now)
        self._docs = staged
        self._last_commit = now
        self._notify({parent_collection(w.path) for w in writes})

    def _snapshot(self, collection_path: str, filters: tuple[FieldFilter, ...]) -> Snapshot:
        docs = [
            StoredDocument(
                id=document_id(path),
                path=path,
                data=copy.deepcopy(entry.data),
                update_time=entry.update_time,
            )
            for path, entry in self._docs.items()
            if parent_collection(path) == collection_path and _matches(entry.data, filters)
        ]
        return tuple(sorted(docs, key=lambda d: d.id))

    def _notify(self, collections: set[str]) -> None:
        for listener in list(self._listeners):
            if listener.collection_path in collections:
                listener.subscription.push(
                    self._snapshot(listener.collection_path, listener.filters)
                )

    async def query(
        self, collection_path: str, filters: Iterable[FieldFilter] = ()
    ) -> Snapshot:
        return self._snapshot(collection_path, _check_filters(tuple(filters)))

    def subscribe(
        self, collection_path: str, filters: Iterable[FieldFilter] = ()
    ) -> QueueSubscription:
        """Deliver the current snapshot, then one per commit touching the collection."""
        filter_tuple = _check_filters(tuple(filters))

        async def produce(subscription: QueueSubscription) -> None:
            listener = _Listener(collection_path, filter_tuple, subscription)
            self._listeners.append(listener)
            try:
                subscription.push(self._snapshot(collection_path, filter_tuple))
                await asyncio.Event().wait()
            finally:
                self._listeners.remove(listener)

        return QueueSubscription(f"memory:{collection_path}", produce)

    async def aclose(self) -> None:
        logger.debug("In-memory document store closed (%d documents)", len(self._docs))
