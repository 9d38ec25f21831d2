"""DTOs for document store reads, writes, and queries (no backend dependency).

Write kinds and their merge contract:

- create: write all fields; the document must not exist yet.
- set: replace the whole document with the given fields.
- upsert: overwrite every field present in the data, leave other existing
  fields untouched; create the document if missing.
- update: upsert that requires the document to exist.
- delete: remove the document; deleting a missing document is not an error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from propdesk.application.interfaces.store import IDocumentStore


class _ServerTimestamp:
    """Sentinel replaced by the store's commit time."""

    _instance: _ServerTimestamp | None = None

    def __new__(cls) -> _ServerTimestamp:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


class WriteKind(str, Enum):
    """Kinds of write accepted in a batch."""

    CREATE = "create"
    SET = "set"
    UPSERT = "upsert"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class Precondition:
    """Extra condition a write requires to commit.

    exists: True/False requires the document to exist / not exist.
    update_time: requires the document to be unchanged since that read.
    """

    exists: bool | None = None
    update_time: datetime | None = None


@dataclass(frozen=True)
class Write:
    """One write in a batch. path is '{collection}/{id}[/{sub}/{id}...]'."""

    kind: WriteKind
    path: str
    data: dict[str, Any] = field(default_factory=dict)
    precondition: Precondition | None = None

    def effective_precondition(self) -> Precondition | None:
        """Precondition implied by the write kind merged with the explicit one."""
        implied: bool | None = None
        if self.kind == WriteKind.CREATE:
            implied = False
        elif self.kind == WriteKind.UPDATE:
            implied = True
        if self.precondition is None:
            return Precondition(exists=implied) if implied is not None else None
        if implied is not None and self.precondition.exists is None:
            return Precondition(exists=implied, update_time=self.precondition.update_time)
        return self.precondition


@dataclass(frozen=True)
class FieldFilter:
    """Equality filter on one top-level field."""

    field: str
    value: Any
    op: str = "=="


@dataclass(frozen=True)
class StoredDocument:
    """A document as read from the store (id + data + last update time)."""

    id: str
    path: str
    data: dict[str, Any]
    update_time: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return self.data


# Ordered (by document id) full result of a query; each delivery replaces the last.
Snapshot = tuple[StoredDocument, ...]


class WriteBatch:
    """Collects writes and commits them atomically through the store.

    Usage:
        batch = store.batch()
        batch.create("properties/p1", {...})
        batch.update("prospects/x", {"status": "Converted"})
        await batch.commit()
    """

    def __init__(self, store: IDocumentStore) -> None:
        self._store = store
        self._writes: list[Write] = []
        self._committed = False

    @property
    def writes(self) -> list[Write]:
        return list(self._writes)

    def _add(self, write: Write) -> WriteBatch:
        if self._committed:
            raise RuntimeError("WriteBatch already committed")
        self._writes.append(write)
        return self

    def create(self, path: str, data: dict[str, Any]) -> WriteBatch:
        return self._add(Write(WriteKind.CREATE, path, dict(data)))

    def set(self, path: str, data: dict[str, Any]) -> WriteBatch:
        return self._add(Write(WriteKind.SET, path, dict(data)))

    def upsert(self, path: str, data: dict[str, Any]) -> WriteBatch:
        return self._add(Write(WriteKind.UPSERT, path, dict(data)))

    def update(
        self,
        path: str,
        data: dict[str, Any],
        precondition: Precondition | None = None,
    ) -> WriteBatch:
        return self._add(Write(WriteKind.UPDATE, path, dict(data), precondition))

    def delete(self, path: str) -> WriteBatch:
        return self._add(Write(WriteKind.DELETE, path))

    async def commit(self) -> None:
        """Commit all writes atomically. Raises WriteError / PreconditionFailedError."""
        if self._committed:
            raise RuntimeError("WriteBatch already committed")
        self._committed = True
        if self._writes:
            await self._store.commit(list(self._writes))


def parent_collection(path: str) -> str:
    """Return the collection path that contains the document at path."""
    parts = path.strip("/").split("/")
    if len(parts) < 2 or len(parts) % 2:
        raise ValueError(f"Not a document path: {path!r}")
    return "/".join(parts[:-1])


def document_id(path: str) -> str:
    """Return the last segment (document id) of a document path."""
    return path.strip("/").rsplit("/", 1)[-1]
