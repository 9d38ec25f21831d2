"""Thin Firestore REST API client (no firebase-admin).

Uses google-auth for service account tokens and Firestore REST v1.
All HTTP calls use httpx.AsyncClient so they do not block the event loop.
Writes go through the commit endpoint so batches are atomic and can carry
preconditions and server-timestamp transforms.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Sequence
from datetime import datetime
from typing import Any

import httpx

from propdesk.application.dtos.store import Write
from propdesk.domain.exceptions import ResourceNotFoundException, TransportFailure, WriteError
from propdesk.infrastructure.exceptions import PreconditionFailedError
from propdesk.infrastructure.firebase._rest_encoding import (
    _encode_value,
    decode_document,
    encode_write,
    parse_timestamp,
)

logger = logging.getLogger(__name__)

_FIRESTORE_SCOPE = "https://www.googleapis.com/auth/datastore"
_BASE = "https://firestore.googleapis.com/v1"
_PRECONDITION_STATUSES = {"FAILED_PRECONDITION", "ALREADY_EXISTS", "ABORTED"}


def _get_credentials(key_dict: dict):
    """Return google.oauth2.service_account.Credentials for Firestore."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=[_FIRESTORE_SCOPE]
    )


def _get_access_token(credentials) -> str:
    from google.auth.transport.requests import Request

    if not credentials.valid:
        credentials.refresh(Request())
    return credentials.token


def _error_status(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return ""
    if isinstance(body, list):
        body = body[0] if body else {}
    return (body.get("error") or {}).get("status", "") if isinstance(body, dict) else ""


async def _request_async(
    client: httpx.AsyncClient,
    url: str,
    method: str = "GET",
    body: dict | None = None,
    access_token: str | None = None,
    *,
    operation: str,
    write: bool = False,
    path: str = "",
) -> Any:
    """Perform async HTTP request to Firestore REST API. 404 returns None.

    Raises:
        PreconditionFailedError: 409 or FAILED_PRECONDITION.
        WriteError: transport or server failure on a write.
        TransportFailure: transport or server failure on a read.
    """
    failure = WriteError if write else TransportFailure
    headers = {"Content-Type": "application/json"}
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    try:
        resp = await client.request(method, url, headers=headers, json=body)
    except httpx.HTTPError as e:
        logger.warning("Firestore %s request failed: %s", operation, e)
        raise failure(operation, str(e)) from e
    if resp.status_code == 404:
        return None
    if resp.status_code >= 400:
        status = _error_status(resp)
        if resp.status_code == 409 or status in _PRECONDITION_STATUSES:
            raise PreconditionFailedError(path or url, status or str(resp.status_code))
        logger.warning(
            "Firestore %s returned %s %s", operation, resp.status_code, status
        )
        raise failure(operation, f"HTTP {resp.status_code} {status}".strip())
    raw = resp.content
    return json.loads(raw.decode()) if raw else {}


class DocumentSnapshot:
    """Snapshot of a document (id + data + update time)."""

    def __init__(self, id_: str, data: dict, update_time: datetime | None = None):
        self.id = id_
        self._data = data
        self.update_time = update_time

    def to_dict(self) -> dict:
        return self._data

    @classmethod
    def from_rest(cls, doc: dict) -> DocumentSnapshot:
        name = doc.get("name", "")
        update_time = doc.get("updateTime")
        return cls(
            name.split("/")[-1] if name else "",
            decode_document(doc.get("fields")),
            parse_timestamp(update_time) if update_time else None,
        )


class DocumentReference:
    """Reference to a single document; matches firestore API style."""

    def __init__(self, client: FirestoreRESTClient, path: str):
        self._client = client
        self._path = path

    async def get(self) -> DocumentSnapshot | None:
        """Fetch the document; returns None if not found."""
        out = await _request_async(
            self._client._http,
            f"{_BASE}/{self._path}",
            access_token=await self._client.get_token(),
            operation="get",
        )
        if not out:
            return None
        return DocumentSnapshot.from_rest(out)


_OP_MAP: dict[str, str] = {
    "==": "EQUAL",
    "!=": "NOT_EQUAL",
    "<": "LESS_THAN",
    "<=": "LESS_THAN_OR_EQUAL",
    ">": "GREATER_THAN",
    ">=": "GREATER_THAN_OR_EQUAL",
    "in": "IN",
    "not-in": "NOT_IN",
}


class _Query:
    """Fluent query builder for a collection; runs via runQuery.

    Multiple where() calls are combined with AND.
    """

    def __init__(self, client: FirestoreRESTClient, parent: str, collection_id: str):
        self._client = client
        self._parent = parent
        self._collection_id = collection_id
        self._filters: list[dict[str, Any]] = []

    def where(self, field: str, op: str, value: Any) -> _Query:
        self._filters.append(
            {
                "fieldFilter": {
                    "field": {"fieldPath": field},
                    "op": _OP_MAP.get(op, op),
                    "value": _encode_value(value),
                }
            }
        )
        return self

    def structured_query(self) -> dict[str, Any]:
        structured: dict[str, Any] = {
            "from": [{"collectionId": self._collection_id}],
            "orderBy": [{"field": {"fieldPath": "__name__"}, "direction": "ASCENDING"}],
        }
        if len(self._filters) == 1:
            structured["where"] = self._filters[0]
        elif self._filters:
            structured["where"] = {
                "compositeFilter": {"op": "AND", "filters": list(self._filters)}
            }
        return structured

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        """Execute the query and yield document snapshots ordered by id."""
        resp = await _request_async(
            self._client._http,
            f"{_BASE}/{self._parent}:runQuery",
            method="POST",
            body={"structuredQuery": self.structured_query()},
            access_token=await self._client.get_token(),
            operation="query",
        )
        items = resp if isinstance(resp, list) else ([resp] if resp else [])
        for item in items:
            if "document" not in item:
                continue
            yield DocumentSnapshot.from_rest(item["document"])


class CollectionReference:
    """Reference to a (possibly nested) collection; matches firestore API style."""

    def __init__(self, client: FirestoreRESTClient, path: str):
        self._client = client
        self._path = path.rstrip("/")

    def document(self, document_id: str) -> DocumentReference:
        return DocumentReference(self._client, f"{self._path}/{document_id}")

    def _query(self) -> _Query:
        parent, collection_id = self._path.rsplit("/", 1)
        return _Query(self._client, parent, collection_id)

    def where(self, field: str, op: str, value: Any) -> _Query:
        """Start a query with a filter. Chain more .where() calls, then .stream()."""
        return self._query().where(field, op, value)

    def stream(self) -> AsyncIterator[DocumentSnapshot]:
        """All documents in the collection, ordered by id."""
        return self._query().stream()


class FirestoreRESTClient:
    """Lightweight Firestore client using REST API (no firebase-admin)."""

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._project_id = project_id
        self._credentials = credentials
        self._prefix = f"projects/{project_id}/databases/(default)/documents"
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None

    @property
    def prefix(self) -> str:
        return self._prefix

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    async def get_token(self) -> str:
        """Return a valid access token; refreshes in thread pool to avoid blocking."""
        return await asyncio.to_thread(_get_access_token, self._credentials)

    def collection(self, collection_path: str) -> CollectionReference:
        return CollectionReference(self, f"{self._prefix}/{collection_path}")

    def document(self, document_path: str) -> DocumentReference:
        return DocumentReference(self, f"{self._prefix}/{document_path}")

    async def commit(self, writes: Sequence[Write]) -> datetime | None:
        """Commit writes atomically. Returns the server commit time.

        Raises:
            ResourceNotFoundException: a write required an existing document.
            PreconditionFailedError: a precondition did not hold.
            WriteError: the commit failed in transport.
        """
        body = {"writes": [encode_write(w, self._prefix) for w in writes]}
        paths = ", ".join(w.path for w in writes)
        out = await _request_async(
            self._http,
            f"{_BASE}/projects/{self._project_id}/databases/(default)/documents:commit",
            method="POST",
            body=body,
            access_token=await self.get_token(),
            operation="commit",
            write=True,
            path=paths,
        )
        if out is None:
            missing = next(
                (w.path for w in writes if (p := w.effective_precondition()) and (p.exists or p.update_time)),
                paths,
            )
            raise ResourceNotFoundException("document", missing)
        commit_time = out.get("commitTime")
        return parse_timestamp(commit_time) if commit_time else None
