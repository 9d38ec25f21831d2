"""Tests for InMemoryDocumentStore (batches, preconditions, live queries)."""

import asyncio
from datetime import datetime

import pytest

from propdesk.application.dtos.store import SERVER_TIMESTAMP, FieldFilter, Precondition
from propdesk.domain.exceptions import ResourceNotFoundException
from propdesk.infrastructure.exceptions import PreconditionFailedError
from propdesk.infrastructure.memory import InMemoryDocumentStore


async def test_set_then_get_returns_copy() -> None:
    store = InMemoryDocumentStore()
    await store.set("prospects/p1", {"name": "Plot", "tags": ["a"]})
    doc = await store.get("prospects/p1")
    assert doc is not None
    assert doc.id == "p1"
    assert doc.data == {"name": "Plot", "tags": ["a"]}
    assert doc.update_time is not None
    doc.data["tags"].append("b")
    again = await store.get("prospects/p1")
    assert again.data["tags"] == ["a"]


async def test_get_missing_returns_none() -> None:
    store = InMemoryDocumentStore()
    assert await store.get("prospects/missing") is None


async def test_upsert_merges_top_level_fields() -> None:
    store = InMemoryDocumentStore()
    await store.set("users/u1", {"displayName": "Asha", "email": "a@example.com"})
    await store.upsert("users/u1", {"publicListingsEnabled": True})
    doc = await store.get("users/u1")
    assert doc.data == {
        "displayName": "Asha",
        "email": "a@example.com",
        "publicListingsEnabled": True,
    }


async def test_upsert_creates_missing_document() -> None:
    store = InMemoryDocumentStore()
    await store.upsert("users/u2", {"displayName": "Ravi"})
    assert (await store.get("users/u2")).data == {"displayName": "Ravi"}


async def test_update_missing_document_raises_not_found() -> None:
    store = InMemoryDocumentStore()
    with pytest.raises(ResourceNotFoundException):
        await store.update("prospects/nope", {"status": "Active"})


async def test_create_existing_document_fails_precondition() -> None:
    store = InMemoryDocumentStore()
    await store.set("properties/x", {"name": "A"})
    batch = store.batch()
    batch.create("properties/x", {"name": "B"})
    with pytest.raises(PreconditionFailedError):
        await batch.commit()
    assert (await store.get("properties/x")).data == {"name": "A"}


async def test_delete_missing_document_is_not_an_error() -> None:
    store = InMemoryDocumentStore()
    await store.delete("properties/never")
    assert await store.get("properties/never") is None


async def test_server_timestamp_is_resolved_to_commit_time() -> None:
    store = InMemoryDocumentStore()
    await store.upsert("properties/p/files/deed", {"uploadTimestamp": SERVER_TIMESTAMP})
    doc = await store.get("properties/p/files/deed")
    assert isinstance(doc.data["uploadTimestamp"], datetime)
    assert doc.data["uploadTimestamp"] == doc.update_time


async def test_commit_times_strictly_increase() -> None:
    store = InMemoryDocumentStore()
    await store.set("a/1", {})
    first = (await store.get("a/1")).update_time
    await store.set("a/1", {})
    second = (await store.get("a/1")).update_time
    assert second > first


async def test_failing_batch_writes_nothing() -> None:
    store = InMemoryDocumentStore()
    batch = store.batch()
    batch.create("properties/new", {"name": "New"})
    batch.update("prospects/missing", {"status": "Converted"})
    with pytest.raises(ResourceNotFoundException):
        await batch.commit()
    assert await store.get("properties/new") is None


async def test_stale_update_time_precondition_fails() -> None:
    store = InMemoryDocumentStore()
    await store.set("prospects/p1", {"status": "New"})
    read_time = (await store.get("prospects/p1")).update_time
    await store.update("prospects/p1", {"status": "Active"})
    batch = store.batch()
    batch.update("prospects/p1", {"status": "Converted"}, Precondition(update_time=read_time))
    with pytest.raises(PreconditionFailedError):
        await batch.commit()
    assert (await store.get("prospects/p1")).data["status"] == "Active"


async def test_batch_cannot_be_committed_twice() -> None:
    store = InMemoryDocumentStore()
    batch = store.batch()
    batch.set("a/1", {"n": 1})
    await batch.commit()
    with pytest.raises(RuntimeError):
        await batch.commit()


async def test_query_filters_and_orders_by_id() -> None:
    store = InMemoryDocumentStore()
    await store.set("properties/b", {"ownerUid": "o1"})
    await store.set("properties/a", {"ownerUid": "o1"})
    await store.set("properties/c", {"ownerUid": "o2"})
    await store.set("properties/a/media/m1", {"ownerUid": "o1"})
    snapshot = await store.query("properties", [FieldFilter("ownerUid", "o1")])
    assert [d.id for d in snapshot] == ["a", "b"]


async def test_subscribe_delivers_initial_then_changes() -> None:
    store = InMemoryDocumentStore()
    await store.set("properties/p/files/deed", {"fileName": "deed.pdf"})
    subscription = store.subscribe("properties/p/files")
    try:
        first = await asyncio.wait_for(anext(subscription), timeout=1)
        assert [d.id for d in first] == ["deed"]
        await store.delete("properties/p/files/deed")
        second = await asyncio.wait_for(anext(subscription), timeout=1)
        assert second == ()
    finally:
        await subscription.cancel()


async def test_subscribe_ignores_other_collections() -> None:
    store = InMemoryDocumentStore()
    subscription = store.subscribe("prospects/x/files")
    try:
        assert await asyncio.wait_for(anext(subscription), timeout=1) == ()
        await store.set("properties/x/files/deed", {})
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(anext(subscription), timeout=0.05)
    finally:
        await subscription.cancel()


@pytest.mark.parametrize("op", [">", "array-contains", "in"])
async def test_unsupported_filter_operator_is_rejected(op: str) -> None:
    store = InMemoryDocumentStore()
    await store.set("properties/a", {"listingPrice": 5})
    with pytest.raises(ValueError, match="Unsupported filter operator"):
        await store.query("properties", [FieldFilter("listingPrice", 1, op)])
    with pytest.raises(ValueError, match="Unsupported filter operator"):
        store.subscribe("properties", [FieldFilter("listingPrice", 1, op)])
