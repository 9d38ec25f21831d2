"""Tests for DocumentChecklistEngine (slot states, upload, replace, delete, notifications)."""

import asyncio

import pytest

from propdesk.application.dtos.documents import FilePayload
from propdesk.application.dtos.notification import Notification
from propdesk.application.use_cases.documents import DocumentChecklistEngine
from propdesk.domain.enums import EntityCollection, NotificationVariant, SlotState
from propdesk.domain.exceptions import (
    ResourceNotFoundException,
    TransportFailure,
    ValidationException,
    WriteError,
)
from propdesk.infrastructure.messaging import QueueSubscription

ENTITY_ID = "prop-1"


def _pdf(name: str = "deed.pdf") -> FilePayload:
    return FilePayload(file_name=name, content_type="application/pdf", data=b"%PDF-1.4 test")


@pytest.fixture
def notifications() -> list[Notification]:
    return []


@pytest.fixture
async def engine(store, uploader, in_flight, notifications):
    async def notify(n: Notification) -> None:
        notifications.append(n)

    engine = DocumentChecklistEngine(store, uploader, in_flight=in_flight, notify=notify)
    await engine.subscribe(EntityCollection.PROPERTIES, ENTITY_ID)
    await asyncio.wait_for(engine.wait_loaded(), timeout=1)
    yield engine
    await engine.close()


async def test_new_entity_has_every_slot_empty(engine: DocumentChecklistEngine) -> None:
    rows = engine.checklist()
    assert [r.slot.slot_id for r in rows] == [
        "registry-document",
        "land-book",
        "owner-aadhaar-card",
        "owner-pan-card",
    ]
    assert all(r.state == SlotState.EMPTY and r.record is None for r in rows)
    assert engine.files_path == "properties/prop-1/files"


async def test_upload_fills_slot_and_writes_record(engine, store, notifications) -> None:
    result = await engine.upload("land-book", _pdf())
    assert result.ok
    assert result.url == "https://blobs.test/1/deed.pdf"
    assert result.notification.description == "Land Book (Bhu Pustika) Document uploaded successfully."
    assert notifications == [result.notification]

    assert await asyncio.wait_for(engine.wait_settled("land-book"), timeout=1) == SlotState.FILLED
    doc = await store.get("properties/prop-1/files/land-book")
    assert doc.data["id"] == "land-book"
    assert doc.data["documentType"] == "Land Book (Bhu Pustika) Document"
    assert doc.data["fileName"] == "deed.pdf"
    assert doc.data["contentType"] == "application/pdf"
    assert doc.data["sizeBytes"] == len(b"%PDF-1.4 test")
    assert doc.data["uploadTimestamp"] is not None
    assert engine.records()["land-book"].url == result.url


async def test_second_upload_replaces_and_says_updated(engine, store) -> None:
    await engine.upload("owner-pan-card", _pdf("pan-old.pdf"))
    await asyncio.wait_for(engine.wait_settled("owner-pan-card"), timeout=1)
    result = await engine.upload("owner-pan-card", _pdf("pan-new.pdf"))
    assert result.ok
    assert result.notification.description == "Owner's PAN Card updated successfully."
    await asyncio.wait_for(engine.wait_settled("owner-pan-card"), timeout=1)
    assert engine.records()["owner-pan-card"].file_name == "pan-new.pdf"
    snapshot = await store.query("properties/prop-1/files")
    assert [d.id for d in snapshot] == ["owner-pan-card"]


async def test_blob_failure_writes_nothing_and_reverts(engine, store, uploader) -> None:
    uploader.fail_reason = "Upload preset not found"
    result = await engine.upload("registry-document", _pdf())
    assert not result.ok
    assert result.error_code == "UPLOAD_FAILED"
    assert result.notification.title == "Upload Failed"
    assert result.notification.description == "Upload preset not found"
    assert result.notification.variant == NotificationVariant.DESTRUCTIVE
    assert engine.slot_state("registry-document") == SlotState.EMPTY
    assert await store.get("properties/prop-1/files/registry-document") is None


async def test_record_write_failure_reports_and_reverts(engine, store, monkeypatch) -> None:
    async def failing_upsert(path, data):
        raise WriteError("upsert", "connection reset")

    monkeypatch.setattr(store, "upsert", failing_upsert)
    result = await engine.upload("land-book", _pdf())
    assert not result.ok
    assert result.notification.description == "Could not save the file record."
    assert result.error_code == "TRANSPORT_FAILURE"
    assert engine.slot_state("land-book") == SlotState.EMPTY


async def test_invalid_payload_is_rejected_before_upload(engine, uploader) -> None:
    result = await engine.upload(
        "land-book", FilePayload(file_name="run.exe", content_type="application/x-msdownload", data=b"MZ")
    )
    assert not result.ok
    assert result.error_code == "VALIDATION_ERROR"
    assert "not allowed" in result.notification.description
    assert uploader.uploaded == []


async def test_unknown_slot_raises_validation(engine) -> None:
    with pytest.raises(ValidationException):
        await engine.upload("passport", _pdf())


async def test_concurrent_upload_on_same_slot_is_suppressed(engine, uploader, in_flight) -> None:
    uploader.gate = asyncio.Event()
    first = asyncio.create_task(engine.upload("land-book", _pdf("one.pdf")))
    await asyncio.wait_for(uploader.started.wait(), timeout=1)
    assert engine.slot_state("land-book") == SlotState.UPLOADING

    second = await engine.upload("land-book", _pdf("two.pdf"))
    assert not second.ok
    assert second.error_code == "UPLOAD_IN_PROGRESS"
    assert second.notification.title == "Upload in progress"

    uploader.gate.set()
    assert (await first).ok
    assert len(in_flight) == 0
    assert [p.file_name for p in uploader.uploaded] == ["one.pdf"]


async def test_in_flight_is_shared_across_engines(store, uploader, in_flight, engine) -> None:
    uploader.gate = asyncio.Event()
    first = asyncio.create_task(engine.upload("land-book", _pdf()))
    await asyncio.wait_for(uploader.started.wait(), timeout=1)
    async with DocumentChecklistEngine(store, uploader, in_flight=in_flight) as other:
        await other.subscribe(EntityCollection.PROPERTIES, ENTITY_ID)
        await asyncio.wait_for(other.wait_loaded(), timeout=1)
        result = await other.upload("land-book", _pdf())
        assert result.error_code == "UPLOAD_IN_PROGRESS"
    uploader.gate.set()
    await first


async def test_delete_clears_slot(engine, store, notifications) -> None:
    await engine.upload("owner-aadhaar-card", _pdf("aadhaar.pdf"))
    await asyncio.wait_for(engine.wait_settled("owner-aadhaar-card"), timeout=1)
    result = await engine.delete("owner-aadhaar-card")
    assert result.ok
    assert result.notification.description == 'The file record for "Owner\'s Aadhaar Card" has been deleted.'
    assert await asyncio.wait_for(engine.wait_settled("owner-aadhaar-card"), timeout=1) == SlotState.EMPTY
    assert await store.get("properties/prop-1/files/owner-aadhaar-card") is None


async def test_delete_of_empty_slot_reports_not_found(engine) -> None:
    result = await engine.delete("land-book")
    assert not result.ok
    assert result.error_code == "RESOURCE_NOT_FOUND"
    assert result.notification.title == "Error"


async def test_view_returns_url_or_not_found(engine) -> None:
    with pytest.raises(ResourceNotFoundException):
        engine.view("land-book")
    result = await engine.upload("land-book", _pdf())
    await asyncio.wait_for(engine.wait_settled("land-book"), timeout=1)
    assert engine.view("land-book") == result.url


async def test_snapshot_ignores_records_outside_catalog(store, uploader) -> None:
    await store.set("prospects/x/files/old-slot", {"fileName": "legacy.pdf"})
    await store.set("prospects/x/files/land-book", {"fileName": "lb.pdf", "url": "https://u"})
    async with DocumentChecklistEngine(store, uploader) as engine:
        await engine.subscribe(EntityCollection.PROSPECTS, "x")
        await asyncio.wait_for(engine.wait_loaded(), timeout=1)
        assert set(engine.records()) == {"land-book"}
        assert engine.slot_state("land-book") == SlotState.FILLED


async def test_listener_error_notifies_and_sets_error(store, uploader, notifications) -> None:
    def broken_subscribe(collection_path, filters=()):
        async def produce(sub):
            raise WriteError("query", "permission denied")

        return QueueSubscription("broken", produce)

    store.subscribe = broken_subscribe

    async def notify(n: Notification) -> None:
        notifications.append(n)

    async with DocumentChecklistEngine(store, uploader, notify=notify) as engine:
        await engine.subscribe(EntityCollection.PROPERTIES, "p")
        await asyncio.wait_for(engine.wait_loaded(), timeout=1)
        assert engine.error is not None
        for _ in range(100):
            if notifications:
                break
            await asyncio.sleep(0.01)
        assert notifications[-1].description == "Failed to fetch files."


async def test_close_is_idempotent(store, uploader) -> None:
    engine = DocumentChecklistEngine(store, uploader)
    await engine.subscribe(EntityCollection.PROPERTIES, "p")
    await engine.close()
    await engine.close()
    assert engine.closed
    with pytest.raises(RuntimeError):
        await engine.upload("land-book", _pdf())


def _dropping_subscribe(drop: asyncio.Event):
    """subscribe() stand-in: one empty snapshot, then the stream fails once drop is set."""

    def subscribe(collection_path, filters=()):
        async def produce(sub):
            sub.push(())
            await drop.wait()
            raise TransportFailure("listen", "connection reset")

        return QueueSubscription("dropping", produce)

    return subscribe


async def _wait_for_error(engine: DocumentChecklistEngine) -> None:
    for _ in range(100):
        if engine.error is not None:
            return
        await asyncio.sleep(0.01)
    raise AssertionError("listener did not fail")


async def test_operations_after_listener_failure_are_refused(store, uploader) -> None:
    drop = asyncio.Event()
    store.subscribe = _dropping_subscribe(drop)
    async with DocumentChecklistEngine(store, uploader) as engine:
        await engine.subscribe(EntityCollection.PROPERTIES, "p")
        await asyncio.wait_for(engine.wait_loaded(), timeout=1)
        drop.set()
        await _wait_for_error(engine)

        for _ in range(2):
            result = await engine.upload("land-book", _pdf())
            assert not result.ok
            assert result.error_code == "TRANSPORT_FAILURE"
            assert engine.slot_state("land-book") == SlotState.EMPTY
        assert (await engine.delete("land-book")).error_code == "TRANSPORT_FAILURE"
        assert await asyncio.wait_for(engine.wait_settled("land-book"), timeout=1) == SlotState.EMPTY
        assert uploader.uploaded == []
        assert await store.get("properties/p/files/land-book") is None


async def test_listener_failure_mid_upload_settles_the_slot(store, uploader) -> None:
    drop = asyncio.Event()
    store.subscribe = _dropping_subscribe(drop)
    uploader.gate = asyncio.Event()
    async with DocumentChecklistEngine(store, uploader) as engine:
        await engine.subscribe(EntityCollection.PROPERTIES, "p")
        await asyncio.wait_for(engine.wait_loaded(), timeout=1)
        pending = asyncio.create_task(engine.upload("land-book", _pdf()))
        await asyncio.wait_for(uploader.started.wait(), timeout=1)
        assert engine.slot_state("land-book") == SlotState.UPLOADING

        drop.set()
        assert await asyncio.wait_for(engine.wait_settled("land-book"), timeout=1) == SlotState.EMPTY
        uploader.gate.set()
        await asyncio.wait_for(pending, timeout=1)
        assert engine.slot_state("land-book") == SlotState.EMPTY


async def test_delete_while_replacement_awaits_echo_is_suppressed(engine, monkeypatch) -> None:
    await engine.upload("land-book", _pdf("old.pdf"))
    await asyncio.wait_for(engine.wait_settled("land-book"), timeout=1)

    release = asyncio.Event()
    apply_snapshot = engine._apply_snapshot

    async def held(snapshot):
        await release.wait()
        await apply_snapshot(snapshot)

    monkeypatch.setattr(engine, "_apply_snapshot", held)
    replaced = await engine.upload("land-book", _pdf("new.pdf"))
    assert replaced.ok
    assert engine.slot_state("land-book") == SlotState.UPDATING

    suppressed = await engine.delete("land-book")
    assert suppressed.error_code == "UPLOAD_IN_PROGRESS"

    release.set()
    assert await asyncio.wait_for(engine.wait_settled("land-book"), timeout=1) == SlotState.FILLED
    assert engine.records()["land-book"].file_name == "new.pdf"
    assert (await engine.delete("land-book")).ok
