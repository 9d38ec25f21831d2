"""Required-document checklist for one entity, kept live against the store.

Records live at {collection}/{entityId}/files/{slotId}; the record id is the
slot id, so a slot holds at most one record and re-uploading overwrites it.
The store is the source of truth: Uploading/Updating are local until the
subscription echoes a record that differs from the one seen before the
operation started.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from propdesk.application.dtos.documents import (
    DocumentRecord,
    DocumentSlot,
    FilePayload,
    SlotOperationResult,
    SlotView,
)
from propdesk.application.dtos.notification import Notification
from propdesk.application.dtos.store import Snapshot
from propdesk.application.interfaces.services import IBlobUploader, NotifyCallback
from propdesk.application.interfaces.store import IDocumentStore, ISubscription
from propdesk.application.use_cases.documents.catalog import DEFAULT_CATALOG, DocumentCatalog
from propdesk.application.use_cases.documents.in_flight import SlotInFlightTracker
from propdesk.application.use_cases.documents.upload_rules import (
    DEFAULT_ALLOWED_CONTENT_TYPES,
    DEFAULT_MAX_UPLOAD_SIZE,
    payload_problem,
)
from propdesk.domain.enums import EntityCollection, SlotState
from propdesk.domain.exceptions import (
    PropdeskException,
    ResourceNotFoundException,
    UploadFailure,
    ValidationException,
)
from propdesk.shared.collections import file_path, files_collection

logger = logging.getLogger(__name__)


class DocumentChecklistEngine:
    """Upload, replace, delete and view the required documents of one entity.

    Usage:
        async with DocumentChecklistEngine(store, uploader) as engine:
            await engine.subscribe(EntityCollection.PROPERTIES, property_id)
            await engine.wait_loaded()
            result = await engine.upload("land-book", payload)

    Operations never raise for expected failures (upload rejected, store
    unreachable, operation already in flight); they return a
    SlotOperationResult with the notification shown to the user.
    """

    def __init__(
        self,
        store: IDocumentStore,
        uploader: IBlobUploader,
        *,
        catalog: DocumentCatalog = DEFAULT_CATALOG,
        in_flight: SlotInFlightTracker | None = None,
        notify: NotifyCallback | None = None,
        max_upload_size: int = DEFAULT_MAX_UPLOAD_SIZE,
        allowed_content_types: Sequence[str] = DEFAULT_ALLOWED_CONTENT_TYPES,
    ) -> None:
        self._store = store
        self._uploader = uploader
        self._catalog = catalog
        self._in_flight = in_flight if in_flight is not None else SlotInFlightTracker()
        self._notify = notify
        self._max_upload_size = max_upload_size
        self._allowed_content_types = tuple(allowed_content_types)

        self._collection: str | None = None
        self._entity_id: str | None = None
        self._subscription: ISubscription | None = None
        self._listener: asyncio.Task[None] | None = None
        self._closed = False

        # Confirmed state (last snapshot) and optimistic state (slot -> record before the operation).
        self._records: dict[str, DocumentRecord] = {}
        self._pending: dict[str, DocumentRecord | None] = {}
        self._loaded = False
        self._error: Exception | None = None
        self._version = 0
        self._changed = asyncio.Condition()

    # -- lifecycle ---------------------------------------------------------

    async def subscribe(self, entity_collection: EntityCollection | str, entity_id: str) -> None:
        """Open the live subscription on the entity's files collection (once per engine)."""
        if self._closed:
            raise RuntimeError("Checklist engine is closed")
        if self._subscription is not None:
            raise RuntimeError("Checklist engine is already subscribed")
        self._collection = EntityCollection(entity_collection).value
        self._entity_id = entity_id
        self._subscription = self._store.subscribe(self.files_path)
        self._listener = asyncio.create_task(
            self._listen(self._subscription), name=f"checklist:{self.files_path}"
        )
        logger.debug("Checklist subscribed to %s", self.files_path)

    async def close(self) -> None:
        """Cancel the subscription (exactly once) and drop optimistic state."""
        if self._closed:
            return
        self._closed = True
        if self._subscription is not None:
            await self._subscription.cancel()
        if self._listener is not None and not self._listener.done():
            self._listener.cancel()
            try:
                await self._listener
            except asyncio.CancelledError:
                pass
        async with self._changed:
            self._pending.clear()
            self._version += 1
            self._changed.notify_all()

    async def __aenter__(self) -> DocumentChecklistEngine:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def files_path(self) -> str:
        if self._collection is None or self._entity_id is None:
            raise RuntimeError("Checklist engine is not subscribed")
        return files_collection(self._collection, self._entity_id)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def error(self) -> Exception | None:
        """Listener error that ended the live subscription, if any."""
        return self._error

    @property
    def version(self) -> int:
        """Incremented on every state change (snapshot, optimistic change, close)."""
        return self._version

    # -- snapshot reconciliation -------------------------------------------

    async def _listen(self, subscription: ISubscription) -> None:
        try:
            async for snapshot in subscription:
                await self._apply_snapshot(snapshot)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning("Checklist listener for %s failed: %s", self.files_path, e)
            async with self._changed:
                self._error = e
                self._pending.clear()
                self._version += 1
                self._changed.notify_all()
            await self._emit(Notification.failure("Error", "Failed to fetch files."))

    async def _apply_snapshot(self, snapshot: Snapshot) -> None:
        records = {
            doc.id: DocumentRecord.from_stored(doc) for doc in snapshot if doc.id in self._catalog
        }
        async with self._changed:
            self._records = records
            self._loaded = True
            for slot_id, before in list(self._pending.items()):
                if records.get(slot_id) != before:
                    del self._pending[slot_id]
            self._version += 1
            self._changed.notify_all()

    async def _set_pending(self, slot_id: str, before: DocumentRecord | None) -> bool:
        """Mark the slot optimistic; False once the listener has failed (no echo will come)."""
        async with self._changed:
            if self._error is not None or self._closed:
                return False
            self._pending[slot_id] = before
            self._version += 1
            self._changed.notify_all()
            return True

    async def _revert(self, slot_id: str) -> None:
        async with self._changed:
            self._pending.pop(slot_id, None)
            self._version += 1
            self._changed.notify_all()

    # -- waiting -----------------------------------------------------------

    async def wait_for_update(self, since: int | None = None) -> int:
        """Wait until the state version moves past since (default: now). Returns the new version."""
        async with self._changed:
            start = self._version if since is None else since
            await self._changed.wait_for(lambda: self._version > start or self._closed)
            return self._version

    async def wait_loaded(self) -> None:
        """Wait for the first snapshot (or a listener error / close)."""
        async with self._changed:
            await self._changed.wait_for(
                lambda: self._loaded or self._error is not None or self._closed
            )

    async def wait_settled(self, slot_id: str) -> SlotState:
        """Wait until the slot has no optimistic state; return its confirmed state."""
        async with self._changed:
            await self._changed.wait_for(
                lambda: slot_id not in self._pending or self._error is not None or self._closed
            )
            return self.slot_state(slot_id)

    # -- views -------------------------------------------------------------

    def slot_state(self, slot_id: str) -> SlotState:
        if slot_id in self._pending:
            return SlotState.UPDATING if self._pending[slot_id] is not None else SlotState.UPLOADING
        return SlotState.FILLED if slot_id in self._records else SlotState.EMPTY

    def checklist(self) -> list[SlotView]:
        """One row per catalog slot, in catalog order."""
        return [
            SlotView(slot=slot, state=self.slot_state(slot.slot_id), record=self._records.get(slot.slot_id))
            for slot in self._catalog
        ]

    def records(self) -> dict[str, DocumentRecord]:
        """Confirmed records keyed by slot id (copy)."""
        return dict(self._records)

    def view(self, slot_id: str) -> str:
        """URL of the confirmed document in the slot for inline preview."""
        self._slot(slot_id)
        record = self._records.get(slot_id)
        if record is None:
            raise ResourceNotFoundException("document", slot_id)
        return record.url

    # -- operations --------------------------------------------------------

    def _slot(self, slot_id: str) -> DocumentSlot:
        slot = self._catalog.get(slot_id)
        if slot is None:
            raise ValidationException(f"Unknown document slot: {slot_id}", field="slot_id")
        return slot

    def _require_open(self) -> None:
        if self._closed:
            raise RuntimeError("Checklist engine is closed")
        if self._subscription is None:
            raise RuntimeError("Checklist engine is not subscribed")

    def _try_acquire(self, slot_id: str) -> bool:
        if slot_id in self._pending:
            return False
        return self._in_flight.try_acquire(self._key(slot_id))

    def _key(self, slot_id: str) -> tuple[str, str, str]:
        return (self._collection or "", self._entity_id or "", slot_id)

    async def _emit(self, notification: Notification) -> None:
        if self._notify is None:
            return
        try:
            await self._notify(notification)
        except Exception:
            logger.exception("Notification callback failed")

    async def _finish(self, result: SlotOperationResult) -> SlotOperationResult:
        await self._emit(result.notification)
        return result

    def _in_progress(self, slot: DocumentSlot) -> SlotOperationResult:
        logger.info("Suppressed operation on %s/%s: already in flight", self.files_path, slot.slot_id)
        return SlotOperationResult(
            slot_id=slot.slot_id,
            ok=False,
            notification=Notification.failure(
                "Upload in progress", f"{slot.display_name} is already being processed."
            ),
            error_code="UPLOAD_IN_PROGRESS",
        )

    def _unavailable(self, slot: DocumentSlot) -> SlotOperationResult:
        logger.info("Refused operation on %s/%s: live updates have stopped", self.files_path, slot.slot_id)
        return SlotOperationResult(
            slot_id=slot.slot_id,
            ok=False,
            notification=Notification.failure(
                "Error", "Live file updates are unavailable. Reload the checklist and try again."
            ),
            error_code="TRANSPORT_FAILURE",
        )

    async def upload(self, slot_id: str, payload: FilePayload) -> SlotOperationResult:
        """Upload the file, then upsert the slot's record with a server timestamp.

        No record is written when the blob upload fails; the slot reverts to
        its last confirmed state.
        """
        self._require_open()
        slot = self._slot(slot_id)
        if self._error is not None:
            return await self._finish(self._unavailable(slot))
        problem = payload_problem(payload, self._max_upload_size, self._allowed_content_types)
        if problem:
            return await self._finish(
                SlotOperationResult(
                    slot_id=slot_id,
                    ok=False,
                    notification=Notification.failure("Upload Failed", problem),
                    error_code="VALIDATION_ERROR",
                )
            )
        if not self._try_acquire(slot_id):
            return await self._finish(self._in_progress(slot))

        before = self._records.get(slot_id)
        try:
            if not await self._set_pending(slot_id, before):
                return await self._finish(self._unavailable(slot))
            try:
                url = await self._uploader.upload_blob(payload)
            except UploadFailure as e:
                logger.warning("Upload to %s/%s failed: %s", self.files_path, slot_id, e.details)
                await self._revert(slot_id)
                return await self._finish(
                    SlotOperationResult(
                        slot_id=slot_id,
                        ok=False,
                        notification=Notification.failure(
                            "Upload Failed", e.details.get("reason") or e.message
                        ),
                        error_code=e.error_code,
                    )
                )
            record = DocumentRecord.for_upload(slot, payload, url)
            try:
                await self._store.upsert(file_path(self._collection, self._entity_id, slot_id), record.to_write())
            except PropdeskException as e:
                logger.warning("Saving record %s/%s failed: %s", self.files_path, slot_id, e.message)
                await self._revert(slot_id)
                return await self._finish(
                    SlotOperationResult(
                        slot_id=slot_id,
                        ok=False,
                        notification=Notification.failure("Upload Failed", "Could not save the file record."),
                        error_code=e.error_code,
                    )
                )
        finally:
            self._in_flight.release(self._key(slot_id))

        verb = "updated" if before is not None else "uploaded"
        logger.info("Document %s %s for %s", slot_id, verb, self.files_path)
        return await self._finish(
            SlotOperationResult(
                slot_id=slot_id,
                ok=True,
                notification=Notification.success(f"{slot.display_name} {verb} successfully."),
                url=url,
            )
        )

    async def delete(self, slot_id: str) -> SlotOperationResult:
        """Delete the slot's metadata record. The blob itself is kept."""
        self._require_open()
        slot = self._slot(slot_id)
        if self._error is not None:
            return await self._finish(self._unavailable(slot))
        record = self._records.get(slot_id)
        if record is None:
            return await self._finish(
                SlotOperationResult(
                    slot_id=slot_id,
                    ok=False,
                    notification=Notification.failure("Error", "Could not delete file record."),
                    error_code="RESOURCE_NOT_FOUND",
                )
            )
        if not self._try_acquire(slot_id):
            return await self._finish(self._in_progress(slot))

        try:
            if not await self._set_pending(slot_id, record):
                return await self._finish(self._unavailable(slot))
            try:
                await self._store.delete(file_path(self._collection, self._entity_id, slot_id))
            except PropdeskException as e:
                logger.warning("Deleting record %s/%s failed: %s", self.files_path, slot_id, e.message)
                await self._revert(slot_id)
                return await self._finish(
                    SlotOperationResult(
                        slot_id=slot_id,
                        ok=False,
                        notification=Notification.failure("Delete Failed", "Could not delete the file record."),
                        error_code=e.error_code,
                    )
                )
        finally:
            self._in_flight.release(self._key(slot_id))

        logger.info("Document record %s deleted for %s", slot_id, self.files_path)
        return await self._finish(
            SlotOperationResult(
                slot_id=slot_id,
                ok=True,
                notification=Notification.success(
                    f'The file record for "{record.document_type}" has been deleted.'
                ),
            )
        )
