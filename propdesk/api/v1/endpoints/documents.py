"""Required-document checklist API.

Each request opens a short-lived DocumentChecklistEngine on the entity's
files collection, waits for the first snapshot, runs one operation and
closes the engine. The in-flight tracker is shared process-wide, so a second
upload to the same slot is rejected while the first is still running.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse

from propdesk.api.v1.dependencies import get_checklist_engine, get_entity_queries, get_identity
from propdesk.application.dtos.documents import FilePayload, SlotOperationResult
from propdesk.application.dtos.notification import Notification
from propdesk.application.use_cases.documents import DocumentChecklistEngine
from propdesk.application.use_cases.documents.upload_rules import size_problem
from propdesk.application.use_cases.entities import EntityQueryService
from propdesk.core.config import Settings, get_settings
from propdesk.core.exception_handlers import status_for_error_code
from propdesk.domain.enums import EntityCollection, SlotState
from propdesk.domain.exceptions import TransportFailure
from propdesk.schemas.documents import (
    ChecklistResponse,
    DocumentViewResponse,
    SlotOperationResponse,
    SlotViewResponse,
)

router = APIRouter()


@asynccontextmanager
async def _open_checklist(
    engine: DocumentChecklistEngine,
    queries: EntityQueryService,
    identity: str,
    collection: EntityCollection,
    entity_id: str,
) -> AsyncIterator[DocumentChecklistEngine]:
    """Access check, then subscribe and wait for the first snapshot."""
    await queries.get_entity(identity, collection, entity_id)
    async with engine:
        await engine.subscribe(collection, entity_id)
        await engine.wait_loaded()
        if engine.error is not None:
            raise TransportFailure("list files", str(engine.error))
        yield engine


async def _settled_state(
    engine: DocumentChecklistEngine, slot_id: str, timeout: float
) -> SlotState | None:
    """Confirmed slot state once the store echoes the write; None if it does not arrive in time."""
    try:
        return await asyncio.wait_for(engine.wait_settled(slot_id), timeout=timeout)
    except asyncio.TimeoutError:
        return None


def _operation_response(result: SlotOperationResult, state: SlotState | None) -> JSONResponse | SlotOperationResponse:
    response = SlotOperationResponse.from_result(result, state)
    if result.ok:
        return response
    return JSONResponse(
        status_code=status_for_error_code(result.error_code),
        content=response.model_dump(mode="json"),
    )


@router.get("/{collection}/{entity_id}/documents", response_model=ChecklistResponse)
async def get_checklist(
    collection: EntityCollection,
    entity_id: str,
    identity: Annotated[str, Depends(get_identity)],
    queries: Annotated[EntityQueryService, Depends(get_entity_queries)],
    engine: Annotated[DocumentChecklistEngine, Depends(get_checklist_engine)],
):
    """One row per required document with its state and confirmed record."""
    async with _open_checklist(engine, queries, identity, collection, entity_id):
        slots = [SlotViewResponse.from_view(v) for v in engine.checklist()]
    return ChecklistResponse(entity_collection=collection.value, entity_id=entity_id, slots=slots)


@router.post(
    "/{collection}/{entity_id}/documents/{slot_id}",
    response_model=SlotOperationResponse,
    responses={409: {"model": SlotOperationResponse}, 502: {"model": SlotOperationResponse}},
)
async def upload_document(
    collection: EntityCollection,
    entity_id: str,
    slot_id: str,
    identity: Annotated[str, Depends(get_identity)],
    queries: Annotated[EntityQueryService, Depends(get_entity_queries)],
    engine: Annotated[DocumentChecklistEngine, Depends(get_checklist_engine)],
    settings: Annotated[Settings, Depends(get_settings)],
    file: UploadFile = File(...),
):
    """Upload (or replace) the document in a slot."""
    too_large = size_problem(file.size, settings.max_upload_size) if file.size is not None else None
    if too_large:
        rejected = SlotOperationResult(
            slot_id=slot_id,
            ok=False,
            notification=Notification.failure("Upload Failed", too_large),
            error_code="VALIDATION_ERROR",
        )
        return _operation_response(rejected, None)
    # One byte past the limit is enough for the size check to reject it.
    payload = FilePayload(
        file_name=file.filename or "",
        content_type=file.content_type or "application/octet-stream",
        data=await file.read(settings.max_upload_size + 1),
    )
    async with _open_checklist(engine, queries, identity, collection, entity_id):
        result = await engine.upload(slot_id, payload)
        state = None
        if result.ok:
            state = await _settled_state(engine, slot_id, settings.change_feed_poll_seconds * 2)
    return _operation_response(result, state)


@router.delete(
    "/{collection}/{entity_id}/documents/{slot_id}",
    response_model=SlotOperationResponse,
    responses={404: {"model": SlotOperationResponse}, 409: {"model": SlotOperationResponse}},
)
async def delete_document(
    collection: EntityCollection,
    entity_id: str,
    slot_id: str,
    identity: Annotated[str, Depends(get_identity)],
    queries: Annotated[EntityQueryService, Depends(get_entity_queries)],
    engine: Annotated[DocumentChecklistEngine, Depends(get_checklist_engine)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Delete the slot's record; the stored blob is left in place."""
    async with _open_checklist(engine, queries, identity, collection, entity_id):
        result = await engine.delete(slot_id)
        state = None
        if result.ok:
            state = await _settled_state(engine, slot_id, settings.change_feed_poll_seconds * 2)
    return _operation_response(result, state)


@router.get("/{collection}/{entity_id}/documents/{slot_id}/view", response_model=DocumentViewResponse)
async def view_document(
    collection: EntityCollection,
    entity_id: str,
    slot_id: str,
    identity: Annotated[str, Depends(get_identity)],
    queries: Annotated[EntityQueryService, Depends(get_entity_queries)],
    engine: Annotated[DocumentChecklistEngine, Depends(get_checklist_engine)],
):
    """URL of the slot's document for inline preview."""
    async with _open_checklist(engine, queries, identity, collection, entity_id):
        url = engine.view(slot_id)
    return DocumentViewResponse(slot_id=slot_id, url=url)
