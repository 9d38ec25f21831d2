"""WebSocket endpoints: live document checklist and live public listings.

Collaborators come from app.state (set in lifespan). Browsers cannot set
headers on a WebSocket, so the identity may also be passed as ?user_id=.
Each connection runs a pump (store snapshots to client) and a receive loop
side by side; whichever ends first cancels the other.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Coroutine
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from propdesk.application.dtos.listings import PublicListingsView
from propdesk.application.dtos.notification import Notification
from propdesk.application.use_cases.documents import DocumentChecklistEngine
from propdesk.application.use_cases.entities import EntityQueryService
from propdesk.application.use_cases.listings import PublicVisibilityGate
from propdesk.core.config import get_settings
from propdesk.domain.entities import Property
from propdesk.domain.enums import EntityCollection, GateState
from propdesk.domain.exceptions import PropdeskException
from propdesk.schemas.documents import NotificationResponse, SlotViewResponse
from propdesk.schemas.listings import PublicListingsResponse
from propdesk.schemas.websocket import (
    ChecklistMessage,
    ErrorMessage,
    NotificationMessage,
    PublicListingsMessage,
)

logger = logging.getLogger(__name__)

router = APIRouter()

MessageHandler = Callable[[dict[str, Any]], Awaitable[None]]


async def _reject_websocket(websocket: WebSocket, reason: str, code: int = 1008) -> None:
    """Accept then immediately close with code/reason so client gets a proper close frame."""
    await websocket.accept()
    await websocket.close(code=code, reason=reason)


async def _receive_loop(websocket: WebSocket, on_message: MessageHandler | None) -> None:
    try:
        while True:
            try:
                data = await websocket.receive_json()
            except ValueError:
                await websocket.send_json(
                    ErrorMessage(error="INVALID_MESSAGE", message="Expected a JSON object").model_dump()
                )
                continue
            if on_message is not None and isinstance(data, dict):
                await on_message(data)
    except WebSocketDisconnect:
        return


async def _run_connection(
    websocket: WebSocket,
    pump: Coroutine[Any, Any, None],
    on_message: MessageHandler | None = None,
) -> None:
    """Run pump and receive loop until one finishes; close the socket if still open."""
    pump_task = asyncio.create_task(pump)
    receive_task = asyncio.create_task(_receive_loop(websocket, on_message))
    done, pending = await asyncio.wait({pump_task, receive_task}, return_when=asyncio.FIRST_COMPLETED)
    for task in pending:
        task.cancel()
    await asyncio.gather(*pending, return_exceptions=True)
    for task in done:
        exc = task.exception()
        if exc is not None and not isinstance(exc, WebSocketDisconnect):
            logger.error("WebSocket task failed: %s", exc, exc_info=exc)
    if websocket.client_state == WebSocketState.CONNECTED:
        await websocket.close()


def _identity(websocket: WebSocket) -> str:
    settings = get_settings()
    header = websocket.headers.get(settings.identity_header_name) or ""
    return (header or websocket.query_params.get("user_id") or "").strip()


@router.websocket("/ws/documents/{collection}/{entity_id}")
async def checklist_websocket(websocket: WebSocket, collection: str, entity_id: str):
    """Push the checklist on every change; accepts {"action": "delete", "slot_id": ...}."""
    identity = _identity(websocket)
    if not identity:
        await _reject_websocket(websocket, "Missing identity")
        return
    try:
        entity_collection = EntityCollection(collection)
    except ValueError:
        await _reject_websocket(websocket, "Unknown collection")
        return
    state = websocket.app.state
    try:
        await EntityQueryService(state.store).get_entity(identity, entity_collection, entity_id)
    except PropdeskException:
        await _reject_websocket(websocket, "Not found")
        return

    await websocket.accept()

    async def notify(notification: Notification) -> None:
        message = NotificationMessage(notification=NotificationResponse.from_notification(notification))
        await websocket.send_json(message.model_dump(mode="json"))

    settings = get_settings()
    engine = DocumentChecklistEngine(
        state.store,
        state.blob_uploader,
        in_flight=state.in_flight,
        notify=notify,
        max_upload_size=settings.max_upload_size,
        allowed_content_types=settings.allowed_content_type_list,
    )

    async def pump() -> None:
        await engine.wait_loaded()
        version = -1
        while not engine.closed:
            if engine.error is not None:
                return
            if engine.version != version:
                version = engine.version
                message = ChecklistMessage(
                    version=version,
                    slots=[SlotViewResponse.from_view(v) for v in engine.checklist()],
                )
                await websocket.send_json(message.model_dump(mode="json"))
            await engine.wait_for_update(version)

    async def on_message(data: dict[str, Any]) -> None:
        if data.get("action") != "delete":
            await websocket.send_json(
                ErrorMessage(error="UNKNOWN_ACTION", message="Supported actions: delete").model_dump()
            )
            return
        try:
            await engine.delete(str(data.get("slot_id", "")))
        except PropdeskException as e:
            await websocket.send_json(ErrorMessage(error=e.error_code, message=e.message).model_dump())

    async with engine:
        await engine.subscribe(entity_collection, entity_id)
        await _run_connection(websocket, pump(), on_message)


@router.websocket("/ws/public-listings")
async def public_listings_websocket(websocket: WebSocket):
    """Send the gate state, then the owner's listings on every change (Enabled only)."""
    owner = websocket.query_params.get("owner")
    await websocket.accept()

    async with PublicVisibilityGate(websocket.app.state.store) as gate:
        gate_state = await gate.open(owner)

        async def send(listings: tuple[Property, ...] = ()) -> None:
            view = PublicListingsView(
                state=gate.state, owner_display_name=gate.owner_display_name, listings=listings
            )
            message = PublicListingsMessage(view=PublicListingsResponse.from_view(view))
            await websocket.send_json(message.model_dump(mode="json"))

        async def pump() -> None:
            if gate_state != GateState.ENABLED:
                await send()
                return
            async for listings in gate.listings():
                await send(listings)

        await _run_connection(websocket, pump())
