"""Pytest configuration and fixtures for propdesk.

HTTP tests run against propdesk.main:app with the in-memory document store
and a fake blob uploader swapped in through dependency overrides (the ASGI
transport does not run the lifespan).
"""

import asyncio
import os

os.environ["STORE_BACKEND"] = "memory"
os.environ["BLOB_BACKEND"] = "local"
os.environ["REDIS_ENABLED"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient

from propdesk.api.v1.dependencies import get_blob_uploader, get_in_flight, get_store
from propdesk.application.dtos.documents import FilePayload
from propdesk.application.use_cases.documents import SlotInFlightTracker
from propdesk.core.config import get_settings
from propdesk.domain.exceptions import UploadFailure
from propdesk.infrastructure.memory import InMemoryDocumentStore

get_settings.cache_clear()

from propdesk.main import app  # noqa: E402


class FakeUploader:
    """IBlobUploader double: records payloads, can fail or block until released."""

    def __init__(self) -> None:
        self.uploaded: list[FilePayload] = []
        self.fail_reason: str | None = None
        self.gate: asyncio.Event | None = None
        self.started = asyncio.Event()
        self.closed = False

    async def upload_blob(self, payload: FilePayload) -> str:
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_reason is not None:
            raise UploadFailure(payload.file_name, self.fail_reason)
        self.uploaded.append(payload)
        return f"https://blobs.test/{len(self.uploaded)}/{payload.file_name}"

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def uploader() -> FakeUploader:
    return FakeUploader()


@pytest.fixture
def in_flight() -> SlotInFlightTracker:
    return SlotInFlightTracker()


@pytest.fixture
def owner_headers() -> dict[str, str]:
    return {"X-User-ID": "owner-1"}


@pytest.fixture
async def client(
    store: InMemoryDocumentStore,
    uploader: FakeUploader,
    in_flight: SlotInFlightTracker,
) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI) with test collaborators."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_blob_uploader] = lambda: uploader
    app.dependency_overrides[get_in_flight] = lambda: in_flight
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
