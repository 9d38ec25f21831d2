"""Service interfaces (ports) for the application layer.

Protocols define contracts for external collaborators (DIP).
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from propdesk.application.dtos.documents import FilePayload
    from propdesk.application.dtos.notification import Notification


class IBlobUploader(Protocol):
    """Protocol for durable file upload (Cloudinary, S3, local filesystem)."""

    async def upload_blob(self, payload: FilePayload) -> str:
        """Upload file bytes; return a durable URL. Raises UploadFailure."""

    async def aclose(self) -> None:
        """Release connections held by the uploader."""


# Receives user-facing notifications produced at operation boundaries.
NotifyCallback = Callable[["Notification"], Awaitable[None]]
