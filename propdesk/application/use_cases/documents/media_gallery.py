"""Media gallery of one entity: any number of files under media/{autoId}."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from propdesk.application.dtos.documents import FilePayload, MediaFile
from propdesk.application.dtos.store import SERVER_TIMESTAMP, Snapshot
from propdesk.application.interfaces.services import IBlobUploader
from propdesk.application.interfaces.store import IDocumentStore, ISubscription
from propdesk.application.use_cases.documents.upload_rules import (
    DEFAULT_ALLOWED_CONTENT_TYPES,
    DEFAULT_MAX_UPLOAD_SIZE,
    payload_problem,
)
from propdesk.domain.enums import EntityCollection
from propdesk.domain.exceptions import ResourceNotFoundException, ValidationException
from propdesk.shared.collections import media_collection, media_path

logger = logging.getLogger(__name__)


def media_from_snapshot(snapshot: Snapshot) -> list[MediaFile]:
    return [MediaFile.from_stored(doc) for doc in snapshot]


class MediaGallery:
    """Upload, list and delete gallery files; failures raise."""

    def __init__(
        self,
        store: IDocumentStore,
        uploader: IBlobUploader,
        entity_collection: EntityCollection | str,
        entity_id: str,
        *,
        max_upload_size: int = DEFAULT_MAX_UPLOAD_SIZE,
        allowed_content_types: Sequence[str] = DEFAULT_ALLOWED_CONTENT_TYPES,
    ) -> None:
        self._store = store
        self._uploader = uploader
        self._collection = EntityCollection(entity_collection).value
        self._entity_id = entity_id
        self._max_upload_size = max_upload_size
        self._allowed_content_types = tuple(allowed_content_types)

    @property
    def media_path(self) -> str:
        return media_collection(self._collection, self._entity_id)

    async def list(self) -> list[MediaFile]:
        return media_from_snapshot(await self._store.query(self.media_path))

    def subscribe(self) -> ISubscription:
        """Live gallery snapshots; convert with media_from_snapshot."""
        return self._store.subscribe(self.media_path)

    async def upload(self, payload: FilePayload) -> MediaFile:
        """Upload the blob, then create a new media record.

        Raises:
            ValidationException: payload rejected before upload.
            UploadFailure: blob store rejected the file (nothing written).
            WriteError: record could not be written.
        """
        problem = payload_problem(payload, self._max_upload_size, self._allowed_content_types)
        if problem:
            raise ValidationException(problem, field="file")
        url = await self._uploader.upload_blob(payload)
        media_id = self._store.new_id()
        await self._store.set(
            media_path(self._collection, self._entity_id, media_id),
            {
                "id": media_id,
                "fileName": payload.file_name,
                "url": url,
                "contentType": payload.content_type,
                "sizeBytes": payload.size_bytes,
                "uploadTimestamp": SERVER_TIMESTAMP,
            },
        )
        logger.info("Media %s added to %s", media_id, self.media_path)
        return MediaFile(
            id=media_id,
            file_name=payload.file_name,
            url=url,
            content_type=payload.content_type,
            size_bytes=payload.size_bytes,
        )

    async def delete(self, media_id: str) -> MediaFile:
        """Delete the media record (the blob is kept). Returns the deleted record."""
        path = media_path(self._collection, self._entity_id, media_id)
        doc = await self._store.get(path)
        if doc is None:
            raise ResourceNotFoundException("media", media_id)
        await self._store.delete(path)
        logger.info("Media %s deleted from %s", media_id, self.media_path)
        return MediaFile.from_stored(doc)
