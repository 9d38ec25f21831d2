"""Media gallery API for prospects and properties."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile

from propdesk.api.v1.dependencies import get_media_gallery
from propdesk.application.dtos.documents import FilePayload
from propdesk.application.use_cases.documents import MediaGallery
from propdesk.application.use_cases.documents.upload_rules import size_problem
from propdesk.core.config import Settings, get_settings
from propdesk.domain.exceptions import ValidationException
from propdesk.schemas.documents import MediaFileResponse

router = APIRouter()


@router.get("/{collection}/{entity_id}/media", response_model=list[MediaFileResponse])
async def list_media(gallery: Annotated[MediaGallery, Depends(get_media_gallery)]):
    return [MediaFileResponse.model_validate(m) for m in await gallery.list()]


@router.post("/{collection}/{entity_id}/media", response_model=MediaFileResponse, status_code=201)
async def upload_media(
    gallery: Annotated[MediaGallery, Depends(get_media_gallery)],
    settings: Annotated[Settings, Depends(get_settings)],
    file: UploadFile = File(...),
):
    """Add a photo or file to the gallery."""
    too_large = size_problem(file.size, settings.max_upload_size) if file.size is not None else None
    if too_large:
        raise ValidationException(too_large, field="file")
    payload = FilePayload(
        file_name=file.filename or "",
        content_type=file.content_type or "application/octet-stream",
        data=await file.read(settings.max_upload_size + 1),
    )
    created = await gallery.upload(payload)
    return MediaFileResponse.model_validate(created)


@router.delete("/{collection}/{entity_id}/media/{media_id}", response_model=MediaFileResponse)
async def delete_media(
    media_id: str,
    gallery: Annotated[MediaGallery, Depends(get_media_gallery)],
):
    """Remove the media record; returns what was deleted."""
    deleted = await gallery.delete(media_id)
    return MediaFileResponse.model_validate(deleted)
