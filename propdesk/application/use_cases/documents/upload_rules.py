"""File payload checks applied before any blob upload."""

from __future__ import annotations

from collections.abc import Sequence

from propdesk.application.dtos.documents import FilePayload

DEFAULT_MAX_UPLOAD_SIZE = 20 * 1024 * 1024
DEFAULT_ALLOWED_CONTENT_TYPES: tuple[str, ...] = (
    "image/*",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
)


def content_type_allowed(content_type: str, allowed: Sequence[str]) -> bool:
    """Match against exact types and 'major/*' patterns."""
    content_type = content_type.split(";", 1)[0].strip().lower()
    for pattern in allowed:
        pattern = pattern.strip().lower()
        if pattern.endswith("/*") and content_type.startswith(pattern[:-1]):
            return True
        if content_type == pattern:
            return True
    return False


def size_problem(size_bytes: int, max_size: int = DEFAULT_MAX_UPLOAD_SIZE) -> str | None:
    """Return why a file of size_bytes is too large, or None."""
    if size_bytes > max_size:
        return f"File exceeds the maximum size of {max_size} bytes."
    return None


def payload_problem(
    payload: FilePayload,
    max_size: int = DEFAULT_MAX_UPLOAD_SIZE,
    allowed: Sequence[str] = DEFAULT_ALLOWED_CONTENT_TYPES,
) -> str | None:
    """Return why the payload cannot be uploaded, or None if it can."""
    if not payload.file_name.strip():
        return "File name is required."
    if payload.size_bytes == 0:
        return "File is empty."
    too_large = size_problem(payload.size_bytes, max_size)
    if too_large:
        return too_large
    if not content_type_allowed(payload.content_type, allowed):
        return f"File type {payload.content_type or 'unknown'} is not allowed."
    return None
