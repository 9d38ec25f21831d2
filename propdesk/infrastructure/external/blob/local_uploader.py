"""Local filesystem blob upload (development)."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

import aiofiles
import aiofiles.os

from propdesk.application.dtos.documents import FilePayload
from propdesk.domain.exceptions import UploadFailure
from propdesk.infrastructure.external.blob.keys import blob_key

logger = logging.getLogger(__name__)


class LocalUploader:
    """IBlobUploader writing files under storage_root.

    Writes use temp file + rename; the URL is base_url + key.
    """

    def __init__(self, storage_root: str, base_url: str) -> None:
        self.storage_root = Path(storage_root).resolve()
        self.base_url = base_url.rstrip("/")

    def _get_full_path(self, key: str) -> Path:
        full_path = (self.storage_root / key).resolve()
        full_path.relative_to(self.storage_root)
        return full_path

    async def upload_blob(self, payload: FilePayload) -> str:
        key = blob_key(payload.file_name)
        try:
            target_path = self._get_full_path(key)
            target_path.parent.mkdir(parents=True, exist_ok=True, mode=0o750)
            temp_fd, temp_path = tempfile.mkstemp(dir=target_path.parent, prefix=".tmp_")
            os.close(temp_fd)
            try:
                async with aiofiles.open(temp_path, "wb") as f:
                    await f.write(payload.data)
                await aiofiles.os.replace(temp_path, target_path)
            except BaseException:
                if os.path.exists(temp_path):
                    os.unlink(temp_path)
                raise
        except (OSError, ValueError) as e:
            logger.warning("Local upload of %s failed: %s", payload.file_name, e)
            raise UploadFailure(payload.file_name, str(e)) from e
        return f"{self.base_url}/{key}"

    async def aclose(self) -> None:
        return None
