"""Cloudinary unsigned upload over the REST upload API."""

from __future__ import annotations

import logging

import httpx

from propdesk.application.dtos.documents import FilePayload
from propdesk.domain.exceptions import UploadFailure

logger = logging.getLogger(__name__)

_UPLOAD_BASE = "https://api.cloudinary.com/v1_1"


def resource_type_for(content_type: str) -> str:
    """Images go to the image pipeline; everything else (PDF, docs) is raw."""
    return "image" if content_type.startswith("image/") else "raw"


class CloudinaryUploader:
    """IBlobUploader posting multipart forms to an unsigned upload preset."""

    def __init__(
        self,
        cloud_name: str,
        upload_preset: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 60.0,
    ) -> None:
        self.cloud_name = cloud_name
        self.upload_preset = upload_preset
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None

    def upload_url(self, content_type: str) -> str:
        return f"{_UPLOAD_BASE}/{self.cloud_name}/{resource_type_for(content_type)}/upload"

    async def upload_blob(self, payload: FilePayload) -> str:
        """Upload and return the secure URL.

        Raises:
            UploadFailure: transport error, non-2xx response or no secure_url.
        """
        url = self.upload_url(payload.content_type)
        try:
            resp = await self._http.post(
                url,
                data={"upload_preset": self.upload_preset},
                files={"file": (payload.file_name, payload.data, payload.content_type)},
            )
        except httpx.HTTPError as e:
            logger.warning("Cloudinary upload of %s failed: %s", payload.file_name, e)
            raise UploadFailure(payload.file_name, str(e)) from e
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if resp.status_code >= 400:
            reason = (body.get("error") or {}).get("message") or f"HTTP {resp.status_code}"
            logger.warning("Cloudinary rejected %s: %s", payload.file_name, reason)
            raise UploadFailure(payload.file_name, reason)
        secure_url = body.get("secure_url")
        if not secure_url:
            raise UploadFailure(payload.file_name, "response has no secure_url")
        logger.debug("Uploaded %s to %s", payload.file_name, secure_url)
        return secure_url

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it."""
        if self._owns_http:
            await self._http.aclose()
