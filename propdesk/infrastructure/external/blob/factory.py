"""Blob uploader factory: creates Cloudinary, S3 or local backend from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from propdesk.application.interfaces.services import IBlobUploader

if TYPE_CHECKING:
    from propdesk.core.config import Settings


class BlobUploaderFactory:
    """Factory for blob uploader instances based on configuration."""

    @staticmethod
    def create_uploader(settings: Settings | None = None) -> IBlobUploader:
        """Create the uploader selected by settings.blob_backend.

        Raises:
            ValueError: Unknown backend or missing required config.
        """
        from propdesk.core.config import get_settings

        s = settings or get_settings()
        backend = s.blob_backend.lower()

        if backend == "cloudinary":
            from propdesk.infrastructure.external.blob.cloudinary_uploader import (
                CloudinaryUploader,
            )

            if not s.cloudinary_cloud_name:
                raise ValueError("CLOUDINARY_CLOUD_NAME required for cloudinary backend")
            return CloudinaryUploader(
                cloud_name=s.cloudinary_cloud_name,
                upload_preset=s.cloudinary_upload_preset,
            )
        if backend == "s3":
            from propdesk.infrastructure.external.blob.s3_uploader import S3Uploader

            if not s.s3_bucket:
                raise ValueError("S3_BUCKET required for s3 backend")
            return S3Uploader(
                bucket=s.s3_bucket,
                region=s.s3_region,
                endpoint_url=s.s3_endpoint_url,
                access_key=s.s3_access_key,
                secret_key=s.s3_secret_key.get_secret_value() if s.s3_secret_key else None,
                public_base_url=s.s3_public_base_url,
            )
        if backend == "local":
            from propdesk.infrastructure.external.blob.local_uploader import LocalUploader

            return LocalUploader(storage_root=s.storage_root, base_url=s.storage_base_url)
        raise ValueError(
            f"Unknown blob backend: {backend}. Supported: 'cloudinary', 's3', 'local'"
        )
