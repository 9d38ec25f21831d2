"""Blob upload backends (Cloudinary, S3, local)."""

from propdesk.infrastructure.external.blob.factory import BlobUploaderFactory

__all__ = ["BlobUploaderFactory"]
