"""S3-compatible blob upload (AWS S3, MinIO, etc.)."""

from __future__ import annotations

import asyncio
import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from propdesk.application.dtos.documents import FilePayload
from propdesk.domain.exceptions import UploadFailure
from propdesk.infrastructure.external.blob.keys import blob_key

logger = logging.getLogger(__name__)


class S3Uploader:
    """IBlobUploader writing objects to a bucket.

    Uses boto3 (sync) via asyncio.to_thread. Returned URLs are built from
    public_base_url when set, else the bucket's virtual-hosted URL.
    """

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        public_base_url: str | None = None,
        client=None,
    ) -> None:
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        if client is None:
            extra = {} if endpoint_url is None else {"endpoint_url": endpoint_url}
            client = boto3.client(
                "s3",
                region_name=region,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
                **extra,
            )
        self._client = client

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    async def upload_blob(self, payload: FilePayload) -> str:
        """Put the object under a fresh key and return its URL."""
        key = blob_key(payload.file_name)

        def _put() -> None:
            self._client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=payload.data,
                ContentType=payload.content_type,
                ServerSideEncryption="AES256",
            )

        try:
            await asyncio.to_thread(_put)
        except (ClientError, BotoCoreError) as e:
            logger.warning("S3 upload of %s failed: %s", payload.file_name, e)
            raise UploadFailure(payload.file_name, str(e)) from e
        return self.public_url(key)

    async def aclose(self) -> None:
        return None
