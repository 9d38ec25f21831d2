"""Tests for the Cloudinary, S3 and local blob uploaders and the uploader factory."""

from pathlib import Path

import httpx
import pytest
from botocore.exceptions import ClientError

from propdesk.application.dtos.documents import FilePayload
from propdesk.core.config import Settings
from propdesk.domain.exceptions import UploadFailure
from propdesk.infrastructure.external.blob import BlobUploaderFactory
from propdesk.infrastructure.external.blob.cloudinary_uploader import (
    CloudinaryUploader,
    resource_type_for,
)
from propdesk.infrastructure.external.blob.keys import blob_key
from propdesk.infrastructure.external.blob.local_uploader import LocalUploader
from propdesk.infrastructure.external.blob.s3_uploader import S3Uploader

PDF = FilePayload(file_name="sale deed.pdf", content_type="application/pdf", data=b"%PDF-1.4")
JPEG = FilePayload(file_name="front.jpg", content_type="image/jpeg", data=b"\xff\xd8\xff")


def _cloudinary(handler) -> CloudinaryUploader:
    return CloudinaryUploader(
        "demo-cloud",
        "property_manager_unsigned",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


class TestCloudinaryUploader:
    def test_resource_type_follows_content_type(self) -> None:
        assert resource_type_for("image/png") == "image"
        assert resource_type_for("application/pdf") == "raw"

    async def test_success_returns_secure_url(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"secure_url": "https://res.cloudinary.com/demo-cloud/raw/x.pdf"})

        url = await _cloudinary(handler).upload_blob(PDF)
        assert url == "https://res.cloudinary.com/demo-cloud/raw/x.pdf"
        assert str(seen[0].url) == "https://api.cloudinary.com/v1_1/demo-cloud/raw/upload"
        body = seen[0].read()
        assert b"property_manager_unsigned" in body
        assert b"sale deed.pdf" in body

    async def test_images_use_image_endpoint(self) -> None:
        urls: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            urls.append(str(request.url))
            return httpx.Response(200, json={"secure_url": "https://img"})

        await _cloudinary(handler).upload_blob(JPEG)
        assert urls == ["https://api.cloudinary.com/v1_1/demo-cloud/image/upload"]

    async def test_error_message_becomes_failure_reason(self) -> None:
        client = _cloudinary(
            lambda request: httpx.Response(400, json={"error": {"message": "Upload preset not found"}})
        )
        with pytest.raises(UploadFailure) as exc_info:
            await client.upload_blob(PDF)
        assert exc_info.value.details["reason"] == "Upload preset not found"
        assert exc_info.value.error_code == "UPLOAD_FAILED"

    async def test_missing_secure_url_is_a_failure(self) -> None:
        client = _cloudinary(lambda request: httpx.Response(200, json={"public_id": "x"}))
        with pytest.raises(UploadFailure):
            await client.upload_blob(PDF)

    async def test_transport_error_is_a_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(UploadFailure):
            await _cloudinary(handler).upload_blob(PDF)


class _FakeS3Client:
    def __init__(self, error: ClientError | None = None) -> None:
        self.calls: list[dict] = []
        self.error = error

    def put_object(self, **kwargs) -> dict:
        if self.error is not None:
            raise self.error
        self.calls.append(kwargs)
        return {}


class TestS3Uploader:
    async def test_put_object_and_virtual_hosted_url(self) -> None:
        client = _FakeS3Client()
        uploader = S3Uploader("deeds", region="ap-south-1", client=client)
        url = await uploader.upload_blob(PDF)
        call = client.calls[0]
        assert call["Bucket"] == "deeds"
        assert call["ContentType"] == "application/pdf"
        assert call["Body"] == PDF.data
        assert url == f"https://deeds.s3.ap-south-1.amazonaws.com/{call['Key']}"
        assert call["Key"].endswith("/sale_deed.pdf")

    async def test_public_base_url_wins(self) -> None:
        uploader = S3Uploader(
            "deeds", public_base_url="https://cdn.example.com/", client=_FakeS3Client()
        )
        url = await uploader.upload_blob(JPEG)
        assert url.startswith("https://cdn.example.com/")
        assert url.endswith("/front.jpg")

    async def test_client_error_is_upload_failure(self) -> None:
        error = ClientError({"Error": {"Code": "AccessDenied", "Message": "Denied"}}, "PutObject")
        uploader = S3Uploader("deeds", client=_FakeS3Client(error))
        with pytest.raises(UploadFailure):
            await uploader.upload_blob(PDF)


class TestLocalUploader:
    async def test_writes_file_under_storage_root(self, tmp_path: Path) -> None:
        uploader = LocalUploader(str(tmp_path), "http://localhost:8000/files/")
        url = await uploader.upload_blob(PDF)
        assert url.startswith("http://localhost:8000/files/")
        key = url.removeprefix("http://localhost:8000/files/")
        assert (tmp_path / key).read_bytes() == PDF.data
        assert not list(tmp_path.rglob(".tmp_*"))

    async def test_path_components_in_file_name_are_dropped(self, tmp_path: Path) -> None:
        uploader = LocalUploader(str(tmp_path), "http://files")
        payload = FilePayload(file_name="../../etc/passwd", content_type="text/plain", data=b"x")
        url = await uploader.upload_blob(payload)
        assert url.endswith("/passwd")
        assert len(list(tmp_path.rglob("passwd"))) == 1

    async def test_unwritable_root_is_upload_failure(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        with pytest.raises(UploadFailure):
            await LocalUploader(str(blocker), "http://files").upload_blob(PDF)


def test_blob_keys_are_unique_and_safe() -> None:
    first, second = blob_key("Owner PAN (1).pdf"), blob_key("Owner PAN (1).pdf")
    assert first != second
    assert first.split("/", 1)[1] == "Owner_PAN_1_.pdf"
    assert blob_key("...").endswith("/file")


class TestFactory:
    def test_local_backend(self, tmp_path: Path) -> None:
        settings = Settings(store_backend="memory", blob_backend="local", storage_root=str(tmp_path))
        assert isinstance(BlobUploaderFactory.create_uploader(settings), LocalUploader)

    def test_cloudinary_backend(self) -> None:
        settings = Settings(
            store_backend="memory", blob_backend="cloudinary", cloudinary_cloud_name="demo-cloud"
        )
        uploader = BlobUploaderFactory.create_uploader(settings)
        assert isinstance(uploader, CloudinaryUploader)
        assert uploader.upload_preset == "property_manager_unsigned"

    def test_s3_backend(self) -> None:
        settings = Settings(store_backend="memory", blob_backend="s3", s3_bucket="deeds")
        assert isinstance(BlobUploaderFactory.create_uploader(settings), S3Uploader)
