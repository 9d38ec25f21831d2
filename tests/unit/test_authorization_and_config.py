"""Tests for the ownership predicate and settings validation."""

from dataclasses import dataclass

import pytest
from pydantic import ValidationError

from propdesk.application.services.authorization_service import can_access, require_access
from propdesk.core.config import Settings
from propdesk.domain.exceptions import ResourceNotFoundException


@dataclass
class _Owned:
    id: str
    owner_uid: str


class TestOwnership:
    def test_owner_can_access(self) -> None:
        assert can_access("u1", _Owned("p", "u1"))

    @pytest.mark.parametrize(
        ("identity", "entity"),
        [("u2", _Owned("p", "u1")), (None, _Owned("p", "u1")), ("", _Owned("p", "")), ("u1", None)],
    )
    def test_everyone_else_is_denied(self, identity, entity) -> None:
        assert not can_access(identity, entity)

    def test_require_access_makes_foreign_entity_look_missing(self) -> None:
        with pytest.raises(ResourceNotFoundException) as exc_info:
            require_access("u2", _Owned("p", "u1"), "property", "p")
        assert exc_info.value.details == {"resource_type": "property", "resource_id": "p"}


class TestSettings:
    def test_memory_and_local_need_nothing_else(self) -> None:
        settings = Settings(store_backend="memory", blob_backend="local")
        assert settings.identity_header_name == "X-User-ID"
        assert "image/*" in settings.allowed_content_type_list

    def test_firestore_requires_service_account(self) -> None:
        with pytest.raises(ValidationError, match="FIREBASE_SERVICE_ACCOUNT"):
            Settings(store_backend="firestore", blob_backend="local")

    def test_firestore_accepts_key_path(self) -> None:
        settings = Settings(
            store_backend="firestore",
            blob_backend="local",
            firebase_service_account_path="/secrets/sa.json",
        )
        assert settings.firebase_service_account_path == "/secrets/sa.json"

    def test_cloudinary_requires_cloud_name(self) -> None:
        with pytest.raises(ValidationError, match="cloudinary_cloud_name"):
            Settings(store_backend="memory", blob_backend="cloudinary", cloudinary_cloud_name=None)

    def test_s3_requires_bucket(self) -> None:
        with pytest.raises(ValidationError, match="s3_bucket"):
            Settings(store_backend="memory", blob_backend="s3")

    @pytest.mark.parametrize(
        "overrides",
        [{"store_backend": "postgres"}, {"blob_backend": "ftp"}, {"change_feed_poll_seconds": 0}],
    )
    def test_invalid_values_are_rejected(self, overrides: dict) -> None:
        values = {"store_backend": "memory", "blob_backend": "local", **overrides}
        with pytest.raises(ValidationError):
            Settings(**values)
