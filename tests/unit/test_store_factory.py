"""Tests for create_document_store backend selection."""

import json

import pytest

from propdesk.core.config import Settings
from propdesk.infrastructure.firebase import FirestoreDocumentStore, create_firestore_client
from propdesk.infrastructure.memory import InMemoryDocumentStore
from propdesk.infrastructure.store_factory import create_document_store


async def test_memory_backend() -> None:
    store = await create_document_store(Settings(store_backend="memory", blob_backend="local"))
    assert isinstance(store, InMemoryDocumentStore)


async def test_unknown_backend_is_rejected() -> None:
    settings = Settings(store_backend="memory", blob_backend="local")
    settings.store_backend = "postgres"
    with pytest.raises(ValueError, match="Unknown store backend"):
        await create_document_store(settings)


def test_firestore_client_needs_project_id() -> None:
    settings = Settings(
        store_backend="firestore",
        blob_backend="local",
        firebase_service_account_key=json.dumps({"type": "service_account"}),
    )
    with pytest.raises(ValueError, match="project_id"):
        create_firestore_client(settings)


def test_firestore_key_must_be_json() -> None:
    settings = Settings(store_backend="firestore", blob_backend="local", firebase_service_account_key="not json")
    with pytest.raises(ValueError, match="not valid JSON"):
        create_firestore_client(settings)


def test_firestore_key_path_must_exist(tmp_path) -> None:
    settings = Settings(
        store_backend="firestore",
        blob_backend="local",
        firebase_service_account_path=str(tmp_path / "missing.json"),
    )
    with pytest.raises(ValueError, match="file not found"):
        create_firestore_client(settings)


async def test_firestore_backend_without_redis(monkeypatch) -> None:
    sentinel = object()
    monkeypatch.setattr(
        "propdesk.infrastructure.firebase.create_firestore_client", lambda settings: sentinel
    )
    settings = Settings(
        store_backend="firestore",
        blob_backend="local",
        firebase_service_account_path="/secrets/sa.json",
        redis_enabled=False,
    )
    store = await create_document_store(settings)
    assert isinstance(store, FirestoreDocumentStore)
