"""Firestore client construction (REST-based, no firebase-admin).

Credentials come from FIREBASE_SERVICE_ACCOUNT_KEY (JSON string) or
FIREBASE_SERVICE_ACCOUNT_PATH (file path). The client is created once at
startup and passed to the store; there is no module-level instance.
"""

import json
import logging
from pathlib import Path

import httpx

from propdesk.core.config import Settings
from propdesk.infrastructure.firebase._rest_client import (
    FirestoreRESTClient,
    _get_credentials,
)

logger = logging.getLogger(__name__)


def _load_key_dict(settings: Settings) -> dict:
    """Return service account dict from env key or file path."""
    key_json = settings.firebase_service_account_key.get_secret_value() if settings.firebase_service_account_key else None
    if key_json:
        try:
            return json.loads(key_json)
        except json.JSONDecodeError as e:
            raise ValueError("FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON") from e
    path = settings.firebase_service_account_path
    if path:
        resolved = Path(path).expanduser().resolve()
        if not resolved.is_file():
            raise ValueError(
                f"FIREBASE_SERVICE_ACCOUNT_PATH set but file not found: {path} (resolved: {resolved})"
            )
        with open(resolved, encoding="utf-8") as f:
            return json.load(f)
    raise ValueError("No Firebase service account configured")


def create_firestore_client(
    settings: Settings,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> FirestoreRESTClient:
    """Build the Firestore REST client from settings.

    Raises:
        ValueError: credentials missing, unreadable or without project_id.
    """
    key_dict = _load_key_dict(settings)
    project_id = key_dict.get("project_id")
    if not project_id:
        raise ValueError("Firebase service account JSON missing 'project_id'")
    credentials = _get_credentials(key_dict)
    logger.info("Firestore client created for project %s", project_id)
    return FirestoreRESTClient(
        project_id,
        credentials,
        http_client=http_client,
        timeout=settings.firestore_timeout_seconds,
    )
