"""Firestore integration over the REST API."""

from propdesk.infrastructure.firebase.client import create_firestore_client
from propdesk.infrastructure.firebase.document_store import FirestoreDocumentStore

__all__ = [
    "FirestoreDocumentStore",
    "create_firestore_client",
]
