"""Process-local document store backend."""

from propdesk.infrastructure.memory.document_store import InMemoryDocumentStore

__all__ = ["InMemoryDocumentStore"]
