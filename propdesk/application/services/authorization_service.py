"""Single ownership predicate applied before any entity reaches a caller."""

from __future__ import annotations

from typing import Protocol

from propdesk.domain.exceptions import ResourceNotFoundException


class OwnedEntity(Protocol):
    id: str
    owner_uid: str


def can_access(identity: str | None, entity: OwnedEntity | None) -> bool:
    """True only when entity exists and its ownerUid is the acting identity."""
    if not identity or entity is None:
        return False
    return entity.owner_uid == identity


def require_access(identity: str | None, entity: OwnedEntity | None, resource_type: str, resource_id: str) -> None:
    """Raise ResourceNotFoundException unless can_access; a foreign entity looks missing."""
    if not can_access(identity, entity):
        raise ResourceNotFoundException(resource_type, resource_id)
