"""Owner profile at users/{uid}: display name, contact numbers, public listing switch."""

from __future__ import annotations

import logging
from typing import Any

from propdesk.application.interfaces.store import IDocumentStore
from propdesk.domain.entities import OwnerProfile
from propdesk.domain.exceptions import ValidationException
from propdesk.shared.collections import user_path

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(
    {"displayName", "publicListingsEnabled", "primaryNumber", "secondaryNumber", "email"}
)


class OwnerProfileService:
    def __init__(self, store: IDocumentStore) -> None:
        self._store = store

    async def find_profile(self, uid: str) -> OwnerProfile | None:
        """Profile of any owner, or None if it was never saved."""
        doc = await self._store.get(user_path(uid))
        if doc is None:
            return None
        return OwnerProfile.from_dict(uid, doc.data)

    async def get_profile(self, identity: str) -> OwnerProfile:
        """The acting identity's profile; an unsaved profile reads as defaults."""
        return await self.find_profile(identity) or OwnerProfile(uid=identity)

    async def update_profile(self, identity: str, changes: dict[str, Any]) -> OwnerProfile:
        """Merge the given fields into the profile (created on first save)."""
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationException(f"Unknown profile fields: {', '.join(sorted(unknown))}", field="profile")
        if "publicListingsEnabled" in changes and not isinstance(changes["publicListingsEnabled"], bool):
            raise ValidationException("publicListingsEnabled must be a boolean", field="publicListingsEnabled")
        if changes:
            await self._store.upsert(user_path(identity), dict(changes))
            logger.info("Profile updated for %s: %s", identity, sorted(changes))
        return await self.get_profile(identity)
