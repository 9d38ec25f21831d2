"""Public, read-only view of one owner's listed properties.

Gate states: Loading -> Invalid | Disabled | Enabled. Invalid means no owner
token; Disabled covers a missing profile, a failed lookup and an owner who
has not opted in, so callers cannot tell an unknown owner from a disabled one.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from propdesk.application.dtos.documents import MediaFile
from propdesk.application.dtos.listings import PublicListingsView, PublicPropertyDetail
from propdesk.application.dtos.store import FieldFilter, Snapshot
from propdesk.application.interfaces.store import IDocumentStore, ISubscription
from propdesk.application.use_cases.entities.owner_profiles import OwnerProfileService
from propdesk.domain.entities import OwnerProfile, Property
from propdesk.domain.enums import EntityCollection, GateState
from propdesk.domain.exceptions import PropdeskException, ResourceNotFoundException
from propdesk.shared.collections import entity_path, media_collection

logger = logging.getLogger(__name__)


def publicly_visible(snapshot: Snapshot) -> tuple[Property, ...]:
    """Properties flagged public that carry a positive listing price."""
    visible: list[Property] = []
    for doc in snapshot:
        try:
            prop = Property.from_dict(doc.id, doc.data, doc.update_time)
        except (ValueError, PropdeskException) as e:
            logger.warning("Skipping unreadable property %s: %s", doc.id, e)
            continue
        if prop.is_listed_publicly and prop.has_listing_price():
            visible.append(prop)
    return tuple(visible)


class PublicVisibilityGate:
    """Decides whether an owner's public listings may be shown, then streams them.

    Usage:
        async with PublicVisibilityGate(store) as gate:
            if await gate.open(owner_token) == GateState.ENABLED:
                async for listings in gate.listings():
                    ...
    """

    def __init__(self, store: IDocumentStore, profiles: OwnerProfileService | None = None) -> None:
        self._store = store
        self._profiles = profiles or OwnerProfileService(store)
        self._state = GateState.LOADING
        self._profile: OwnerProfile | None = None
        self._subscription: ISubscription | None = None
        self._opened = False
        self._closed = False

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def owner_display_name(self) -> str | None:
        return self._profile.display_name if self._profile else None

    async def open(self, owner_token: str | None) -> GateState:
        """Resolve the gate for owner_token. Can be called once per gate."""
        if self._opened:
            raise RuntimeError("Gate already opened")
        self._opened = True
        token = (owner_token or "").strip()
        if not token:
            self._state = GateState.INVALID
            return self._state
        try:
            profile = await self._profiles.find_profile(token)
        except PropdeskException as e:
            logger.warning("Owner profile lookup failed for public view: %s", e.message)
            profile = None
        if profile is None or not profile.public_listings_enabled or self._closed:
            self._state = GateState.DISABLED
            return self._state
        self._profile = profile
        self._subscription = self._store.subscribe(
            EntityCollection.PROPERTIES.value,
            [FieldFilter("ownerUid", token), FieldFilter("isListedPublicly", True)],
        )
        self._state = GateState.ENABLED
        logger.debug("Public listings enabled for owner %s", token)
        return self._state

    def _disable(self, error: PropdeskException) -> None:
        logger.warning("Public listings query failed: %s", error.message)
        self._state = GateState.DISABLED
        self._profile = None

    async def listings(self) -> AsyncIterator[tuple[Property, ...]]:
        """Visible listings per snapshot; yields nothing unless Enabled.

        A failed query turns the gate Disabled and yields one empty batch.
        """
        if self._state != GateState.ENABLED or self._subscription is None:
            return
        try:
            async for snapshot in self._subscription:
                yield publicly_visible(snapshot)
        except PropdeskException as e:
            self._disable(e)
            yield ()

    async def current_view(self) -> PublicListingsView:
        """Gate state plus the listings of the next snapshot (empty unless Enabled)."""
        listings: tuple[Property, ...] = ()
        if self._state == GateState.ENABLED and self._subscription is not None:
            try:
                listings = publicly_visible(await anext(self._subscription))
            except StopAsyncIteration:
                pass
            except PropdeskException as e:
                self._disable(e)
        return PublicListingsView(
            state=self._state,
            owner_display_name=self.owner_display_name,
            listings=listings,
        )

    async def close(self) -> None:
        """Cancel the live subscription (once)."""
        if self._closed:
            return
        self._closed = True
        if self._subscription is not None:
            await self._subscription.cancel()

    async def __aenter__(self) -> PublicVisibilityGate:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


class PublicListingService:
    """One-shot public reads with the same rules as the gate."""

    def __init__(self, store: IDocumentStore, profiles: OwnerProfileService | None = None) -> None:
        self._store = store
        self._profiles = profiles or OwnerProfileService(store)

    async def listings_view(self, owner_token: str | None) -> PublicListingsView:
        async with PublicVisibilityGate(self._store, self._profiles) as gate:
            await gate.open(owner_token)
            return await gate.current_view()

    async def get_public_property(self, property_id: str) -> PublicPropertyDetail:
        """A publicly listed property and its media; anything else is not-found."""
        doc = await self._store.get(entity_path(EntityCollection.PROPERTIES.value, property_id))
        visible = publicly_visible((doc,)) if doc is not None else ()
        if not visible:
            raise ResourceNotFoundException("property", property_id)
        prop = visible[0]
        try:
            profile = await self._profiles.find_profile(prop.owner_uid)
        except PropdeskException as e:
            logger.warning("Owner profile lookup failed for public property %s: %s", property_id, e.message)
            profile = None
        if profile is None or not profile.public_listings_enabled:
            raise ResourceNotFoundException("property", property_id)
        media = await self._store.query(media_collection(EntityCollection.PROPERTIES.value, property_id))
        return PublicPropertyDetail(property=prop, media=[MediaFile.from_stored(m) for m in media])
