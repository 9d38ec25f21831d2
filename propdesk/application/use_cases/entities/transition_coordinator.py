"""Entity state transitions: atomic prospect conversion and guarded edits."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from propdesk.application.dtos.conversion import ConversionResult, PropertyDraft
from propdesk.application.dtos.store import Precondition
from propdesk.application.interfaces.store import IDocumentStore
from propdesk.application.services.authorization_service import can_access
from propdesk.application.use_cases.entities.entity_queries import Entity, EntityQueryService
from propdesk.domain.entities import LandDetails, Property, Prospect
from propdesk.domain.enums import (
    EntityCollection,
    PropertyStatus,
    PropertyType,
    ProspectStatus,
)
from propdesk.domain.exceptions import (
    ConversionFailedException,
    PropdeskException,
    ProspectAlreadyConvertedException,
    ResourceNotFoundException,
    ValidationException,
)
from propdesk.shared.collections import entity_path
from propdesk.shared.utils import utc_now

logger = logging.getLogger(__name__)

# Fields a caller may never change through an edit.
_PROTECTED_FIELDS = frozenset({"id", "ownerUid"})


def _build(cls: type[Prospect] | type[Property], entity_id: str, data: dict[str, Any]) -> Any:
    """Build and validate an entity; bad enum values become ValidationException."""
    try:
        return cls.from_dict(entity_id, data)
    except ValueError as e:
        raise ValidationException(str(e)) from e


def _check_listing(prop: Property) -> None:
    if not prop.is_listed_publicly:
        return
    if prop.is_sold:
        raise ValidationException("A sold property cannot be listed publicly", field="isListedPublicly")
    if not prop.has_listing_price():
        raise ValidationException(
            "A positive listing price is required to list a property publicly", field="listingPrice"
        )


class EntityTransitionCoordinator:
    """Writes for prospects and properties of the acting identity.

    convert() is one atomic batch; every other edit is a single write that
    raises WriteError on transport failure.
    """

    def __init__(self, store: IDocumentStore, queries: EntityQueryService | None = None) -> None:
        self._store = store
        self._queries = queries or EntityQueryService(store)

    # -- conversion --------------------------------------------------------

    def build_property(
        self, identity: str, prospect: Prospect, draft: PropertyDraft, property_id: str
    ) -> Property:
        """Property derived from the prospect plus draft values for the fields it lacks."""
        if draft.area <= 0 or draft.purchase_price <= 0:
            raise ValidationException("Draft area and purchase price must be positive", field="draft")
        if draft.remarks is not None:
            remarks = draft.remarks
        else:
            remarks = f"Source/Contact: {prospect.contact_info}" if prospect.contact_info else None
        return Property(
            id=property_id,
            owner_uid=identity,
            name=prospect.name or "Unnamed Property",
            address=prospect.address,
            land_details=LandDetails(area=draft.area, area_unit=draft.area_unit),
            property_type=draft.property_type or prospect.property_type or PropertyType.OPEN_LAND,
            purchase_date=draft.purchase_date or utc_now(),
            purchase_price=draft.purchase_price,
            status=PropertyStatus.OWNED,
            is_listed_publicly=False,
            remarks=remarks,
            latitude=prospect.address.latitude,
            longitude=prospect.address.longitude,
        )

    async def convert(
        self, identity: str, prospect: Prospect, draft: PropertyDraft | None = None
    ) -> ConversionResult:
        """Create the derived Property and mark the Prospect Converted in one batch.

        The prospect must be a loaded snapshot. When it carries an update
        time the batch also requires the prospect to be unchanged since that
        read, so two concurrent conversions cannot both commit.

        Raises:
            ResourceNotFoundException: identity cannot access the prospect.
            ProspectAlreadyConvertedException: status is already Converted.
            ConversionFailedException: the batch did not commit (nothing written).
        """
        if not can_access(identity, prospect):
            raise ResourceNotFoundException("prospect", prospect.id)
        if prospect.is_converted:
            raise ProspectAlreadyConvertedException(prospect.id)

        property_id = self._store.new_id()
        prop = self.build_property(identity, prospect, draft or PropertyDraft(), property_id)
        precondition = (
            Precondition(exists=True, update_time=prospect.update_time)
            if prospect.update_time is not None
            else None
        )
        batch = self._store.batch()
        batch.create(entity_path(EntityCollection.PROPERTIES.value, property_id), prop.to_dict())
        batch.update(
            entity_path(EntityCollection.PROSPECTS.value, prospect.id),
            {"status": ProspectStatus.CONVERTED.value},
            precondition,
        )
        try:
            await batch.commit()
        except PropdeskException as e:
            logger.warning("Conversion of prospect %s failed: %s %s", prospect.id, e.error_code, e.details)
            raise ConversionFailedException(prospect.id, e.message) from e
        logger.info("Prospect %s converted to property %s", prospect.id, property_id)
        return ConversionResult(prospect_id=prospect.id, new_property_id=property_id)

    async def convert_by_id(
        self, identity: str, prospect_id: str, draft: PropertyDraft | None = None
    ) -> ConversionResult:
        prospect = await self._queries.get_prospect(identity, prospect_id)
        return await self.convert(identity, prospect, draft)

    # -- creation ----------------------------------------------------------

    async def create_prospect(self, identity: str, data: dict[str, Any]) -> Prospect:
        prospect_id = self._store.new_id()
        payload = {k: v for k, v in data.items() if k not in _PROTECTED_FIELDS}
        payload["ownerUid"] = identity
        payload.setdefault("status", ProspectStatus.NEW.value)
        payload.setdefault("dateAdded", utc_now())
        prospect = _build(Prospect, prospect_id, payload)
        if prospect.is_converted:
            raise ValidationException("A new prospect cannot start as Converted", field="status")
        await self._store.set(entity_path(EntityCollection.PROSPECTS.value, prospect_id), prospect.to_dict())
        logger.info("Prospect %s created", prospect_id)
        return prospect

    async def create_property(self, identity: str, data: dict[str, Any]) -> Property:
        property_id = self._store.new_id()
        payload = {k: v for k, v in data.items() if k not in _PROTECTED_FIELDS}
        payload["ownerUid"] = identity
        prop = _build(Property, property_id, payload)
        _check_listing(prop)
        await self._store.set(entity_path(EntityCollection.PROPERTIES.value, property_id), prop.to_dict())
        logger.info("Property %s created", property_id)
        return prop

    # -- edits -------------------------------------------------------------

    async def update_entity(
        self,
        identity: str,
        collection: EntityCollection | str,
        entity_id: str,
        changes: dict[str, Any],
    ) -> Entity:
        """Apply a partial edit (fields not in changes are kept)."""
        collection = EntityCollection(collection)
        changes = {k: v for k, v in changes.items() if k not in _PROTECTED_FIELDS}
        entity = await self._queries.get_entity(identity, collection, entity_id)
        if collection == EntityCollection.PROSPECTS and "status" in changes:
            converted = changes["status"] == ProspectStatus.CONVERTED.value
            if converted and not entity.is_converted:
                raise ValidationException("Use convert to mark a prospect Converted", field="status")
            if entity.is_converted and not converted:
                raise ValidationException("A converted prospect cannot change status", field="status")
        merged = _build(type(entity), entity_id, {**entity.to_dict(), **changes})
        if isinstance(merged, Property):
            _check_listing(merged)
        if changes:
            await self._store.update(entity_path(collection.value, entity_id), changes)
            logger.info("%s %s updated: %s", collection.value, entity_id, sorted(changes))
        return merged

    async def save_prospect(
        self,
        identity: str,
        prospect_id: str,
        changes: dict[str, Any],
        draft: PropertyDraft | None = None,
    ) -> Prospect | ConversionResult:
        """Save a prospect form; a submitted status of Converted runs the conversion.

        On conversion the submitted fields shape the new property; only the
        status change is written to the prospect.
        """
        if changes.get("status") != ProspectStatus.CONVERTED.value:
            return await self.update_entity(identity, EntityCollection.PROSPECTS, prospect_id, changes)
        prospect = await self._queries.get_prospect(identity, prospect_id)
        if prospect.is_converted:
            raise ProspectAlreadyConvertedException(prospect_id)
        form = {k: v for k, v in changes.items() if k not in _PROTECTED_FIELDS | {"status"}}
        submitted = _build(Prospect, prospect_id, {**prospect.to_dict(), **form})
        submitted.update_time = prospect.update_time
        return await self.convert(identity, submitted, draft)

    async def mark_property_sold(
        self,
        identity: str,
        property_id: str,
        sold_price: float,
        sold_date: datetime | None = None,
    ) -> Property:
        """Move a property to sales history; it also leaves the public listing."""
        if sold_price <= 0:
            raise ValidationException("Sold price must be positive", field="soldPrice")
        prop = await self._queries.get_property(identity, property_id)
        if prop.is_sold:
            raise ValidationException("Property is already sold", field="status")
        return await self.update_entity(
            identity,
            EntityCollection.PROPERTIES,
            property_id,
            {
                "status": PropertyStatus.SOLD.value,
                "soldPrice": sold_price,
                "soldDate": sold_date or utc_now(),
                "isListedPublicly": False,
            },
        )

    async def set_public_listing(
        self,
        identity: str,
        property_id: str,
        listed: bool,
        listing_price: float | None = None,
    ) -> Property:
        """Turn public listing on or off; listing needs a positive price and an unsold property."""
        changes: dict[str, Any] = {"isListedPublicly": listed}
        if listing_price is not None:
            changes["listingPrice"] = listing_price
        return await self.update_entity(identity, EntityCollection.PROPERTIES, property_id, changes)

    async def delete_entity(
        self, identity: str, collection: EntityCollection | str, entity_id: str
    ) -> None:
        """Delete the entity document. Its files and media records are left in place."""
        collection = EntityCollection(collection)
        await self._queries.get_entity(identity, collection, entity_id)
        await self._store.delete(entity_path(collection.value, entity_id))
        logger.info("%s %s deleted", collection.value, entity_id)
