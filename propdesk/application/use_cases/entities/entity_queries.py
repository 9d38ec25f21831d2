"""Read side for prospects and properties of the acting identity."""

from __future__ import annotations

import logging
from propdesk.application.dtos.store import FieldFilter, StoredDocument
from propdesk.application.interfaces.store import IDocumentStore
from propdesk.application.services.authorization_service import require_access
from propdesk.domain.entities import Property, Prospect
from propdesk.domain.enums import EntityCollection, PropertyStatus
from propdesk.domain.exceptions import PropdeskException, ResourceNotFoundException
from propdesk.shared.collections import entity_path

logger = logging.getLogger(__name__)

Entity = Prospect | Property

_ENTITY_TYPES: dict[str, type[Prospect] | type[Property]] = {
    EntityCollection.PROSPECTS.value: Prospect,
    EntityCollection.PROPERTIES.value: Property,
}


def entity_from_stored(collection: EntityCollection | str, doc: StoredDocument) -> Entity:
    """Build the entity for a stored document. Raises ValueError/ValidationException on bad data."""
    cls = _ENTITY_TYPES[EntityCollection(collection).value]
    return cls.from_dict(doc.id, doc.data, doc.update_time)


def _resource_type(collection: EntityCollection | str) -> str:
    return "prospect" if EntityCollection(collection) == EntityCollection.PROSPECTS else "property"


class EntityQueryService:
    """Every entity returned here has passed can_access for the identity."""

    def __init__(self, store: IDocumentStore) -> None:
        self._store = store

    async def get_entity(self, identity: str, collection: EntityCollection | str, entity_id: str) -> Entity:
        resource_type = _resource_type(collection)
        doc = await self._store.get(entity_path(EntityCollection(collection).value, entity_id))
        if doc is None:
            raise ResourceNotFoundException(resource_type, entity_id)
        try:
            entity = entity_from_stored(collection, doc)
        except (ValueError, PropdeskException) as e:
            logger.warning("Unreadable %s %s: %s", resource_type, entity_id, e)
            raise ResourceNotFoundException(resource_type, entity_id) from e
        require_access(identity, entity, resource_type, entity_id)
        return entity

    async def get_prospect(self, identity: str, prospect_id: str) -> Prospect:
        return await self.get_entity(identity, EntityCollection.PROSPECTS, prospect_id)

    async def get_property(self, identity: str, property_id: str) -> Property:
        return await self.get_entity(identity, EntityCollection.PROPERTIES, property_id)

    async def _list(self, identity: str, collection: EntityCollection) -> list[Entity]:
        snapshot = await self._store.query(
            collection.value, [FieldFilter("ownerUid", identity)]
        )
        entities: list[Entity] = []
        for doc in snapshot:
            try:
                entities.append(entity_from_stored(collection, doc))
            except (ValueError, PropdeskException) as e:
                logger.warning("Skipping unreadable %s %s: %s", collection.value, doc.id, e)
        return entities

    async def list_prospects(self, identity: str) -> list[Prospect]:
        """Open prospects (Converted ones are history and are left out)."""
        return [p for p in await self._list(identity, EntityCollection.PROSPECTS) if not p.is_converted]

    async def list_properties(self, identity: str) -> list[Property]:
        """Properties still held (not Sold)."""
        return [p for p in await self._list(identity, EntityCollection.PROPERTIES) if not p.is_sold]

    async def list_sold_properties(self, identity: str) -> list[Property]:
        return [
            p
            for p in await self._list(identity, EntityCollection.PROPERTIES)
            if p.status == PropertyStatus.SOLD
        ]
