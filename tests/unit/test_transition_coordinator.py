"""Tests for EntityTransitionCoordinator (conversion atomicity, guarded edits, sale, listing)."""

from datetime import datetime, timezone

import pytest

from propdesk.application.dtos.conversion import ConversionResult, PropertyDraft
from propdesk.application.use_cases.entities import EntityQueryService, EntityTransitionCoordinator
from propdesk.domain.enums import AreaUnit, EntityCollection, PropertyType
from propdesk.domain.exceptions import (
    ConversionFailedException,
    ProspectAlreadyConvertedException,
    ResourceNotFoundException,
    ValidationException,
    WriteError,
)

OWNER = "owner-1"

ADDRESS = {
    "street": "12 Canal Road",
    "city": "Pune",
    "state": "MH",
    "zip": "411001",
    "latitude": 18.52,
    "longitude": 73.85,
}


async def _seed_prospect(store, prospect_id: str = "pr1", owner: str = OWNER, **extra) -> None:
    data = {
        "name": "Riverside Plot",
        "ownerUid": owner,
        "address": ADDRESS,
        "status": "New",
        "propertyType": "Flat",
        "contactInfo": "Mr. Rao 98200 00000",
    }
    data.update(extra)
    await store.set(f"prospects/{prospect_id}", data)


async def _seed_property(store, property_id: str = "p1", owner: str = OWNER, **extra) -> None:
    data = {
        "name": "Green Acres",
        "ownerUid": owner,
        "address": ADDRESS,
        "landDetails": {"area": 1200.0, "areaUnit": "Square Feet"},
        "propertyType": "Open Land",
        "purchaseDate": datetime(2023, 1, 5, tzinfo=timezone.utc),
        "purchasePrice": 2500000.0,
        "status": "Owned",
        "isListedPublicly": False,
    }
    data.update(extra)
    await store.set(f"properties/{property_id}", data)


@pytest.fixture
def coordinator(store) -> EntityTransitionCoordinator:
    return EntityTransitionCoordinator(store)


class TestConvert:
    async def test_creates_property_and_marks_prospect_converted(self, store, coordinator) -> None:
        await _seed_prospect(store)
        result = await coordinator.convert_by_id(OWNER, "pr1")

        prospect = await store.get("prospects/pr1")
        assert prospect.data["status"] == "Converted"
        prop = await store.get(f"properties/{result.new_property_id}")
        assert prop.data["name"] == "Riverside Plot"
        assert prop.data["ownerUid"] == OWNER
        assert prop.data["status"] == "Owned"
        assert prop.data["isListedPublicly"] is False
        assert prop.data["propertyType"] == "Flat"
        assert prop.data["remarks"] == "Source/Contact: Mr. Rao 98200 00000"
        assert prop.data["address"]["city"] == "Pune"
        assert prop.data["latitude"] == 18.52
        assert prop.data["landDetails"] == {"area": 1.0, "areaUnit": "Square Feet"}
        assert prop.data["purchasePrice"] == 1.0
        assert result.prospect_id == "pr1"

    async def test_draft_values_shape_the_property(self, store, coordinator) -> None:
        await _seed_prospect(store)
        draft = PropertyDraft(
            area=2.5,
            area_unit=AreaUnit.ACRE,
            purchase_price=4500000.0,
            property_type=PropertyType.VILLA,
            remarks="Bought at auction",
        )
        result = await coordinator.convert_by_id(OWNER, "pr1", draft)
        prop = (await store.get(f"properties/{result.new_property_id}")).data
        assert prop["landDetails"] == {"area": 2.5, "areaUnit": "Acre"}
        assert prop["purchasePrice"] == 4500000.0
        assert prop["propertyType"] == "Villa"
        assert prop["remarks"] == "Bought at auction"

    async def test_non_positive_draft_is_rejected(self, store, coordinator) -> None:
        await _seed_prospect(store)
        with pytest.raises(ValidationException):
            await coordinator.convert_by_id(OWNER, "pr1", PropertyDraft(area=0))
        assert await store.query("properties") == ()

    async def test_already_converted_prospect_is_rejected(self, store, coordinator) -> None:
        await _seed_prospect(store, status="Converted")
        with pytest.raises(ProspectAlreadyConvertedException):
            await coordinator.convert_by_id(OWNER, "pr1")
        assert await store.query("properties") == ()

    async def test_foreign_prospect_looks_missing(self, store, coordinator) -> None:
        await _seed_prospect(store, owner="owner-2")
        with pytest.raises(ResourceNotFoundException):
            await coordinator.convert_by_id(OWNER, "pr1")

    async def test_mid_batch_failure_leaves_no_trace(self, store, coordinator, monkeypatch) -> None:
        await _seed_prospect(store)
        original = store._apply_write
        applied: list[str] = []

        def flaky(staged, write, now):
            applied.append(write.path)
            if len(applied) == 2:
                raise WriteError("commit", "network dropped")
            original(staged, write, now)

        monkeypatch.setattr(store, "_apply_write", flaky)
        with pytest.raises(ConversionFailedException) as exc_info:
            await coordinator.convert_by_id(OWNER, "pr1")

        assert exc_info.value.error_code == "CONVERSION_FAILED"
        assert len(applied) == 2
        assert await store.query("properties") == ()
        assert (await store.get("prospects/pr1")).data["status"] == "New"

    async def test_second_conversion_from_stale_read_fails(self, store, coordinator) -> None:
        await _seed_prospect(store)
        stale = await EntityQueryService(store).get_prospect(OWNER, "pr1")
        await coordinator.convert(OWNER, stale)
        with pytest.raises(ConversionFailedException):
            await coordinator.convert(OWNER, stale)
        assert len(await store.query("properties")) == 1


class TestProspectEdits:
    async def test_create_sets_owner_and_defaults(self, store, coordinator) -> None:
        created = await coordinator.create_prospect(
            OWNER, {"name": "Hill View", "ownerUid": "someone-else", "address": ADDRESS}
        )
        doc = await store.get(f"prospects/{created.id}")
        assert doc.data["ownerUid"] == OWNER
        assert doc.data["status"] == "New"
        assert doc.data["dateAdded"] is not None

    async def test_create_as_converted_is_rejected(self, coordinator) -> None:
        with pytest.raises(ValidationException):
            await coordinator.create_prospect(OWNER, {"name": "X", "status": "Converted"})

    async def test_update_keeps_unsent_fields(self, store, coordinator) -> None:
        await _seed_prospect(store)
        updated = await coordinator.update_entity(
            OWNER, EntityCollection.PROSPECTS, "pr1", {"status": "Active"}
        )
        assert updated.name == "Riverside Plot"
        doc = await store.get("prospects/pr1")
        assert doc.data["status"] == "Active"
        assert doc.data["contactInfo"] == "Mr. Rao 98200 00000"

    async def test_update_cannot_mark_converted(self, store, coordinator) -> None:
        await _seed_prospect(store)
        with pytest.raises(ValidationException):
            await coordinator.update_entity(
                OWNER, EntityCollection.PROSPECTS, "pr1", {"status": "Converted"}
            )

    async def test_converted_prospect_status_is_final(self, store, coordinator) -> None:
        await _seed_prospect(store, status="Converted")
        with pytest.raises(ValidationException):
            await coordinator.update_entity(OWNER, EntityCollection.PROSPECTS, "pr1", {"status": "Active"})

    async def test_save_with_converted_status_runs_conversion(self, store, coordinator) -> None:
        await _seed_prospect(store)
        saved = await coordinator.save_prospect(
            OWNER, "pr1", {"status": "Converted", "name": "Riverside Plot (final)"}
        )
        assert isinstance(saved, ConversionResult)
        prop = await store.get(f"properties/{saved.new_property_id}")
        assert prop.data["name"] == "Riverside Plot (final)"
        prospect = await store.get("prospects/pr1")
        assert prospect.data["status"] == "Converted"
        assert prospect.data["name"] == "Riverside Plot"

    async def test_delete_foreign_prospect_looks_missing(self, store, coordinator) -> None:
        await _seed_prospect(store, owner="owner-2")
        with pytest.raises(ResourceNotFoundException):
            await coordinator.delete_entity(OWNER, EntityCollection.PROSPECTS, "pr1")
        assert await store.get("prospects/pr1") is not None

    async def test_delete_leaves_files_in_place(self, store, coordinator) -> None:
        await _seed_prospect(store)
        await store.set("prospects/pr1/files/land-book", {"fileName": "lb.pdf"})
        await coordinator.delete_entity(OWNER, EntityCollection.PROSPECTS, "pr1")
        assert await store.get("prospects/pr1") is None
        assert await store.get("prospects/pr1/files/land-book") is not None


class TestPropertyTransitions:
    async def test_mark_sold_moves_to_history_and_unlists(self, store, coordinator) -> None:
        await _seed_property(store, isListedPublicly=True, listingPrice=3000000.0)
        sold = await coordinator.mark_property_sold(OWNER, "p1", 3100000.0)
        assert sold.is_sold
        doc = (await store.get("properties/p1")).data
        assert doc["status"] == "Sold"
        assert doc["soldPrice"] == 3100000.0
        assert isinstance(doc["soldDate"], datetime)
        assert doc["isListedPublicly"] is False

        queries = EntityQueryService(store)
        assert await queries.list_properties(OWNER) == []
        assert [p.id for p in await queries.list_sold_properties(OWNER)] == ["p1"]

    async def test_mark_sold_twice_is_rejected(self, store, coordinator) -> None:
        await _seed_property(store, status="Sold", soldPrice=10.0)
        with pytest.raises(ValidationException):
            await coordinator.mark_property_sold(OWNER, "p1", 20.0)

    async def test_mark_sold_needs_positive_price(self, store, coordinator) -> None:
        await _seed_property(store)
        with pytest.raises(ValidationException):
            await coordinator.mark_property_sold(OWNER, "p1", 0)

    async def test_listing_requires_positive_price(self, store, coordinator) -> None:
        await _seed_property(store)
        with pytest.raises(ValidationException):
            await coordinator.set_public_listing(OWNER, "p1", True)
        with pytest.raises(ValidationException):
            await coordinator.set_public_listing(OWNER, "p1", True, 0)
        assert (await store.get("properties/p1")).data["isListedPublicly"] is False

    async def test_listing_with_price(self, store, coordinator) -> None:
        await _seed_property(store)
        listed = await coordinator.set_public_listing(OWNER, "p1", True, 2750000.0)
        assert listed.is_listed_publicly
        assert listed.listing_price == 2750000.0

    async def test_sold_property_cannot_be_listed(self, store, coordinator) -> None:
        await _seed_property(store, status="Sold", soldPrice=10.0)
        with pytest.raises(ValidationException):
            await coordinator.set_public_listing(OWNER, "p1", True, 100.0)

    async def test_create_property_with_bad_type_is_validation_error(self, coordinator) -> None:
        with pytest.raises(ValidationException):
            await coordinator.create_property(
                OWNER,
                {
                    "name": "Odd",
                    "landDetails": {"area": 1.0},
                    "propertyType": "Castle",
                    "purchasePrice": 1.0,
                },
            )
