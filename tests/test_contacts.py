from __future__ import annotations

from datetime import UTC, datetime

import pytest

from meet_tracker.contacts import add_contact, delete_contacts, update_contact
from meet_tracker.errors import ContactNotFoundError, StorageError
from meet_tracker.location import AuthorizationState, FixedLocationSource
from meet_tracker.models import Contact, Coordinate
from meet_tracker.store import InMemoryContactStore

HERE = Coordinate(48.137154, 11.576124)
PICKED = Coordinate(48.2, 11.6)


class _FailingStore(InMemoryContactStore):
    def _persist(self, contacts: list[Contact]) -> None:
        raise StorageError("read-only")


class TestAddContact:
    def test_explicit_coordinate_wins(self):
        store = InMemoryContactStore()
        c = add_contact(store, name="Ada", coordinate=PICKED, location=FixedLocationSource(HERE))
        assert (c.latitude, c.longitude) == (PICKED.latitude, PICKED.longitude)
        assert not store.has_changes

    def test_falls_back_to_current_location(self):
        store = InMemoryContactStore()
        c = add_contact(store, name="  Ada  ", description="", location=FixedLocationSource(HERE))
        assert c.name == "Ada"
        assert c.description is None
        assert (c.latitude, c.longitude) == (HERE.latitude, HERE.longitude)
        assert c.timestamp is not None and c.timestamp.tzinfo is not None

    def test_no_position_available(self):
        store = InMemoryContactStore()
        denied = FixedLocationSource(HERE, AuthorizationState.DENIED)
        with pytest.raises(ValueError):
            add_contact(store, name="Ada", location=denied)
        with pytest.raises(ValueError):
            add_contact(store, name="Ada")
        assert store.count() == 0

    @pytest.mark.parametrize("coord", [Coordinate(91.0, 0.0), Coordinate(0.0, -180.5)])
    def test_out_of_range_coordinate(self, coord):
        with pytest.raises(ValueError):
            add_contact(InMemoryContactStore(), name="Ada", coordinate=coord)

    def test_empty_name(self):
        with pytest.raises(ValueError):
            add_contact(InMemoryContactStore(), name="   ", coordinate=HERE)

    def test_explicit_timestamp(self):
        ts = datetime(2024, 11, 7, 18, 30, tzinfo=UTC)
        c = add_contact(InMemoryContactStore(), name="Ada", coordinate=HERE, timestamp=ts)
        assert c.timestamp == ts

    def test_failed_save_leaves_nothing_behind(self):
        store = _FailingStore()
        with pytest.raises(StorageError):
            add_contact(store, name="Ada", coordinate=HERE)
        assert store.count() == 0


class TestUpdateContact:
    def test_rename_keeps_place_and_time(self, seeded_store):
        before = seeded_store.fetch_all()[0]
        after = update_contact(seeded_store, before.id, name="Ada L.")
        assert after.name == "Ada L."
        assert after.description == before.description
        assert (after.latitude, after.longitude, after.timestamp) == (before.latitude, before.longitude, before.timestamp)
        assert not seeded_store.has_changes

    def test_clear_description(self, seeded_store):
        c = seeded_store.fetch_all()[0]
        assert update_contact(seeded_store, c.id, description=None).description is None

    def test_blank_description_is_cleared(self, seeded_store):
        c = seeded_store.fetch_all()[0]
        assert update_contact(seeded_store, c.id, description="   ").description is None

    def test_empty_name_rejected(self, seeded_store):
        c = seeded_store.fetch_all()[0]
        with pytest.raises(ValueError):
            update_contact(seeded_store, c.id, name="")

    def test_unknown_id(self, seeded_store):
        with pytest.raises(ContactNotFoundError):
            update_contact(seeded_store, "nope", name="x")


class TestDeleteContacts:
    def test_delete_several(self, seeded_store):
        ids = [c.id for c in seeded_store.fetch_all()[:2]]
        assert delete_contacts(seeded_store, ids) == 2
        assert seeded_store.count() == 1
        assert not seeded_store.has_changes

    def test_unknown_id_deletes_nothing(self, seeded_store):
        first = seeded_store.fetch_all()[0].id
        with pytest.raises(ContactNotFoundError):
            delete_contacts(seeded_store, [first, "nope"])
        assert seeded_store.count() == 3
        assert not seeded_store.has_changes

    def test_failed_save_keeps_contacts(self, make_contact):
        original = [make_contact(1.0, 1.0), make_contact(2.0, 2.0)]
        store = _FailingStore(original)
        with pytest.raises(StorageError):
            delete_contacts(store, [c.id for c in original])
        assert store.fetch_all() == original
        assert not store.has_changes
