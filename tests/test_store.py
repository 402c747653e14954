from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from meet_tracker.errors import ContactNotFoundError, StorageError
from meet_tracker.store import InMemoryContactStore, JsonFileContactStore

T1 = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
T2 = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


def _insert(store, name: str, ts: datetime | None = T1) -> str:
    return store.insert(name=name, description=None, latitude=48.0, longitude=11.0, timestamp=ts)


class TestInMemoryStore:
    def test_fetch_all_most_recent_first(self):
        store = InMemoryContactStore()
        _insert(store, "old", T1)
        _insert(store, "unknown", None)
        _insert(store, "new", T2)
        assert [c.name for c in store.fetch_all()] == ["new", "old", "unknown"]

    def test_rollback_discards_unsaved_changes(self, seeded_store):
        before = seeded_store.fetch_all()
        _insert(seeded_store, "temp")
        seeded_store.batch_delete_all()
        assert seeded_store.count() == 0
        seeded_store.rollback()
        assert seeded_store.fetch_all() == before

    def test_save_then_rollback_keeps_saved_state(self):
        store = InMemoryContactStore()
        cid = _insert(store, "Ada")
        store.save()
        store.rollback()
        assert store.get(cid).name == "Ada"

    def test_update_touches_name_and_description_only(self, seeded_store):
        c = seeded_store.fetch_all()[0]
        seeded_store.update(c.id, name="Renamed")
        updated = seeded_store.get(c.id)
        assert updated.name == "Renamed"
        assert updated.description == c.description
        assert (updated.latitude, updated.longitude, updated.timestamp) == (c.latitude, c.longitude, c.timestamp)

        seeded_store.update(c.id, description=None)
        assert seeded_store.get(c.id).description is None
        assert seeded_store.get(c.id).name == "Renamed"

    def test_unknown_id(self, seeded_store):
        with pytest.raises(ContactNotFoundError):
            seeded_store.get("missing")
        with pytest.raises(KeyError):
            seeded_store.delete("missing")
        with pytest.raises(ContactNotFoundError):
            seeded_store.update("missing", name="x")


class TestJsonFileStore:
    def test_missing_file_is_empty(self, tmp_path: Path):
        store = JsonFileContactStore(tmp_path / "nope" / "contacts.json")
        assert store.fetch_all() == []

    def test_nothing_written_before_save(self, tmp_path: Path):
        path = tmp_path / "contacts.json"
        store = JsonFileContactStore(path)
        _insert(store, "Ada")
        assert not path.exists()

    def test_save_and_reload(self, tmp_path: Path):
        path = tmp_path / "sub" / "contacts.json"
        store = JsonFileContactStore(path)
        cid = _insert(store, "Ada", T2)
        store.save()

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["version"] == 1
        assert data["contacts"][0]["id"] == cid

        reopened = JsonFileContactStore(path)
        [c] = reopened.fetch_all()
        assert (c.id, c.name, c.timestamp) == (cid, "Ada", T2)

    def test_load_discards_unsaved(self, tmp_path: Path):
        store = JsonFileContactStore(tmp_path / "contacts.json")
        _insert(store, "Ada")
        store.save()
        _insert(store, "Ben")
        store.load()
        assert [c.name for c in store.fetch_all()] == ["Ada"]

    def test_corrupted_file_raises(self, tmp_path: Path):
        path = tmp_path / "contacts.json"
        path.write_text("{broken", encoding="utf-8")
        with pytest.raises(StorageError):
            JsonFileContactStore(path)
        assert path.read_text(encoding="utf-8") == "{broken"

    def test_unreadable_rows_are_skipped(self, tmp_path: Path, caplog):
        path = tmp_path / "contacts.json"
        rows = [
            {"id": "a", "name": "Ada", "latitude": 1.0, "longitude": 2.0, "timestamp": None},
            {"id": "b", "name": "Ben", "latitude": "x", "longitude": 2.0},
            "junk",
        ]
        path.write_text(json.dumps({"version": 1, "contacts": rows}), encoding="utf-8")
        store = JsonFileContactStore(path)
        assert [c.id for c in store.fetch_all()] == ["a"]
        assert "Skipped 2" in caplog.text

    def test_write_failure_raises_storage_error(self, tmp_path: Path):
        path = tmp_path / "contacts.json"
        store = JsonFileContactStore(path)
        path.mkdir()
        _insert(store, "Ada")
        with pytest.raises(StorageError):
            store.save()
        assert store.has_changes
