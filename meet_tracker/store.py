"""Contact persistence.

Stores stage every mutation in a working copy. Nothing is durable until
``save()``; ``rollback()`` drops everything staged since the last save. The
JSON file store writes the whole collection on save (tmp file + replace), so
the file on disk always holds either the previous or the new collection.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol

from meet_tracker.errors import ContactNotFoundError, StorageError
from meet_tracker.models import Contact
from meet_tracker.timeutils import parse_timestamp

logger = logging.getLogger(__name__)

_STORE_VERSION = 1


class _Keep:
    def __repr__(self) -> str:
        return "KEEP"


KEEP: Any = _Keep()


class ContactStore(Protocol):
    """What the rest of the package needs from persistence."""

    def fetch_all(self) -> list[Contact]: ...

    def count(self) -> int: ...

    def get(self, contact_id: str) -> Contact: ...

    def insert(
        self,
        *,
        name: str,
        description: str | None,
        latitude: float,
        longitude: float,
        timestamp: datetime | None,
    ) -> str: ...

    def update(self, contact_id: str, *, name: str = KEEP, description: str | None = KEEP) -> None: ...

    def delete(self, contact_id: str) -> None: ...

    def batch_delete_all(self) -> None: ...

    def save(self) -> None: ...

    def rollback(self) -> None: ...


def _recency_key(c: Contact) -> tuple[bool, float]:
    # Newest first; contacts without a timestamp go last.
    if c.timestamp is None:
        return (True, 0.0)
    return (False, -c.timestamp.timestamp())


class InMemoryContactStore:
    """Contact store kept in memory only."""

    def __init__(self, contacts: list[Contact] | None = None) -> None:
        self._committed: dict[str, Contact] = {c.id: c for c in (contacts or [])}
        self._working: dict[str, Contact] = dict(self._committed)

    @property
    def has_changes(self) -> bool:
        return self._working != self._committed

    def fetch_all(self) -> list[Contact]:
        """All contacts, most recent timestamp first (stable for ties)."""

        return sorted(self._working.values(), key=_recency_key)

    def count(self) -> int:
        return len(self._working)

    def get(self, contact_id: str) -> Contact:
        try:
            return self._working[contact_id]
        except KeyError:
            raise ContactNotFoundError(contact_id) from None

    def insert(
        self,
        *,
        name: str,
        description: str | None,
        latitude: float,
        longitude: float,
        timestamp: datetime | None,
    ) -> str:
        contact_id = uuid.uuid4().hex
        self._working[contact_id] = Contact(
            id=contact_id,
            name=name,
            description=description,
            latitude=latitude,
            longitude=longitude,
            timestamp=timestamp,
        )
        return contact_id

    def update(self, contact_id: str, *, name: str = KEEP, description: str | None = KEEP) -> None:
        """Edit name and/or description. Location and timestamp are immutable."""

        cur = self.get(contact_id)
        self._working[contact_id] = Contact(
            id=cur.id,
            name=cur.name if name is KEEP else name,
            description=cur.description if description is KEEP else description,
            latitude=cur.latitude,
            longitude=cur.longitude,
            timestamp=cur.timestamp,
        )

    def delete(self, contact_id: str) -> None:
        if contact_id not in self._working:
            raise ContactNotFoundError(contact_id)
        del self._working[contact_id]

    def batch_delete_all(self) -> None:
        self._working.clear()

    def save(self) -> None:
        if not self.has_changes:
            return
        self._persist(list(self._working.values()))
        self._committed = dict(self._working)

    def rollback(self) -> None:
        self._working = dict(self._committed)

    def _persist(self, contacts: list[Contact]) -> None:
        """Hook for durable stores. Must raise StorageError on failure."""


def _contact_to_row(c: Contact) -> dict[str, Any]:
    return {
        "id": c.id,
        "name": c.name,
        "descriptionText": c.description,
        "latitude": c.latitude,
        "longitude": c.longitude,
        "timestamp": c.timestamp.isoformat() if c.timestamp is not None else None,
    }


def _contact_from_row(row: dict[str, Any]) -> Contact:
    return Contact(
        id=str(row["id"]),
        name=str(row["name"]),
        description=row.get("descriptionText"),
        latitude=float(row["latitude"]),
        longitude=float(row["longitude"]),
        timestamp=parse_timestamp(row.get("timestamp")),
    )


class JsonFileContactStore(InMemoryContactStore):
    """Contact store persisted as a single JSON file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        super().__init__(self._read())

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> None:
        """Re-read the file, discarding unsaved changes."""

        self._committed = {c.id: c for c in self._read()}
        self._working = dict(self._committed)

    def _read(self) -> list[Contact]:
        if not self._path.exists():
            return []
        try:
            text = self._path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise StorageError(f"cannot read contact store {self._path}: {exc}") from exc
        if not text:
            return []
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise StorageError(f"contact store {self._path} is corrupted: {exc}") from exc

        rows = data.get("contacts") if isinstance(data, dict) else None
        if not isinstance(rows, list):
            raise StorageError(f"contact store {self._path} has no contacts list")

        out: list[Contact] = []
        skipped = 0
        for row in rows:
            try:
                out.append(_contact_from_row(row))
            except (KeyError, ValueError, TypeError, AttributeError):
                skipped += 1
        if skipped:
            logger.warning("Skipped %s unreadable contacts in %s", skipped, self._path)
        return out

    def _persist(self, contacts: list[Contact]) -> None:
        data = {"version": _STORE_VERSION, "contacts": [_contact_to_row(c) for c in contacts]}
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_fd, tmp_name = tempfile.mkstemp(prefix="contacts_", suffix=".json", dir=str(self._path.parent))
            try:
                with os.fdopen(tmp_fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False, indent=2)
                    f.write("\n")
                Path(tmp_name).replace(self._path)
            finally:
                Path(tmp_name).unlink(missing_ok=True)
        except OSError as exc:
            logger.error("Saving contact store %s failed: %s", self._path, exc)
            raise StorageError(f"cannot write contact store {self._path}: {exc}") from exc
        logger.debug("Saved %s contacts to %s", len(contacts), self._path)
