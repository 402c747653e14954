"""Whole-collection export and destructive import.

Document format (UTF-8 JSON)::

    [
      {
        "name": "Ada",
        "descriptionText": "",
        "latitude": 48.137154,
        "longitude": 11.576124,
        "timestamp": "2024-11-07T18:30:00Z"
      }
    ]

The top level is always an array, ``[]`` when empty. Field names are fixed so
older exports keep importing.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Sequence

from meet_tracker.errors import ExportError, MalformedRecordError, ParseError, StorageError
from meet_tracker.models import Contact
from meet_tracker.store import ContactStore
from meet_tracker.timeutils import format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

FIELDS = ("name", "descriptionText", "latitude", "longitude", "timestamp")


@dataclass(frozen=True, slots=True)
class ImportPreview:
    """Numbers shown in the "replace N existing with M imported" prompt."""

    import_count: int
    existing_count: int


@dataclass(frozen=True, slots=True)
class ImportRecord:
    """One document record converted to contact fields."""

    name: str
    description: str | None
    latitude: float
    longitude: float
    timestamp: datetime | None
    defaulted: tuple[str, ...] = ()


RecordPolicy = Callable[[int, dict[str, Any]], ImportRecord]


def _record_from_contact(c: Contact) -> dict[str, Any]:
    return {
        "name": c.name,
        "descriptionText": c.description or "",
        "latitude": c.latitude,
        "longitude": c.longitude,
        "timestamp": format_timestamp(c.timestamp) if c.timestamp is not None else None,
    }


def export_contacts(contacts: Sequence[Contact]) -> str:
    """Serialize contacts, in the given order, to an interchange document.

    Raises:
        ExportError: If the document cannot be built (e.g. a non-finite
            coordinate, which JSON cannot carry).
    """

    try:
        return json.dumps([_record_from_contact(c) for c in contacts], ensure_ascii=False, indent=2, allow_nan=False)
    except (TypeError, ValueError, AttributeError) as exc:
        raise ExportError(f"cannot build interchange document: {exc}") from exc


def export_store(store: ContactStore) -> str:
    """Export the full stored collection in store order."""

    return export_contacts(store.fetch_all())


def parse_document(text: str | bytes) -> list[dict[str, Any]]:
    """Parse an interchange document into raw records.

    Raises:
        ParseError: Not JSON, top level not an array, or an element that is
            not an object.
    """

    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as exc:
        raise ParseError(f"not a valid contacts document: {exc}") from exc

    if not isinstance(data, list):
        raise ParseError(f"expected a list of contacts at top level, got {type(data).__name__}")
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise ParseError(f"record #{i} is {type(item).__name__}, expected an object")
    return data


def _parse_angle(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        v = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return v if math.isfinite(v) else None


def permissive_record(index: int, raw: dict[str, Any]) -> ImportRecord:
    """Convert a record, defaulting any bad field instead of rejecting it.

    Missing or non-text name becomes "", bad latitude/longitude become 0.0, and
    an unparsable timestamp becomes None. The record is still imported.
    """

    defaulted: list[str] = []

    name = raw.get("name")
    if not isinstance(name, str):
        defaulted.append("name")
        name = ""

    description = raw.get("descriptionText")
    if not isinstance(description, str) or not description:
        description = None

    lat = _parse_angle(raw.get("latitude"))
    if lat is None:
        defaulted.append("latitude")
        lat = 0.0
    lon = _parse_angle(raw.get("longitude"))
    if lon is None:
        defaulted.append("longitude")
        lon = 0.0

    ts = parse_timestamp(raw.get("timestamp"))
    if ts is None:
        defaulted.append("timestamp")

    return ImportRecord(
        name=name,
        description=description,
        latitude=lat,
        longitude=lon,
        timestamp=ts,
        defaulted=tuple(defaulted),
    )


def strict_record(index: int, raw: dict[str, Any]) -> ImportRecord:
    """Like :func:`permissive_record` but refuses records that need defaults.

    An empty name counts as invalid too.

    Raises:
        MalformedRecordError: If any field had to be defaulted.
    """

    rec = permissive_record(index, raw)
    bad = list(rec.defaulted)
    if not rec.name and "name" not in bad:
        bad.insert(0, "name")
    if bad:
        raise MalformedRecordError(index, bad)
    return rec


def preview_import(text: str | bytes, store: ContactStore) -> ImportPreview:
    """Count what an import would do without touching the store.

    Raises:
        ParseError: If the document is malformed.
    """

    records = parse_document(text)
    return ImportPreview(import_count=len(records), existing_count=store.count())


def commit_import(
    text: str | bytes,
    store: ContactStore,
    *,
    record_policy: RecordPolicy = permissive_record,
) -> int:
    """Replace the whole stored collection with the document's contacts.

    Everything is parsed and converted before the store is touched. Then all
    contacts are deleted in one batch, the new ones inserted in document order,
    and the result saved once.

    Returns:
        Number of imported contacts.

    Raises:
        ParseError: Malformed document (or record, with a strict policy). The
            store is unchanged.
        StorageError: Saving failed. Staged changes are rolled back.
    """

    raw_records = parse_document(text)
    records = [record_policy(i, raw) for i, raw in enumerate(raw_records)]

    defaulted = sum(1 for r in records if r.defaulted)
    if defaulted:
        logger.warning("%s of %s imported records had invalid fields replaced by defaults", defaulted, len(records))

    try:
        store.batch_delete_all()
        for r in records:
            store.insert(
                name=r.name,
                description=r.description,
                latitude=r.latitude,
                longitude=r.longitude,
                timestamp=r.timestamp,
            )
        store.save()
    except StorageError:
        logger.exception("Import failed, rolling back")
        store.rollback()
        raise

    logger.info("Imported %s contacts", len(records))
    return len(records)
