"""Creating, editing and deleting individual contacts."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable

from meet_tracker.errors import StorageError
from meet_tracker.geo import is_finite_point
from meet_tracker.location import LocationSource
from meet_tracker.models import Contact, Coordinate
from meet_tracker.store import KEEP, ContactStore
from meet_tracker.timeutils import now_utc

logger = logging.getLogger(__name__)


def _clean_description(text: str | None) -> str | None:
    if text is None:
        return None
    text = text.strip()
    return text or None


def _validate_coordinate(coord: Coordinate) -> None:
    if not is_finite_point(coord.latitude, coord.longitude):
        raise ValueError(f"invalid coordinate: {coord}")
    if not -90.0 <= coord.latitude <= 90.0:
        raise ValueError(f"latitude out of range: {coord.latitude}")
    if not -180.0 <= coord.longitude <= 180.0:
        raise ValueError(f"longitude out of range: {coord.longitude}")


def _save(store: ContactStore, action: str) -> None:
    try:
        store.save()
    except StorageError:
        logger.exception("Saving after %s failed", action)
        store.rollback()
        raise


def add_contact(
    store: ContactStore,
    *,
    name: str,
    description: str | None = None,
    coordinate: Coordinate | None = None,
    location: LocationSource | None = None,
    timestamp: datetime | None = None,
) -> Contact:
    """Record a new contact and save it.

    The position is ``coordinate`` when given (a spot picked on the map),
    otherwise the location source's current fix.

    Raises:
        ValueError: Empty name, invalid coordinate, or no position available.
        StorageError: Saving failed; nothing was added.
    """

    name = (name or "").strip()
    if not name:
        raise ValueError("name must be non-empty")

    if coordinate is None and location is not None:
        coordinate = location.current_coordinate()
    if coordinate is None:
        raise ValueError("no location available for the new contact")
    _validate_coordinate(coordinate)

    contact_id = store.insert(
        name=name,
        description=_clean_description(description),
        latitude=coordinate.latitude,
        longitude=coordinate.longitude,
        timestamp=timestamp or now_utc(),
    )
    _save(store, "add")
    return store.get(contact_id)


def update_contact(
    store: ContactStore,
    contact_id: str,
    *,
    name: str | None = None,
    description: str | None = KEEP,
) -> Contact:
    """Edit name and/or description. Pass ``description=None`` to clear it.

    Raises:
        ContactNotFoundError: Unknown id.
        ValueError: Name given but empty.
    """

    changes: dict[str, object] = {}
    if name is not None:
        name = name.strip()
        if not name:
            raise ValueError("name must be non-empty")
        changes["name"] = name
    if description is not KEEP:
        changes["description"] = _clean_description(description)

    store.update(contact_id, **changes)
    _save(store, "edit")
    return store.get(contact_id)


def delete_contacts(store: ContactStore, contact_ids: Iterable[str]) -> int:
    """Delete the given contacts with a single save.

    Raises:
        ContactNotFoundError: An id is unknown; nothing is deleted.
    """

    count = 0
    try:
        for contact_id in contact_ids:
            store.delete(contact_id)
            count += 1
    except KeyError:
        store.rollback()
        raise
    _save(store, "delete")
    return count
