from __future__ import annotations

from meet_tracker.contacts import add_contact
from meet_tracker.location import AuthorizationState, LocationTracker
from meet_tracker.models import Coordinate, RectangleQuery
from meet_tracker.session import MapSession
from meet_tracker.store import InMemoryContactStore

CAFE = Coordinate(48.1375, 11.5755)
PARK = Coordinate(48.1642, 11.6056)


def _session() -> tuple[MapSession, LocationTracker]:
    store = InMemoryContactStore()
    add_contact(store, name="Ada", coordinate=CAFE)
    add_contact(store, name="Ben", coordinate=CAFE)
    add_contact(store, name="Chen", coordinate=PARK)
    tracker = LocationTracker(AuthorizationState.AUTHORIZED_WHILE_ACTIVE)
    return MapSession(store, tracker), tracker


def test_no_query_shows_nothing():
    session, _ = _session()
    assert session.visible() == []


def test_viewport_mode():
    session, _ = _session()
    session.show_region(CAFE)
    assert isinstance(session.query, RectangleQuery)
    assert {c.name for c in session.visible()} == {"Ada", "Ben"}


def test_nearby_follows_location_updates():
    session, tracker = _session()
    session.show_nearby()
    assert session.visible() == []

    tracker.update(CAFE)
    assert {c.name for c in session.visible()} == {"Ada", "Ben"}

    tracker.update(PARK)
    assert [c.name for c in session.visible()] == ["Chen"]


def test_visible_set_tracks_store_changes():
    session, _ = _session()
    session.show_region(PARK)
    assert len(session.visible()) == 1
    add_contact(session.store, name="Dana", coordinate=PARK)
    assert len(session.visible()) == 2


def test_placements_fan_out_stacked_pins():
    session, _ = _session()
    session.show_region(CAFE)
    placed = session.placements()
    assert len(placed) == 2
    assert placed[0].offset != placed[1].offset
    assert all(abs(p.offset.dx) + abs(p.offset.dy) > 0 for p in placed)
