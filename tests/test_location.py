from __future__ import annotations

import math

from meet_tracker.location import AuthorizationState, FixedLocationSource, LocationTracker, location_status
from meet_tracker.models import Coordinate

HOME = Coordinate(48.0, 11.0)
# ~55 m and ~167 m north of HOME
NEAR = Coordinate(48.0005, 11.0)
FAR = Coordinate(48.0015, 11.0)


def test_status_messages():
    assert location_status(AuthorizationState.NOT_DETERMINED) == "Please allow location access"
    assert location_status(AuthorizationState.DENIED) == "Location access denied"
    assert location_status(AuthorizationState.AUTHORIZED_WHILE_ACTIVE) == ""


def test_fixed_source_hides_fix_without_permission():
    assert FixedLocationSource(HOME).current_coordinate() == HOME
    denied = FixedLocationSource(HOME, AuthorizationState.DENIED)
    assert denied.current_coordinate() is None
    assert denied.authorization_state() is AuthorizationState.DENIED


class TestLocationTracker:
    def test_first_fix_sets_last_known(self):
        t = LocationTracker(AuthorizationState.AUTHORIZED_WHILE_ACTIVE)
        assert t.current_coordinate() is None
        t.update(HOME)
        assert t.current == HOME
        assert t.last_known == HOME

    def test_last_known_moves_only_after_threshold(self):
        t = LocationTracker(AuthorizationState.AUTHORIZED_WHILE_ACTIVE)
        t.update(HOME)
        t.update(NEAR)
        assert t.current == NEAR
        assert t.last_known == HOME
        t.update(FAR)
        assert t.last_known == FAR

    def test_background_snapshots_current(self):
        t = LocationTracker(AuthorizationState.AUTHORIZED_WHILE_ACTIVE)
        t.update(HOME)
        t.update(NEAR)
        t.enter_background()
        assert t.last_known == NEAR

    def test_unauthorized_reports_no_fix(self):
        t = LocationTracker()
        t.update(HOME)
        assert t.current_coordinate() is None
        t.set_authorization(AuthorizationState.AUTHORIZED_WHILE_ACTIVE)
        assert t.current_coordinate() == HOME

    def test_invalid_fix_is_ignored(self):
        t = LocationTracker(AuthorizationState.AUTHORIZED_WHILE_ACTIVE)
        t.update(HOME)
        t.update(Coordinate(math.nan, 11.0))
        assert t.current == HOME
