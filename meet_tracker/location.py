"""Device location as seen by the rest of the package.

Permission negotiation and the GPS itself live outside this package; they are
reduced to "current coordinate or None" plus an authorization state.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol

from meet_tracker.geo import haversine_m, is_finite_point
from meet_tracker.models import LAST_KNOWN_THRESHOLD_M, Coordinate

logger = logging.getLogger(__name__)


class AuthorizationState(Enum):
    NOT_DETERMINED = "notDetermined"
    DENIED = "denied"
    AUTHORIZED_WHILE_ACTIVE = "authorizedWhileActive"


class LocationSource(Protocol):
    def current_coordinate(self) -> Coordinate | None: ...

    def authorization_state(self) -> AuthorizationState: ...


def location_status(state: AuthorizationState) -> str:
    """User-facing hint for the location banner ("" when nothing to say)."""

    if state is AuthorizationState.NOT_DETERMINED:
        return "Please allow location access"
    if state is AuthorizationState.DENIED:
        return "Location access denied"
    return ""


class FixedLocationSource:
    """A location source that always reports the same fix."""

    def __init__(
        self,
        coordinate: Coordinate | None,
        state: AuthorizationState = AuthorizationState.AUTHORIZED_WHILE_ACTIVE,
    ) -> None:
        self._coordinate = coordinate
        self._state = state

    def current_coordinate(self) -> Coordinate | None:
        if self._state is not AuthorizationState.AUTHORIZED_WHILE_ACTIVE:
            return None
        return self._coordinate

    def authorization_state(self) -> AuthorizationState:
        return self._state


class LocationTracker:
    """Keeps the latest fix and a slower-moving "last known" fix.

    ``last_known`` only follows ``current`` once the device has moved more
    than ``threshold_m`` away from it, or when the app goes to background.
    """

    def __init__(
        self,
        state: AuthorizationState = AuthorizationState.NOT_DETERMINED,
        threshold_m: float = LAST_KNOWN_THRESHOLD_M,
    ) -> None:
        self._state = state
        self._threshold_m = threshold_m
        self.current: Coordinate | None = None
        self.last_known: Coordinate | None = None

    def set_authorization(self, state: AuthorizationState) -> None:
        self._state = state

    def update(self, coordinate: Coordinate) -> None:
        """Feed a new fix. Non-finite fixes are ignored."""

        if not is_finite_point(coordinate.latitude, coordinate.longitude):
            logger.warning("Ignoring invalid location fix %s", coordinate)
            return
        self.current = coordinate
        if self.last_known is None:
            self.last_known = coordinate
            return
        moved = haversine_m(
            self.last_known.latitude,
            self.last_known.longitude,
            coordinate.latitude,
            coordinate.longitude,
        )
        if moved > self._threshold_m:
            self.last_known = coordinate

    def enter_background(self) -> None:
        if self.current is not None:
            self.last_known = self.current

    def current_coordinate(self) -> Coordinate | None:
        if self._state is not AuthorizationState.AUTHORIZED_WHILE_ACTIVE:
            return None
        return self.current

    def authorization_state(self) -> AuthorizationState:
        return self._state
