"""Data models for contacts, map queries and pin layout."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Final, Union


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A WGS84 point in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class Contact:
    """One person met at a place and time.

    Attributes:
        id: Opaque identity assigned by the store.
        name: Display name. Non-empty when entered through the app, may be empty
            when it came from a defaulted import record.
        description: Optional free text.
        latitude: Latitude in decimal degrees.
        longitude: Longitude in decimal degrees.
        timestamp: When the contact was met (timezone-aware). None only when an
            imported record carried an unparsable timestamp.
    """

    id: str
    name: str
    description: str | None
    latitude: float
    longitude: float
    timestamp: datetime | None

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)


@dataclass(frozen=True, slots=True)
class RectangleQuery:
    """Axis-aligned map viewport: center plus full angular span per axis."""

    center: Coordinate | None
    lat_span: float
    lon_span: float


@dataclass(frozen=True, slots=True)
class RadiusQuery:
    """Circle around a center (usually the user's position)."""

    center: Coordinate | None
    radius_m: float


ViewportQuery = Union[RectangleQuery, RadiusQuery]


@dataclass(frozen=True, slots=True)
class LayoutOffset:
    """Screen offset (display points) applied to a pin."""

    dx: float
    dy: float


ZERO_OFFSET: Final[LayoutOffset] = LayoutOffset(0.0, 0.0)


@dataclass(frozen=True, slots=True)
class PlacedContact:
    """A visible contact together with its pin offset."""

    contact: Contact
    offset: LayoutOffset


DEFAULT_TZ: Final[str] = "UTC"
# "Near me" list radius.
NEARBY_RADIUS_M: Final[float] = 500.0
# Roughly 10 m of latitude.
OVERLAP_EPSILON_DEG: Final[float] = 0.0001
FAN_RADIUS: Final[float] = 60.0
DEFAULT_SPAN_DEG: Final[float] = 0.01
LAST_KNOWN_THRESHOLD_M: Final[float] = 100.0
