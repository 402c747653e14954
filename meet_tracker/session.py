"""The map screen's live view over the contact store.

The visible set is never patched incrementally: every refresh re-reads the
store and re-runs the active query, so the latest call always wins.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from meet_tracker.layout import GroupingStrategy, layout_offsets, pairwise_group
from meet_tracker.location import LocationSource
from meet_tracker.models import (
    DEFAULT_SPAN_DEG,
    FAN_RADIUS,
    NEARBY_RADIUS_M,
    OVERLAP_EPSILON_DEG,
    Contact,
    Coordinate,
    PlacedContact,
    RadiusQuery,
    RectangleQuery,
    ViewportQuery,
)
from meet_tracker.spatial import filter_visible
from meet_tracker.store import ContactStore


@dataclass
class MapSession:
    """Holds the current query and recomputes what the map shows."""

    store: ContactStore
    location: LocationSource
    query: ViewportQuery | None = None
    epsilon: float = OVERLAP_EPSILON_DEG
    fan_radius: float = FAN_RADIUS
    grouping: GroupingStrategy = field(default=pairwise_group)

    def show_region(
        self,
        center: Coordinate,
        lat_span: float = DEFAULT_SPAN_DEG,
        lon_span: float = DEFAULT_SPAN_DEG,
    ) -> None:
        """Viewport mode: the map was panned or zoomed."""

        self.query = RectangleQuery(center, lat_span, lon_span)

    def show_nearby(self, radius_m: float = NEARBY_RADIUS_M) -> None:
        """Near-me mode around the current location fix."""

        self.query = RadiusQuery(self.location.current_coordinate(), radius_m)

    def visible(self) -> list[Contact]:
        query = self.query
        if query is None:
            return []
        if isinstance(query, RadiusQuery):
            # the fix may have moved since the mode was chosen
            query = RadiusQuery(self.location.current_coordinate(), query.radius_m)
        return filter_visible(self.store.fetch_all(), query)

    def placements(self) -> list[PlacedContact]:
        return layout_offsets(self.visible(), epsilon=self.epsilon, radius=self.fan_radius, grouping=self.grouping)
