"""Summary statistics for a contact collection."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from meet_tracker.layout import pairwise_group
from meet_tracker.models import OVERLAP_EPSILON_DEG, Contact


@dataclass(frozen=True, slots=True)
class InspectResult:
    """High-level collection summary."""

    contacts: int
    first_met: datetime | None
    last_met: datetime | None
    without_timestamp: int
    min_lat: float | None
    max_lat: float | None
    min_lon: float | None
    max_lon: float | None
    stacked: int


def inspect_contacts(contacts: Sequence[Contact], epsilon: float = OVERLAP_EPSILON_DEG) -> InspectResult:
    """Summarize contacts.

    ``stacked`` counts contacts that would be fanned out on the map because at
    least one other contact is within ``epsilon`` of them.
    """

    if not contacts:
        return InspectResult(
            contacts=0,
            first_met=None,
            last_met=None,
            without_timestamp=0,
            min_lat=None,
            max_lat=None,
            min_lon=None,
            max_lon=None,
            stacked=0,
        )

    times = sorted(c.timestamp for c in contacts if c.timestamp is not None)
    lats = [c.latitude for c in contacts]
    lons = [c.longitude for c in contacts]
    stacked = sum(1 for c in contacts if len(pairwise_group(c, contacts, epsilon)) > 1)
    return InspectResult(
        contacts=len(contacts),
        first_met=times[0] if times else None,
        last_met=times[-1] if times else None,
        without_timestamp=len(contacts) - len(times),
        min_lat=min(lats),
        max_lat=max(lats),
        min_lon=min(lons),
        max_lon=max(lons),
        stacked=stacked,
    )
