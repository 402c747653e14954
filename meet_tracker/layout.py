"""Pin decluttering: fan out contacts that sit on (almost) the same spot.

Each contact looks at the whole visible collection and collects every contact
within ``epsilon`` degrees of *itself* (itself included). If it is not alone,
it takes its position in that group and is placed on a circle around the
shared point. Groups are per contact, not clusters: with chained positions
(A near B, B near C, A not near C) members can disagree about the group.
"""

from __future__ import annotations

import math
from typing import Callable, Sequence

from meet_tracker.geo import is_finite_point, is_near
from meet_tracker.models import (
    FAN_RADIUS,
    OVERLAP_EPSILON_DEG,
    ZERO_OFFSET,
    Contact,
    LayoutOffset,
    PlacedContact,
)

GroupingStrategy = Callable[[Contact, Sequence[Contact], float], list[Contact]]


def pairwise_group(contact: Contact, visible: Sequence[Contact], epsilon: float) -> list[Contact]:
    """Contacts within epsilon of ``contact`` on both axes, in collection order."""

    return [
        other
        for other in visible
        if is_near(contact.latitude, contact.longitude, other.latitude, other.longitude, epsilon)
    ]


def transitive_group(contact: Contact, visible: Sequence[Contact], epsilon: float) -> list[Contact]:
    """Connected component of ``contact`` under the same closeness test.

    Alternative to :func:`pairwise_group` where every member sees the same group.
    """

    if not is_finite_point(contact.latitude, contact.longitude):
        return []
    members = {contact.id}
    frontier = [contact]
    while frontier:
        cur = frontier.pop()
        for other in visible:
            if other.id in members:
                continue
            if is_near(cur.latitude, cur.longitude, other.latitude, other.longitude, epsilon):
                members.add(other.id)
                frontier.append(other)
    return [c for c in visible if c.id in members]


def offset_for(
    contact: Contact,
    visible: Sequence[Contact],
    *,
    epsilon: float = OVERLAP_EPSILON_DEG,
    radius: float = FAN_RADIUS,
    grouping: GroupingStrategy = pairwise_group,
) -> LayoutOffset:
    """Offset of one pin given everything currently on the map."""

    group = grouping(contact, visible, epsilon)
    n = len(group)
    if n <= 1:
        return ZERO_OFFSET

    index = next((i for i, c in enumerate(group) if c.id == contact.id), 0)
    angle = 2.0 * math.pi * index / n
    return LayoutOffset(radius * math.cos(angle), radius * math.sin(angle))


def layout_offsets(
    visible: Sequence[Contact],
    *,
    epsilon: float = OVERLAP_EPSILON_DEG,
    radius: float = FAN_RADIUS,
    grouping: GroupingStrategy = pairwise_group,
) -> list[PlacedContact]:
    """Offsets for every visible contact, in the same order."""

    return [
        PlacedContact(c, offset_for(c, visible, epsilon=epsilon, radius=radius, grouping=grouping))
        for c in visible
    ]
