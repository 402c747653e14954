"""Visible-set queries: which contacts are in view or nearby."""

from __future__ import annotations

from typing import Sequence

from meet_tracker.geo import is_inside_circle, is_inside_rectangle
from meet_tracker.models import Contact, Coordinate, RadiusQuery, RectangleQuery, ViewportQuery


def filter_by_rectangle(
    contacts: Sequence[Contact],
    center: Coordinate | None,
    lat_span: float,
    lon_span: float,
) -> list[Contact]:
    """Contacts inside a map viewport, in input order.

    The test is per axis on raw degrees (edges included), which is how the map
    describes its own visible region.

    Args:
        contacts: Full collection, store order.
        center: Viewport center. None yields an empty result.
        lat_span: Full latitude span in degrees.
        lon_span: Full longitude span in degrees.
    """

    if not contacts or center is None:
        return []
    return [
        c
        for c in contacts
        if is_inside_rectangle(c.latitude, c.longitude, center.latitude, center.longitude, lat_span, lon_span)
    ]


def filter_by_radius(
    contacts: Sequence[Contact],
    center: Coordinate | None,
    radius_m: float,
) -> list[Contact]:
    """Contacts within ``radius_m`` great-circle meters of ``center``, in input order.

    A missing center (no location fix yet) yields an empty result.
    """

    if not contacts or center is None:
        return []
    return [
        c
        for c in contacts
        if is_inside_circle(c.latitude, c.longitude, center.latitude, center.longitude, radius_m)
    ]


def filter_visible(contacts: Sequence[Contact], query: ViewportQuery) -> list[Contact]:
    """Apply whichever query the map is currently in."""

    if isinstance(query, RectangleQuery):
        return filter_by_rectangle(contacts, query.center, query.lat_span, query.lon_span)
    if isinstance(query, RadiusQuery):
        return filter_by_radius(contacts, query.center, query.radius_m)
    raise TypeError(f"unsupported query type: {type(query).__name__}")
