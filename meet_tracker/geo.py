"""Geospatial utilities (no external dependencies)."""

from __future__ import annotations

import math


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute Haversine distance in meters between two lat/lon points.

    Args:
        lat1: Latitude 1 in degrees.
        lon1: Longitude 1 in degrees.
        lat2: Latitude 2 in degrees.
        lon2: Longitude 2 in degrees.

    Returns:
        Distance in meters. NaN if any input is NaN.
    """

    r = 6_371_000.0  # mean Earth radius in meters
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return r * c


def is_finite_point(lat: float, lon: float) -> bool:
    """True when both components are finite numbers."""

    return math.isfinite(lat) and math.isfinite(lon)


def is_inside_circle(
    lat: float,
    lon: float,
    center_lat: float,
    center_lon: float,
    radius_m: float,
) -> bool:
    """Check whether a point is inside or on the boundary of a circle."""

    if not (is_finite_point(lat, lon) and is_finite_point(center_lat, center_lon)):
        return False
    return haversine_m(lat, lon, center_lat, center_lon) <= radius_m


def is_inside_rectangle(
    lat: float,
    lon: float,
    center_lat: float,
    center_lon: float,
    lat_span: float,
    lon_span: float,
) -> bool:
    """Check whether a point is inside or on the edge of a viewport rectangle.

    Uses plain degree differences per axis, the same way the map viewport is
    described (center + span). Longitude compression at high latitudes is not
    taken into account.
    """

    if not (is_finite_point(lat, lon) and is_finite_point(center_lat, center_lon)):
        return False
    return abs(lat - center_lat) <= lat_span / 2.0 and abs(lon - center_lon) <= lon_span / 2.0


def is_near(lat1: float, lon1: float, lat2: float, lon2: float, epsilon_deg: float) -> bool:
    """Strict per-axis closeness test used for pin overlap."""

    if not (is_finite_point(lat1, lon1) and is_finite_point(lat2, lon2)):
        return False
    return abs(lat1 - lat2) < epsilon_deg and abs(lon1 - lon2) < epsilon_deg
