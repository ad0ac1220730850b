"""
Geospatial helpers: great-circle distance, travel speed, zone membership.

Distances use the haversine formula on a mean Earth radius of 6371 km.
Travel speed between two timestamped points is distance over elapsed hours;
when the elapsed time is zero or negative the speed is UNDEFINED_SPEED
(math.inf) so callers can treat it as its own risk signal.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Protocol, Sequence

EARTH_RADIUS_KM = 6371.0
SECONDS_PER_HOUR = 3600.0

UNDEFINED_SPEED = math.inf
"""Sentinel for zero or negative elapsed time between two points."""


class TimedPoint(Protocol):
    latitude: float
    longitude: float
    timestamp: datetime


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in kilometers between two (lat, lng) points in degrees."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Clamp guards against a > 1 from float rounding on near-antipodal points
    a = min(1.0, max(0.0, a))
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def travel_speed_kmh(p1: TimedPoint, p2: TimedPoint) -> float:
    """
    Speed in km/h needed to get from p1 to p2.

    Returns UNDEFINED_SPEED when p2 is not strictly later than p1 (clock skew
    or duplicate timestamps). Never returns NaN and never raises on equal
    timestamps.
    """
    elapsed_hours = (p2.timestamp - p1.timestamp).total_seconds() / SECONDS_PER_HOUR
    if elapsed_hours <= 0:
        return UNDEFINED_SPEED
    distance = haversine_km(p1.latitude, p1.longitude, p2.latitude, p2.longitude)
    return distance / elapsed_hours


def is_undefined_speed(speed: float) -> bool:
    return math.isinf(speed)


def polygon_center(vertices: Sequence[tuple[float, float]]) -> tuple[float, float]:
    """Mean of the vertices; adequate for the small city-scale zones used here."""
    if not vertices:
        raise ValueError("polygon has no vertices")
    lat = sum(v[0] for v in vertices) / len(vertices)
    lng = sum(v[1] for v in vertices) / len(vertices)
    return lat, lng


def point_in_polygon(lat: float, lng: float, vertices: Sequence[tuple[float, float]]) -> bool:
    """Ray-casting point-in-polygon test on (lat, lng) vertices; planar approximation."""
    inside = False
    n = len(vertices)
    if n < 3:
        return False
    j = n - 1
    for i in range(n):
        lat_i, lng_i = vertices[i]
        lat_j, lng_j = vertices[j]
        if (lng_i > lng) != (lng_j > lng):
            crossing = (lat_j - lat_i) * (lng - lng_i) / (lng_j - lng_i) + lat_i
            if lat < crossing:
                inside = not inside
        j = i
    return inside
