"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Sequence

from shapely.geometry import LineString, Point

from ..models.domain import GeoPoint

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def path_bounds(points: Sequence[GeoPoint]) -> dict | None:
    """Bounding box of ``points`` in the Directions API ``bounds`` shape."""
    if not points:
        return None
    if len(points) == 1:
        geometry = Point(points[0].lng, points[0].lat)
    else:
        geometry = LineString([(point.lng, point.lat) for point in points])
    min_lng, min_lat, max_lng, max_lat = geometry.bounds
    return {
        "northeast": {"lat": max_lat, "lng": max_lng},
        "southwest": {"lat": min_lat, "lng": min_lng},
    }
