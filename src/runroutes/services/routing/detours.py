"""Detour waypoint generation used to lengthen a too-short route."""

from __future__ import annotations

import logging
import math

from ...models.domain import GeoPoint

# Same-point tolerance in degrees for treating a request as a loop.
LOOP_TOLERANCE_DEG = 1e-4
KM_PER_DEGREE_LAT = 111.0

logger = logging.getLogger(__name__)


def is_loop(start: GeoPoint, end: GeoPoint) -> bool:
    return abs(start.lat - end.lat) < LOOP_TOLERANCE_DEG and abs(start.lng - end.lng) < LOOP_TOLERANCE_DEG


def _offset(center_lat: float, center_lng: float, radius_deg: float, angle: float) -> GeoPoint:
    lat = center_lat + radius_deg * math.cos(angle)
    lng = center_lng + radius_deg * math.sin(angle) / math.cos(math.radians(center_lat))
    # Keep points valid near the poles and the antimeridian.
    lat = min(max(lat, -90.0), 90.0)
    if not -180.0 <= lng <= 180.0:
        lng = (lng + 180.0) % 360.0 - 180.0
    return GeoPoint(lat=lat, lng=lng)


def generate_detour_waypoints(
    start: GeoPoint,
    end: GeoPoint,
    target_distance_km: float,
    num_waypoints: int = 2,
) -> list[GeoPoint]:
    """Build a waypoint sequence whose routed length should land near ``target_distance_km``.

    Loops (``start`` and ``end`` within 1e-4 degrees) place the detour points
    on a circle of circumference ``target_distance_km`` around ``start`` and
    close back on ``start``. Point-to-point requests spread the detour points
    around the midpoint of the two anchors. The routed length after snapping
    to the road network is only loosely related to the target.
    """
    waypoints = [start]

    if is_loop(start, end):
        radius_deg = target_distance_km / (2 * math.pi) / KM_PER_DEGREE_LAT
        for i in range(num_waypoints):
            angle = (i + 1) * (2 * math.pi) / (num_waypoints + 1)
            waypoints.append(_offset(start.lat, start.lng, radius_deg, angle))
        waypoints.append(start)
        logger.debug(f"Creating loop route with {num_waypoints} waypoints around start point")
    else:
        mid_lat = (start.lat + end.lat) / 2
        mid_lng = (start.lng + end.lng) / 2
        radius_deg = target_distance_km / (num_waypoints + 2) / KM_PER_DEGREE_LAT
        for i in range(num_waypoints):
            angle = i * 2 * math.pi / num_waypoints
            waypoints.append(_offset(mid_lat, mid_lng, radius_deg, angle))
        waypoints.append(end)
        logger.debug(f"Creating point-to-point route with {num_waypoints} detour waypoints")

    return waypoints
