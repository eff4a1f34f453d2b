"""Serializers for generated route outputs."""

from __future__ import annotations

import csv
import io
from typing import Any

from ...models.domain import GeoPoint
from ..geospatial import path_bounds
from ..routing.models import RouteCandidate, SearchResult


def _points_to_json(points) -> list[dict[str, float]]:
    return [point.as_dict() for point in points]


def _points_from_json(items: list[dict[str, Any]]) -> tuple[GeoPoint, ...]:
    return tuple(GeoPoint(lat=float(item["lat"]), lng=float(item["lng"])) for item in items)


def route_bounds(candidate: RouteCandidate) -> dict | None:
    """Provider bounds when present, otherwise computed from the path."""
    return candidate.bounds or path_bounds(candidate.path or candidate.waypoints)


def search_result_to_json(result: SearchResult) -> dict:
    candidate = result.candidate
    return {
        "distance_km": candidate.distance_km,
        "duration_min": candidate.duration_min,
        "within_range": result.within_range,
        "waypoints": _points_to_json(candidate.waypoints),
        "points": _points_to_json(candidate.path),
        "overview_polyline": candidate.overview_polyline,
        "bounds": route_bounds(candidate),
        "directions": candidate.raw_geometry,
    }


def search_result_from_json(payload: dict) -> SearchResult:
    candidate = RouteCandidate(
        waypoints=_points_from_json(payload["waypoints"]),
        distance_km=float(payload["distance_km"]),
        duration_min=int(payload["duration_min"]),
        path=_points_from_json(payload.get("points", [])),
        raw_geometry=payload.get("directions") or {},
    )
    return SearchResult(candidate=candidate, within_range=bool(payload["within_range"]))


def waypoints_to_csv(result: SearchResult) -> str:
    buffer = io.StringIO()
    fieldnames = ["sequence", "kind", "lat", "lng"]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    waypoints = result.candidate.waypoints
    last = len(waypoints) - 1
    for sequence, point in enumerate(waypoints):
        writer.writerow(
            {
                "sequence": sequence,
                "kind": "anchor" if sequence in (0, last) else "detour",
                "lat": point.lat,
                "lng": point.lng,
            }
        )
    return buffer.getvalue()
