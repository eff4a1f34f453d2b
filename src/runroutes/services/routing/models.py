"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ...models.domain import GeoPoint


@dataclass(frozen=True, slots=True)
class RouteCandidate:
    waypoints: tuple[GeoPoint, ...]
    distance_km: float
    duration_min: int
    path: tuple[GeoPoint, ...]
    raw_geometry: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def overview_polyline(self) -> str | None:
        polyline = self.raw_geometry.get("overview_polyline")
        if isinstance(polyline, dict):
            return polyline.get("points")
        return polyline

    @property
    def bounds(self) -> dict | None:
        return self.raw_geometry.get("bounds")


@dataclass(frozen=True, slots=True)
class SearchResult:
    candidate: RouteCandidate
    within_range: bool

    @property
    def distance_km(self) -> float:
        return self.candidate.distance_km
