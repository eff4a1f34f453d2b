"""Domain models for geographic points and distance preferences."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """A WGS84 coordinate in decimal degrees."""

    lat: float
    lng: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"Latitude {self.lat} is outside [-90, 90].")
        if not -180.0 <= self.lng <= 180.0:
            raise ValueError(f"Longitude {self.lng} is outside [-180, 180].")

    def as_dict(self) -> dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}

    def as_query(self) -> str:
        return f"{self.lat},{self.lng}"


@dataclass(frozen=True, slots=True)
class DistancePreference:
    """Accepted route length range in kilometers.

    ``max_distance_km`` defaults to twice the minimum when it is left unset or
    zero. A preference whose bounds are both zero places no constraint on the
    route and accepts the direct path.
    """

    min_distance_km: float = 0.0
    max_distance_km: Optional[float] = None

    def __post_init__(self) -> None:
        if self.min_distance_km < 0:
            raise ValueError("Minimum distance must be non-negative.")
        if not self.max_distance_km:
            object.__setattr__(self, "max_distance_km", self.min_distance_km * 2)

    @property
    def unconstrained(self) -> bool:
        return self.min_distance_km == 0 and self.max_distance_km == 0

    def contains(self, distance_km: float) -> bool:
        if self.unconstrained:
            return True
        return self.min_distance_km <= distance_km <= self.max_distance_km

    def gap(self, distance_km: float) -> float:
        """Distance in km between ``distance_km`` and the accepted range (0 inside it)."""
        return max(self.min_distance_km - distance_km, distance_km - self.max_distance_km, 0.0)
