"""Route difficulty classification."""

from __future__ import annotations

from enum import Enum


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


def classify(distance_km: float, elevation_gain_m: float | None = None) -> Difficulty:
    """Grade a route: every 10 km and every 100 m of climbing add one point."""
    score = distance_km / 10 + (elevation_gain_m or 0) / 100
    if score < 1:
        return Difficulty.BEGINNER
    if score < 2:
        return Difficulty.INTERMEDIATE
    if score < 3:
        return Difficulty.ADVANCED
    return Difficulty.EXPERT
