"""Route generation request/response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from ..services.routing.difficulty import Difficulty


class PointModel(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class RoutePreferences(BaseModel):
    min_distance: float = Field(default=0.0, ge=0, description="Minimum route length in km.")
    max_distance: Optional[float] = Field(
        default=None,
        ge=0,
        description="Maximum route length in km. Defaults to twice the minimum.",
    )

    @model_validator(mode="after")
    def _check_range(self) -> "RoutePreferences":
        if self.max_distance and self.max_distance < self.min_distance:
            raise ValueError("max_distance must be greater than or equal to min_distance")
        return self


class RouteGenerationRequest(BaseModel):
    start_point: PointModel
    end_point: PointModel
    route_name: Optional[str] = Field(default=None, description="Friendly name for the generated route.")
    preferences: RoutePreferences = Field(default_factory=RoutePreferences)
    persist: bool = True
    requested_by: Optional[str] = Field(default=None, description="Person or system requesting the route.")


class BoundsModel(BaseModel):
    northeast: PointModel
    southwest: PointModel


class GeneratedRoute(BaseModel):
    route_name: str
    distance_km: float
    duration_min: int
    elevation_gain_m: float
    difficulty: Difficulty
    within_range: bool
    waypoints: List[PointModel]
    points: List[PointModel]
    polyline: Optional[str] = None
    bounds: Optional[BoundsModel] = None


class RouteGenerationResponse(BaseModel):
    message: str
    route: GeneratedRoute
    metadata: dict


class DifficultyResponse(BaseModel):
    distance_km: float
    elevation_gain_m: float
    difficulty: Difficulty
