"""Route generation endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, status

from ...schemas.routes import DifficultyResponse, RouteGenerationRequest, RouteGenerationResponse
from ...services.outputs.route_formatter import search_result_to_json
from ...services.routing.difficulty import classify
from ...services.routing.errors import DirectPathUnavailable, ServiceNotConfigured
from ...services.routing.service import generate_route, load_saved_route

router = APIRouter(prefix="/routes", tags=["routes"])

logger = logging.getLogger(__name__)


@router.post("/generate", response_model=RouteGenerationResponse, status_code=status.HTTP_201_CREATED)
def generate(payload: RouteGenerationRequest) -> RouteGenerationResponse:
    try:
        return generate_route(payload)
    except ServiceNotConfigured as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except DirectPathUnavailable as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Could not route between start and end points: {exc}",
        ) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error generating route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to generate route: {str(exc)}",
        ) from exc


@router.get("/difficulty", response_model=DifficultyResponse, status_code=status.HTTP_200_OK)
def difficulty(
    distance_km: float = Query(..., ge=0, description="Route length in kilometers"),
    elevation_gain_m: float = Query(default=0.0, ge=0, description="Total climb in meters"),
) -> DifficultyResponse:
    return DifficultyResponse(
        distance_km=distance_km,
        elevation_gain_m=elevation_gain_m,
        difficulty=classify(distance_km, elevation_gain_m),
    )


@router.get("/saved/{run_id}", status_code=status.HTTP_200_OK)
def get_saved_route(run_id: str) -> dict:
    """Return a previously generated route from its run directory."""
    try:
        summary, result = load_saved_route(run_id)
    except FileNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return {
        "run_id": run_id,
        "route_name": summary.get("route_name"),
        "difficulty": summary.get("difficulty"),
        "elevation_gain_m": summary.get("elevation_gain_m"),
        "metadata": summary.get("metadata", {}),
        "result": search_result_to_json(result),
    }
