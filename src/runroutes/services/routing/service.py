"""Route generation orchestration service."""

from __future__ import annotations

import logging
from datetime import date

from ...config import settings
from ...models.domain import DistancePreference, GeoPoint
from ...persistence.filesystem import FileStorage
from ...schemas.routes import GeneratedRoute, RouteGenerationRequest, RouteGenerationResponse
from ..geospatial import haversine_km
from ..outputs.route_formatter import (
    route_bounds,
    search_result_from_json,
    search_result_to_json,
    waypoints_to_csv,
)
from .detours import is_loop
from .difficulty import classify
from .directions_client import GoogleDirectionsClient
from .elevation_client import GoogleElevationClient, elevation_gain_m
from .errors import DirectionsError, ServiceNotConfigured
from .models import SearchResult
from .search import RouteSearch

logger = logging.getLogger(__name__)


def _estimate_elevation_gain(result: SearchResult) -> float:
    """Elevation gain along the routed path, or 0 when it cannot be sampled."""
    if not settings.elevation_enabled:
        return 0.0
    points = result.candidate.path or result.candidate.waypoints
    try:
        elevations = GoogleElevationClient().get_elevations(points)
    except (DirectionsError, ValueError) as e:
        logger.warning(f"Elevation lookup failed, assuming flat route: {e}")
        return 0.0
    return round(elevation_gain_m(elevations), 1)


def _build_route(name: str, result: SearchResult, gain: float) -> GeneratedRoute:
    candidate = result.candidate
    return GeneratedRoute(
        route_name=name,
        distance_km=candidate.distance_km,
        duration_min=candidate.duration_min,
        elevation_gain_m=gain,
        difficulty=classify(candidate.distance_km, gain),
        within_range=result.within_range,
        waypoints=[point.as_dict() for point in candidate.waypoints],
        points=[point.as_dict() for point in candidate.path],
        polyline=candidate.overview_polyline,
        bounds=route_bounds(candidate),
    )


def generate_route(payload: RouteGenerationRequest) -> RouteGenerationResponse:
    start = GeoPoint(lat=payload.start_point.lat, lng=payload.start_point.lng)
    end = GeoPoint(lat=payload.end_point.lat, lng=payload.end_point.lng)
    preference = DistancePreference(
        min_distance_km=payload.preferences.min_distance,
        max_distance_km=payload.preferences.max_distance,
    )

    try:
        client = GoogleDirectionsClient()
    except ValueError as e:
        logger.error(f"Directions client initialization failed: {e}")
        raise ServiceNotConfigured(
            "Directions service is not configured. Please check RUNROUTES_GOOGLE_MAPS_API_KEY setting."
        ) from e

    result = RouteSearch(client).search(start, end, preference)
    gain = _estimate_elevation_gain(result)
    name = payload.route_name or f"Generated Route {date.today().isoformat()}"
    route = _build_route(name, result, gain)

    metadata: dict = {
        "mode": "loop" if is_loop(start, end) else "point_to_point",
        "min_distance_km": preference.min_distance_km,
        "max_distance_km": preference.max_distance_km,
        "straight_line_km": round(haversine_km(start.lat, start.lng, end.lat, end.lng), 3),
        "detour_waypoints": max(len(result.candidate.waypoints) - 2, 0),
    }
    if payload.requested_by:
        metadata["author"] = payload.requested_by
    if not result.within_range:
        metadata["warning"] = (
            f"No route found within {preference.min_distance_km}-{preference.max_distance_km}km; "
            f"returning closest route ({result.distance_km:.2f}km)."
        )

    # Database failures must not lose a route that was already generated.
    try:
        from ...persistence.database import save_route_to_database

        stored = save_route_to_database(route.model_dump(mode="json"))
        if stored and stored.get("id") is not None:
            metadata["route_id"] = stored["id"]
    except Exception as exc:
        logger.error(f"Failed to save route to database: {exc}")

    if payload.persist:
        storage = FileStorage()
        run_dir = storage.make_run_directory(prefix="route")
        storage.write_json(
            run_dir / "summary.json",
            {
                "route_name": name,
                "difficulty": route.difficulty.value,
                "elevation_gain_m": gain,
                "metadata": metadata,
                "result": search_result_to_json(result),
            },
        )
        storage.write_csv(run_dir / "waypoints.csv", waypoints_to_csv(result))
        metadata["run_id"] = run_dir.name

    logger.info(
        f"Route generated: {route.distance_km:.2f}km, {route.duration_min} min, "
        f"{len(route.waypoints)} waypoints, {len(route.points)} path points, difficulty={route.difficulty.value}"
    )
    return RouteGenerationResponse(message="Route generated successfully", route=route, metadata=metadata)


def load_saved_route(run_id: str, storage: FileStorage | None = None) -> tuple[dict, SearchResult]:
    """Read back a persisted run: its summary and the decoded search result."""
    storage = storage or FileStorage()
    run_dir = storage.resolve_run_directory(run_id)
    summary = storage.read_json(run_dir / "summary.json")
    return summary, search_result_from_json(summary["result"])
