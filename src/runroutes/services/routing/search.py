"""Distance-constrained route search over detour waypoint configurations."""

from __future__ import annotations

import logging
import math
from typing import Sequence

from ...models.domain import DistancePreference, GeoPoint
from .detours import generate_detour_waypoints
from .directions_client import DirectionsClient, decode_polyline
from .errors import CandidateUnavailable, DirectionsError, DirectPathUnavailable
from .models import RouteCandidate, SearchResult

NUM_TARGETS = 5
MAX_DETOUR_WAYPOINTS = 4

logger = logging.getLogger(__name__)


def route_distance_km(route: dict) -> float:
    """Total length of a routed geometry, summed over its legs."""
    return sum(leg["distance"]["value"] for leg in route.get("legs", [])) / 1000


def build_candidate(route: dict, waypoints: Sequence[GeoPoint]) -> RouteCandidate:
    """Flatten a provider route into a :class:`RouteCandidate`.

    The path is the start of every step followed by the end of the last step.
    Routes without steps fall back to the decoded overview polyline.
    """
    legs = route.get("legs", [])
    duration_seconds = 0
    path: list[GeoPoint] = []
    for leg in legs:
        duration_seconds += leg["duration"]["value"]
        for step in leg.get("steps", []):
            location = step["start_location"]
            path.append(GeoPoint(lat=location["lat"], lng=location["lng"]))

    if legs and legs[-1].get("steps"):
        location = legs[-1]["steps"][-1]["end_location"]
        path.append(GeoPoint(lat=location["lat"], lng=location["lng"]))

    if not path:
        polyline = route.get("overview_polyline")
        if isinstance(polyline, dict):
            polyline = polyline.get("points")
        if polyline:
            path = [GeoPoint(lat=lat, lng=lng) for lat, lng in decode_polyline(polyline)]

    return RouteCandidate(
        waypoints=tuple(waypoints),
        distance_km=route_distance_km(route),
        duration_min=int(math.floor(duration_seconds / 60 + 0.5)),
        path=tuple(path),
        raw_geometry=route,
    )


def detour_targets(preference: DistancePreference) -> list[float]:
    """Evenly spaced target distances from the minimum to the maximum, inclusive."""
    low, high = preference.min_distance_km, preference.max_distance_km
    step = (high - low) / (NUM_TARGETS - 1)
    return [low + i * step for i in range(NUM_TARGETS)]


class RouteSearch:
    """Find a route between two points whose length fits a distance preference.

    The direct route is tried first. When it is too short, detour waypoints
    are generated for five target distances and one to four waypoints each,
    strictly in that order, and the first routed candidate that lands inside
    the range is returned. Otherwise the candidate closest to the range wins,
    but only if it is longer than the direct route; failing that the direct
    route is returned with ``within_range=False``.

    Over-long direct routes are never shortened.
    """

    def __init__(self, client: DirectionsClient) -> None:
        self.client = client

    def _route(self, waypoints: Sequence[GeoPoint]) -> RouteCandidate:
        return build_candidate(self.client.get_directions(waypoints), waypoints)

    def search(self, start: GeoPoint, end: GeoPoint, preference: DistancePreference) -> SearchResult:
        logger.info(
            f"Generating route from ({start.lat}, {start.lng}) to ({end.lat}, {end.lng}), "
            f"range {preference.min_distance_km}km - {preference.max_distance_km}km"
        )

        direct_waypoints = [start, end]
        try:
            direct = self._route(direct_waypoints)
        except DirectionsError as e:
            raise DirectPathUnavailable(e.status, e.message) from e
        logger.info(f"Direct route distance: {direct.distance_km:.2f}km")

        if preference.contains(direct.distance_km):
            return SearchResult(candidate=direct, within_range=True)

        best = direct
        best_gap = preference.gap(direct.distance_km)

        if direct.distance_km < preference.min_distance_km:
            for target in detour_targets(preference):
                for num_waypoints in range(1, MAX_DETOUR_WAYPOINTS + 1):
                    waypoints = generate_detour_waypoints(start, end, target, num_waypoints)
                    try:
                        candidate = self._route(waypoints)
                    except DirectionsError as e:
                        skipped = CandidateUnavailable(e.status, e.message)
                        logger.warning(
                            f"Skipping target={target:.1f}km, waypoints={num_waypoints}: {skipped}"
                        )
                        continue

                    logger.info(
                        f"Trying target={target:.1f}km, waypoints={num_waypoints}: got {candidate.distance_km:.2f}km"
                    )
                    if preference.contains(candidate.distance_km):
                        return SearchResult(candidate=candidate, within_range=True)

                    # Only candidates longer than the direct route may replace it,
                    # even when a shorter one sits closer to the range.
                    gap = preference.gap(candidate.distance_km)
                    if gap < best_gap and candidate.distance_km > direct.distance_km:
                        best, best_gap = candidate, gap

        if best is not direct:
            logger.info(f"Using best available route: {best.distance_km:.2f}km")
            return SearchResult(candidate=best, within_range=preference.contains(best.distance_km))

        logger.warning(
            f"Could not find a route within {preference.min_distance_km}-{preference.max_distance_km}km, "
            f"using direct route: {direct.distance_km:.2f}km"
        )
        return SearchResult(candidate=direct, within_range=False)
