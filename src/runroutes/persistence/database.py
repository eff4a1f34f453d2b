"""Database persistence for generated routes."""

from __future__ import annotations

import json
import logging
from typing import Any

from ..db.supabase import get_supabase_client

ROUTES_TABLE = "routes"

logger = logging.getLogger(__name__)


def route_to_row(route: dict[str, Any]) -> dict[str, Any]:
    """Map a generated route payload onto a ``routes`` table row.

    Waypoints are stored as a JSON string so their order survives any backend.
    """
    return {
        "route_name": route["route_name"],
        "distance": route["distance_km"],
        "estimated_time": route["duration_min"],
        "elevation_gain": route["elevation_gain_m"],
        "waypoints": json.dumps(route["waypoints"]),
        "visibility": "public",
    }


def save_route_to_database(route: dict[str, Any]) -> dict[str, Any] | None:
    """Insert a generated route into Supabase and return the stored row.

    Returns None without touching the network when Supabase is not configured.
    """
    supabase = get_supabase_client()
    if not supabase:
        logger.info("Supabase not configured - route will only be saved to files")
        return None

    response = supabase.table(ROUTES_TABLE).insert(route_to_row(route)).execute()
    rows = response.data or []
    if not rows:
        return None
    stored = dict(rows[0])
    if isinstance(stored.get("waypoints"), str):
        stored["waypoints"] = json.loads(stored["waypoints"])
    logger.info(f"Saved route '{route['route_name']}' to database (id={stored.get('id')})")
    return stored
