"""HTTP client for the Google Maps Elevation API."""

from __future__ import annotations

import logging
from typing import Sequence

import httpx

from ...config import settings
from ...models.domain import GeoPoint
from .errors import DirectionsError

# The Elevation API rejects URLs beyond ~8k characters; 256 locations stays well under.
DEFAULT_MAX_LOCATIONS_PER_REQUEST = 256

logger = logging.getLogger(__name__)


class GoogleElevationClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        max_locations_per_request: int = DEFAULT_MAX_LOCATIONS_PER_REQUEST,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or settings.google_maps_api_key
        if not self.api_key:
            raise ValueError("Google Maps API key is not configured.")
        self.base_url = base_url or settings.elevation_base_url
        self.timeout = timeout if timeout is not None else settings.directions_timeout_seconds
        self.max_locations_per_request = max_locations_per_request
        self._transport = transport

    def _request_chunk(self, client: httpx.Client, points: Sequence[GeoPoint]) -> list[float]:
        params = {
            "locations": "|".join(point.as_query() for point in points),
            "key": self.api_key,
        }
        try:
            response = client.get(self.base_url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise DirectionsError(f"HTTP_{e.response.status_code}", str(e)) from e
        except httpx.TransportError as e:
            raise DirectionsError("NETWORK_ERROR", str(e)) from e
        except ValueError as e:
            raise DirectionsError("INVALID_RESPONSE", str(e)) from e

        if data.get("status") != "OK":
            raise DirectionsError(data.get("status") or "UNKNOWN", data.get("error_message", "Unknown error"))
        return [float(result["elevation"]) for result in data.get("results", [])]

    def get_elevations(self, points: Sequence[GeoPoint]) -> list[float]:
        """Return the elevation in meters of every point, in order."""
        if not points:
            return []

        elevations: list[float] = []
        client = httpx.Client(timeout=httpx.Timeout(self.timeout, connect=10.0), transport=self._transport)
        try:
            for i in range(0, len(points), self.max_locations_per_request):
                chunk = points[i : i + self.max_locations_per_request]
                elevations.extend(self._request_chunk(client, chunk))
        finally:
            client.close()
        logger.debug(f"Fetched {len(elevations)} elevations in {-(-len(points) // self.max_locations_per_request)} requests")
        return elevations


def elevation_gain_m(elevations: Sequence[float]) -> float:
    """Sum of the positive elevation deltas along a profile."""
    return sum(max(b - a, 0.0) for a, b in zip(elevations, elevations[1:]))
