"""HTTP client for interacting with the Google Maps Directions API."""

from __future__ import annotations

import logging
import time
from typing import Protocol, Sequence

import httpx

from ...config import settings
from ...models.domain import GeoPoint
from .errors import DirectionsError

logger = logging.getLogger(__name__)


class DirectionsClient(Protocol):
    """Anything that can turn an ordered list of points into a routed geometry.

    Implementations return the first route of the provider response as a dict
    with ``legs`` (each carrying ``distance.value`` in meters,
    ``duration.value`` in seconds and ``steps``), ``overview_polyline`` and
    ``bounds``. Failures are raised as :class:`DirectionsError`.
    """

    def get_directions(self, points: Sequence[GeoPoint]) -> dict: ...


class GoogleDirectionsClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        mode: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or settings.google_maps_api_key
        if not self.api_key:
            raise ValueError("Google Maps API key is not configured.")
        self.base_url = base_url or settings.directions_base_url
        self.mode = mode or settings.travel_mode
        self.timeout = timeout if timeout is not None else settings.directions_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.directions_max_retries
        self.backoff_seconds = (
            backoff_seconds if backoff_seconds is not None else settings.directions_backoff_seconds
        )
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            transport=self._transport,
        )

    def _build_params(self, points: Sequence[GeoPoint]) -> dict[str, str]:
        params = {
            "origin": points[0].as_query(),
            "destination": points[-1].as_query(),
            "mode": self.mode,
            "key": self.api_key,
        }
        if len(points) > 2:
            params["waypoints"] = "|".join(point.as_query() for point in points[1:-1])
        return params

    def get_directions(self, points: Sequence[GeoPoint]) -> dict:
        """Route ``points`` in order and return the first route of the response.

        Transport failures and 5xx responses are retried with backoff. A
        response whose ``status`` is not ``OK`` is a provider verdict and is
        raised immediately.
        """
        if len(points) < 2:
            raise ValueError("Need at least 2 waypoints (start and end).")

        params = self._build_params(points)
        logger.debug(
            f"Requesting directions: origin={params['origin']}, destination={params['destination']}, "
            f"waypoints={params.get('waypoints', 'none')}"
        )

        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(self.base_url, params=params)
                    response.raise_for_status()
                    data = response.json()
                    break
                except httpx.HTTPStatusError as e:
                    status_code = e.response.status_code
                    attempt += 1
                    if status_code < 500 or attempt > self.max_retries:
                        raise DirectionsError(f"HTTP_{status_code}", str(e)) from e
                    time.sleep(self.backoff_seconds * attempt)
                except httpx.TimeoutException as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"Directions request timed out after {self.max_retries} retries: {e}")
                        raise DirectionsError("TIMEOUT", str(e)) from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"Directions timeout, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    time.sleep(wait_time)
                except httpx.TransportError as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise DirectionsError(
                            "NETWORK_ERROR", f"Failed to reach directions service at {self.base_url}: {e}"
                        ) from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"Directions network error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {e}")
                    time.sleep(wait_time)
                except ValueError as e:
                    raise DirectionsError("INVALID_RESPONSE", f"Directions response is not valid JSON: {e}") from e
        finally:
            client.close()

        status = data.get("status")
        if status != "OK":
            message = data.get("error_message", "Unknown error")
            logger.error(f"Directions API error: {status} - {message}")
            raise DirectionsError(status or "UNKNOWN", message)
        routes = data.get("routes") or []
        if not routes:
            raise DirectionsError("ZERO_RESULTS", "Directions response contained no routes.")
        return routes[0]


def decode_polyline(polyline: str) -> list[tuple[float, float]]:
    """Decode Google polyline string to list of (lat, lng) coordinates."""
    coordinates = []
    index = 0
    lat = 0
    lng = 0

    while index < len(polyline):
        deltas = []
        for _ in range(2):
            shift = 0
            result = 0
            while True:
                b = ord(polyline[index]) - 63
                index += 1
                result |= (b & 0x1f) << shift
                shift += 5
                if b < 0x20:
                    break
            deltas.append(~(result >> 1) if (result & 1) else (result >> 1))
        lat += deltas[0]
        lng += deltas[1]
        coordinates.append((lat / 1e5, lng / 1e5))

    return coordinates


def check_health(api_key: str | None = None, transport: httpx.BaseTransport | None = None) -> bool:
    """Check the directions provider by routing two nearby points."""
    key = api_key or settings.google_maps_api_key
    if not key:
        return False
    try:
        client = GoogleDirectionsClient(api_key=key, max_retries=0, timeout=5.0, transport=transport)
        client.get_directions([GeoPoint(52.517037, 13.388860), GeoPoint(52.496891, 13.385983)])
        return True
    except DirectionsError as e:
        logger.warning(f"Directions health check failed: {e}")
        return False
