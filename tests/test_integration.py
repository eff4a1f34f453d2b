from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.runroutes.config import settings
from src.runroutes.main import create_app
from src.runroutes.persistence.filesystem import FileStorage
from src.runroutes.services.routing.errors import DirectionsError


class DummyDirections:
    def __init__(self, distance_km: float = 4.0, fail: bool = False):
        self.distance_km = distance_km
        self.fail = fail

    def get_directions(self, points):
        if self.fail:
            raise DirectionsError("NOT_FOUND", "origin could not be geocoded")
        return {
            "legs": [
                {
                    "distance": {"value": self.distance_km * 1000},
                    "duration": {"value": 2400},
                    "steps": [
                        {
                            "start_location": {"lat": points[0].lat, "lng": points[0].lng},
                            "end_location": {"lat": points[-1].lat, "lng": points[-1].lng},
                        }
                    ],
                }
            ],
            "overview_polyline": {"points": "_p~iF~ps|U"},
        }


@pytest.fixture
def api_client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    app = create_app()
    client = TestClient(app)

    from src.runroutes.services.routing import service as routing_service

    monkeypatch.setattr(routing_service, "FileStorage", lambda: FileStorage(root=tmp_path))
    monkeypatch.setattr(routing_service, "GoogleDirectionsClient", lambda: DummyDirections())
    monkeypatch.setattr(settings, "elevation_enabled", False)

    return client


def _payload(**overrides) -> dict:
    payload = {
        "start_point": {"lat": 40.015, "lng": -105.27},
        "end_point": {"lat": 40.015, "lng": -105.27},
        "route_name": "Loop",
        "preferences": {"min_distance": 3, "max_distance": 5},
    }
    payload.update(overrides)
    return payload


def test_health(api_client: TestClient):
    response = api_client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_generate_endpoint(api_client: TestClient):
    response = api_client.post("/api/routes/generate", json=_payload())

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Route generated successfully"
    assert body["route"]["distance_km"] == pytest.approx(4.0)
    assert body["route"]["within_range"] is True
    assert body["route"]["difficulty"] == "beginner"
    assert body["route"]["bounds"]["northeast"]["lat"] == pytest.approx(40.015)
    assert body["metadata"]["mode"] == "loop"

    saved = api_client.get(f"/api/routes/saved/{body['metadata']['run_id']}")
    assert saved.status_code == 200
    assert saved.json()["result"]["distance_km"] == pytest.approx(4.0)
    assert saved.json()["result"]["waypoints"] == body["route"]["waypoints"]


def test_generate_endpoint_rejects_invalid_coordinates(api_client: TestClient):
    response = api_client.post("/api/routes/generate", json=_payload(start_point={"lat": 95, "lng": 0}))
    assert response.status_code == 422


def test_generate_endpoint_rejects_inverted_range(api_client: TestClient):
    response = api_client.post(
        "/api/routes/generate", json=_payload(preferences={"min_distance": 8, "max_distance": 3})
    )
    assert response.status_code == 422


def test_generate_endpoint_reports_unroutable_points(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from src.runroutes.services.routing import service as routing_service

    monkeypatch.setattr(routing_service, "GoogleDirectionsClient", lambda: DummyDirections(fail=True))
    response = api_client.post("/api/routes/generate", json=_payload())

    assert response.status_code == 502
    assert "NOT_FOUND" in response.json()["detail"]


def test_generate_endpoint_without_api_key(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from src.runroutes.services.routing import service as routing_service
    from src.runroutes.services.routing.directions_client import GoogleDirectionsClient

    monkeypatch.setattr(routing_service, "GoogleDirectionsClient", GoogleDirectionsClient)
    monkeypatch.setattr(settings, "google_maps_api_key", None)
    response = api_client.post("/api/routes/generate", json=_payload())

    assert response.status_code == 503


def test_difficulty_endpoint(api_client: TestClient):
    response = api_client.get("/api/routes/difficulty", params={"distance_km": 40, "elevation_gain_m": 800})

    assert response.status_code == 200
    assert response.json()["difficulty"] == "expert"


def test_missing_saved_route(api_client: TestClient):
    response = api_client.get("/api/routes/saved/route_missing")
    assert response.status_code == 404
