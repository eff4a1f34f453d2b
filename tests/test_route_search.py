import pytest

from src.runroutes.models.domain import DistancePreference, GeoPoint
from src.runroutes.services.routing.detours import generate_detour_waypoints
from src.runroutes.services.routing.errors import DirectionsError, DirectPathUnavailable
from src.runroutes.services.routing.search import RouteSearch, build_candidate, detour_targets

START = GeoPoint(lat=40.0, lng=-105.0)
END = GeoPoint(lat=40.01, lng=-105.01)


def _route(distance_km: float, duration_s: int = 600) -> dict:
    return {
        "legs": [
            {
                "distance": {"value": distance_km * 1000},
                "duration": {"value": duration_s},
                "steps": [
                    {
                        "start_location": {"lat": 40.0, "lng": -105.0},
                        "end_location": {"lat": 40.005, "lng": -105.005},
                    },
                    {
                        "start_location": {"lat": 40.005, "lng": -105.005},
                        "end_location": {"lat": 40.01, "lng": -105.01},
                    },
                ],
            }
        ],
        "overview_polyline": {"points": "_p~iF~ps|U"},
    }


class ScriptedDirections:
    """Replays one scripted outcome per call: a distance in km or an exception."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def get_directions(self, points):
        self.calls.append(list(points))
        outcome = self.outcomes[len(self.calls) - 1]
        if isinstance(outcome, Exception):
            raise outcome
        return _route(outcome)


def test_direct_route_in_range_uses_single_call():
    client = ScriptedDirections([7.0])
    result = RouteSearch(client).search(START, END, DistancePreference(5, 10))

    assert len(client.calls) == 1
    assert result.within_range is True
    assert result.candidate.distance_km == pytest.approx(7.0)
    assert result.candidate.waypoints == (START, END)


def test_unconstrained_preference_accepts_direct_route():
    client = ScriptedDirections([42.0])
    result = RouteSearch(client).search(START, END, DistancePreference())

    assert len(client.calls) == 1
    assert result.within_range is True


def test_first_in_range_candidate_stops_the_search():
    preference = DistancePreference(5, 10)
    # direct + targets 0 and 1 (4 counts each) + target 2 counts 1..2 fall short
    outcomes = [1.0] + [2.0] * 10 + [7.5] + [8.0] * 20
    client = ScriptedDirections(outcomes)

    result = RouteSearch(client).search(START, END, preference)

    target = detour_targets(preference)[2]
    assert len(client.calls) == 12
    assert result.within_range is True
    assert result.candidate.distance_km == pytest.approx(7.5)
    assert list(result.candidate.waypoints) == generate_detour_waypoints(START, END, target, 3)
    assert len(result.candidate.waypoints) == 5


def test_direct_route_too_long_is_not_shortened():
    client = ScriptedDirections([25.0])
    result = RouteSearch(client).search(START, END, DistancePreference(5, 10))

    assert len(client.calls) == 1
    assert result.within_range is False
    assert result.candidate.distance_km == pytest.approx(25.0)


def test_closest_longer_candidate_wins_when_nothing_fits():
    outcomes = [1.0, 12.0, 10.5, 11.0, 10.5] + [13.0] * 16
    client = ScriptedDirections(outcomes)

    result = RouteSearch(client).search(START, END, DistancePreference(5, 10))

    assert len(client.calls) == 21
    assert result.within_range is False
    assert result.candidate.distance_km == pytest.approx(10.5)
    # ties keep the earliest candidate (target 0, two waypoints)
    assert len(result.candidate.waypoints) == 4


def test_all_candidate_failures_fall_back_to_direct_route():
    failure = DirectionsError("ZERO_RESULTS", "no route")
    client = ScriptedDirections([1.0] + [failure] * 20)

    result = RouteSearch(client).search(START, END, DistancePreference(5, 10))

    assert len(client.calls) == 21
    assert result.within_range is False
    assert result.candidate.waypoints == (START, END)
    assert result.candidate.distance_km == pytest.approx(1.0)


def test_failed_candidates_are_skipped():
    failure = DirectionsError("UNKNOWN_ERROR", "flaky")
    client = ScriptedDirections([1.0, failure, failure, 6.0])

    result = RouteSearch(client).search(START, END, DistancePreference(5, 10))

    assert len(client.calls) == 4
    assert result.within_range is True
    assert result.candidate.distance_km == pytest.approx(6.0)


def test_shorter_detours_never_replace_direct_route():
    # Known quirk: only candidates longer than the direct route can become the best.
    client = ScriptedDirections([3.0] + [2.0] * 20)

    result = RouteSearch(client).search(START, END, DistancePreference(5, 10))

    assert result.candidate.waypoints == (START, END)
    assert result.within_range is False


def test_direct_route_failure_propagates():
    client = ScriptedDirections([DirectionsError("NOT_FOUND", "bad origin")])

    with pytest.raises(DirectPathUnavailable) as excinfo:
        RouteSearch(client).search(START, END, DistancePreference(5, 10))

    assert excinfo.value.status == "NOT_FOUND"
    assert len(client.calls) == 1


def test_detour_targets_span_range_inclusive():
    assert detour_targets(DistancePreference(4, 8)) == pytest.approx([4.0, 5.0, 6.0, 7.0, 8.0])


def test_build_candidate_flattens_steps_and_rounds_duration():
    candidate = build_candidate(_route(2.5, duration_s=89), [START, END])

    assert candidate.distance_km == pytest.approx(2.5)
    assert candidate.duration_min == 1
    assert [(p.lat, p.lng) for p in candidate.path] == [
        (40.0, -105.0),
        (40.005, -105.005),
        (40.01, -105.01),
    ]
    assert candidate.overview_polyline == "_p~iF~ps|U"


@pytest.mark.parametrize(
    "duration_s, expected_min",
    [(30, 1), (90, 2), (150, 3), (210, 4), (29, 0)],
)
def test_half_minutes_round_up(duration_s, expected_min):
    candidate = build_candidate(_route(1.0, duration_s=duration_s), [START, END])

    assert candidate.duration_min == expected_min


def test_route_without_steps_uses_overview_polyline():
    route = {
        "legs": [{"distance": {"value": 900}, "duration": {"value": 600}}],
        "overview_polyline": {"points": "_p~iF~ps|U_ulLnnqC_mqNvxq`@"},
    }

    candidate = build_candidate(route, [START, END])

    assert [(p.lat, p.lng) for p in candidate.path] == [
        (38.5, -120.2),
        (40.7, -120.95),
        (43.252, -126.453),
    ]


def test_direct_route_exactly_at_minimum_is_accepted():
    client = ScriptedDirections([5.0])
    result = RouteSearch(client).search(START, END, DistancePreference(5, 10))

    assert len(client.calls) == 1
    assert result.within_range is True
    assert result.candidate.waypoints == (START, END)


def test_detour_exactly_at_maximum_is_accepted():
    client = ScriptedDirections([1.0, 10.0] + [12.0] * 19)
    result = RouteSearch(client).search(START, END, DistancePreference(5, 10))

    assert len(client.calls) == 2
    assert result.within_range is True
    assert result.candidate.distance_km == pytest.approx(10.0)
    assert len(result.candidate.waypoints) == 3
