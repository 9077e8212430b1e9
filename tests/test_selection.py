import logging

from trackly.models.domain import Bus, GeoPoint, Route
from trackly.services.polyline import encode_polyline
from trackly.services.schedule.selection import select_nearest_bus


def _bus(vehicle_number: str, *coords: tuple[float, float]) -> Bus:
    polyline = encode_polyline(GeoPoint(lat, lng) for lat, lng in coords)
    return Bus(vehicle_number=vehicle_number, route=Route(polyline=polyline))


def _east_west_bus(vehicle_number: str, lat: float) -> Bus:
    return _bus(vehicle_number, (lat, 79.85), (lat, 79.95))


FAR_END = GeoPoint(7.5, 80.5)


def test_empty_candidates_return_none():
    assert select_nearest_bus(GeoPoint(6.9, 79.9), FAR_END, []) is None


def test_nearest_route_wins_regardless_of_order():
    start = GeoPoint(6.9, 79.90)
    far = _east_west_bus("NB-100", 6.9009)  # ~100 m north of the passenger
    near = _east_west_bus("NB-050", 6.89955)  # ~50 m south of the passenger

    assert select_nearest_bus(start, FAR_END, [far, near]) == "NB-050"
    assert select_nearest_bus(start, FAR_END, [near, far]) == "NB-050"


def test_tie_goes_to_first_candidate():
    start = GeoPoint(6.9, 79.90)
    first = _east_west_bus("NB-001", 6.9005)
    second = _east_west_bus("NB-002", 6.9005)

    assert select_nearest_bus(start, FAR_END, [first, second]) == "NB-001"
    assert select_nearest_bus(start, FAR_END, [second, first]) == "NB-002"


def test_end_point_competes_with_start_point_across_buses():
    start = GeoPoint(6.9, 79.90)
    end = GeoPoint(7.0, 79.90)
    near_start = _east_west_bus("NB-START", 6.9018)  # ~200 m from the start
    near_end = _east_west_bus("NB-END", 7.00045)  # ~50 m from the end

    assert select_nearest_bus(start, end, [near_start, near_end]) == "NB-END"


def test_bus_without_route_is_skipped(caplog):
    start = GeoPoint(6.9, 79.90)
    candidates = [
        Bus(vehicle_number="NO-ROUTE"),
        Bus(vehicle_number="NO-POLYLINE", route=Route(polyline=None)),
        Bus(vehicle_number="EMPTY", route=Route(polyline="")),
        _east_west_bus("NB-200", 6.92),
    ]

    with caplog.at_level(logging.WARNING):
        assert select_nearest_bus(start, FAR_END, candidates) == "NB-200"

    assert "NO-ROUTE" in caplog.text
    assert "NO-POLYLINE" in caplog.text


def test_unusable_polylines_are_skipped():
    start = GeoPoint(6.9, 79.90)
    candidates = [
        Bus(vehicle_number="BROKEN", route=Route(polyline="_p~iF")),
        _bus("ONE-POINT", (6.9, 79.90)),
        _east_west_bus("NB-300", 6.93),
    ]

    assert select_nearest_bus(start, FAR_END, candidates) == "NB-300"


def test_only_invalid_candidates_return_none():
    candidates = [Bus(vehicle_number="NO-ROUTE"), Bus(vehicle_number="BROKEN", route=Route(polyline="?"))]

    assert select_nearest_bus(GeoPoint(6.9, 79.9), FAR_END, candidates) is None
