from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from trackly.models.domain import Bus, DaySchedule, GeoPoint, Route, ScheduleEntry
from trackly.services.polyline import encode_polyline
from trackly.services.schedule import service as schedule_service
from trackly.services.schedule.session import ScheduleSession

COLOMBO = ZoneInfo("Asia/Colombo")
MONDAY_0730 = datetime(2026, 10, 19, 7, 30, tzinfo=COLOMBO)
START = GeoPoint(6.901, 79.86)
END = GeoPoint(6.901, 79.93)


def _entry(departure: str, arrival: str, forward: bool = True) -> ScheduleEntry:
    places = ("Fort", "Kandy") if forward else ("Kandy", "Fort")
    return ScheduleEntry(departure, arrival, places[0], places[1])


def _bus(vehicle_number: str, lat: float, *entries: ScheduleEntry) -> Bus:
    route = [GeoPoint(lat, 79.85), GeoPoint(lat, 79.88), GeoPoint(lat, 79.91), GeoPoint(lat, 79.94)]
    schedules = (DaySchedule(day="Monday", entries=entries),) if entries else ()
    return Bus(vehicle_number=vehicle_number, route=Route(polyline=encode_polyline(route)), schedules=schedules)


@pytest.fixture
def buses() -> list[Bus]:
    return [
        _bus("NB-FAR", 6.95, _entry("07:40", "10:40")),
        _bus("NB-NEAR", 6.90, _entry("07:00", "10:00"), _entry("07:45", "10:45", forward=False), _entry("08:00", "11:00")),
    ]


def test_search_schedule_matches_bus_and_trip(buses):
    selection = schedule_service.search_schedule(START, END, buses=buses, now=MONDAY_0730)

    assert selection.status == schedule_service.STATUS_MATCHED
    assert selection.vehicle_number == "NB-NEAR"
    assert (selection.reference_departure, selection.reference_arrival) == ("Fort", "Kandy")
    assert selection.trip.departure_time == "08:00"
    assert selection.metadata == {"candidates": 2, "day": "Monday"}


def test_search_schedule_reverse_direction(buses):
    selection = schedule_service.search_schedule(END, START, buses=buses, now=MONDAY_0730)

    assert selection.trip.departure_time == "07:45"


def test_search_schedule_without_buses():
    selection = schedule_service.search_schedule(START, END, buses=[], now=MONDAY_0730)

    assert selection.status == schedule_service.STATUS_NO_BUS
    assert selection.vehicle_number is None
    assert selection.trip is None


def test_search_schedule_without_reference_direction():
    selection = schedule_service.search_schedule(START, END, buses=[_bus("NB-EMPTY", 6.90)], now=MONDAY_0730)

    assert selection.status == schedule_service.STATUS_NO_REFERENCE
    assert selection.vehicle_number == "NB-EMPTY"


def test_search_schedule_without_upcoming_trip(buses):
    evening = datetime(2026, 10, 19, 21, 0, tzinfo=COLOMBO)

    selection = schedule_service.search_schedule(START, END, buses=buses, now=evening)

    assert selection.status == schedule_service.STATUS_NO_TRIP
    assert selection.vehicle_number == "NB-NEAR"
    assert selection.trip is None


def test_naive_time_is_read_in_service_timezone(buses, monkeypatch):
    monkeypatch.setattr(schedule_service.settings, "service_timezone", "Asia/Colombo")

    selection = schedule_service.search_schedule(START, END, buses=buses, now=datetime(2026, 10, 19, 7, 30))

    assert selection.evaluated_at.tzinfo == COLOMBO
    assert selection.trip.departure_time == "08:00"


def test_aware_time_is_converted_to_service_timezone(buses, monkeypatch):
    monkeypatch.setattr(schedule_service.settings, "service_timezone", "Asia/Colombo")
    # 02:00 UTC is 07:30 in Colombo
    utc_now = datetime(2026, 10, 19, 2, 0, tzinfo=timezone.utc)

    selection = schedule_service.search_schedule(START, END, buses=buses, now=utc_now)

    assert selection.evaluated_at.tzinfo == COLOMBO
    assert selection.evaluated_at == utc_now
    assert selection.trip.departure_time == "08:00"


def test_aware_time_near_midnight_uses_service_weekday(buses):
    # Sunday 19:00 UTC is already Monday 00:30 in Colombo
    selection = schedule_service.search_schedule(
        START, END, buses=buses, now=datetime(2026, 10, 18, 19, 0, tzinfo=timezone.utc)
    )

    assert selection.metadata["day"] == "Monday"
    assert selection.trip.departure_time == "07:00"


def test_search_schedule_defaults_to_cached_buses(buses, monkeypatch):
    monkeypatch.setattr(schedule_service, "load_buses", lambda: tuple(buses))

    selection = schedule_service.search_schedule(START, END, now=MONDAY_0730)

    assert selection.vehicle_number == "NB-NEAR"


def test_session_loads_bus_data_once(buses):
    calls = []

    def loader():
        calls.append(1)
        return buses

    session = ScheduleSession(loader=loader, clock=lambda: MONDAY_0730)
    session.set_references(START, END)
    session.set_references(END, START)

    assert len(calls) == 1
    assert session.selected_bus.vehicle_number == "NB-NEAR"
    assert session.selected_trip.departure_time == "07:45"

    session.refresh()
    assert len(calls) == 2
    assert session.selected_trip.departure_time == "07:45"


def test_session_keeps_last_found_schedule(buses):
    now = {"value": MONDAY_0730}
    session = ScheduleSession(loader=lambda: buses, clock=lambda: now["value"])

    session.set_references(START, END)
    assert session.schedule.departure_time == "08:00"

    now["value"] = datetime(2026, 10, 19, 21, 0, tzinfo=COLOMBO)
    session.set_references(START, END)

    assert session.selected_trip is None
    assert session.schedule.departure_time == "08:00"
