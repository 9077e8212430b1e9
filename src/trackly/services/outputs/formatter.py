"""Utilities to turn trip selections into display-ready API payloads."""

from __future__ import annotations

from datetime import date, datetime, tzinfo
from zoneinfo import ZoneInfo

from ...models.domain import ScheduleEntry, TripSelection
from ...schemas.buses import ScheduleEntryModel
from ...schemas.schedule import ScheduleSearchResponse


def _at(on_day: date, clock: str, tz: tzinfo) -> datetime:
    hours, minutes = clock.split(":")
    return datetime(on_day.year, on_day.month, on_day.day, int(hours), int(minutes), tzinfo=tz)


def trip_timestamps(trip: ScheduleEntry, on_day: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """Departure and arrival of ``trip`` on ``on_day`` as aware datetimes."""
    return _at(on_day, trip.departure_time, tz), _at(on_day, trip.arrival_time, tz)


def format_clock(moment: datetime, display_tz: tzinfo) -> str:
    """Render e.g. ``07:30 AM`` in the display timezone."""
    return moment.astimezone(display_tz).strftime("%I:%M %p")


def selection_to_response(selection: TripSelection, display_timezone: str) -> ScheduleSearchResponse:
    response = ScheduleSearchResponse(
        status=selection.status,
        evaluatedAt=selection.evaluated_at,
        vehicleNumber=selection.vehicle_number,
        referenceDeparture=selection.reference_departure,
        referenceArrival=selection.reference_arrival,
    )
    if selection.trip is None:
        return response

    trip = selection.trip
    departure_at, arrival_at = trip_timestamps(trip, selection.evaluated_at.date(), selection.evaluated_at.tzinfo)
    display_tz = ZoneInfo(display_timezone)
    response.trip = ScheduleEntryModel(
        departureTime=trip.departure_time,
        arrivalTime=trip.arrival_time,
        departurePlace=trip.departure_place,
        arrivalPlace=trip.arrival_place,
    )
    response.departureAt = departure_at
    response.arrivalAt = arrival_at
    response.departureDisplay = format_clock(departure_at, display_tz)
    response.arrivalDisplay = format_clock(arrival_at, display_tz)
    return response
