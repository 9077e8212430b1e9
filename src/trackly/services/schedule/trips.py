"""Travel direction checks and next-trip resolution for a selected bus."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ...models.domain import Bus, DaySchedule, GeoPoint, ScheduleEntry
from ..geospatial import project_point_onto_line
from ..polyline import decode_polyline

logger = logging.getLogger(__name__)

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def weekday_name(moment: datetime) -> str:
    return WEEKDAYS[moment.weekday()]


def reference_endpoints(bus: Bus) -> Optional[tuple[str, str]]:
    """Departure and arrival places that define the bus's forward direction.

    Taken from the first entry of the bus's first schedule.
    """
    if not bus.schedules or not bus.schedules[0].entries:
        logger.error(f"Bus {bus.vehicle_number} has no schedule entries to derive its direction from")
        return None
    first = bus.schedules[0].entries[0]
    return first.departure_place, first.arrival_place


def is_bus_going_forward(
    departure_place: str,
    arrival_place: str,
    reference_departure: str,
    reference_arrival: str,
) -> bool:
    return departure_place == reference_departure and arrival_place == reference_arrival


def is_passenger_going_forward(bus: Bus, start: GeoPoint, end: GeoPoint) -> bool:
    """True when the passenger's start lies earlier along the route than their end.

    Raises:
        DecodeError: if the route polyline is malformed.
        InvalidLineError: if the route has fewer than two points.
        ValueError: if the bus has no route.
    """
    if bus.route is None or not bus.route.polyline:
        raise ValueError(f"Bus {bus.vehicle_number} has no route polyline")
    line = decode_polyline(bus.route.polyline)
    start_index = project_point_onto_line(line, start).index
    end_index = project_point_onto_line(line, end).index
    return start_index < end_index


def find_today_schedule(bus: Bus, now: datetime) -> Optional[DaySchedule]:
    today = weekday_name(now)
    schedule = next((item for item in bus.schedules if item.day == today), None)
    if schedule is None or not schedule.entries:
        logger.error(f"No schedule entries available for {today} on bus {bus.vehicle_number}")
        return None
    return schedule


def departure_on(now: datetime, clock: str) -> datetime:
    """``now``'s calendar day at the given HH:MM, in ``now``'s timezone."""
    hours, minutes = clock.strip().split(":")
    return now.replace(hour=int(hours), minute=int(minutes), second=0, microsecond=0)


def resolve_trip(
    bus: Bus,
    start: GeoPoint,
    end: GeoPoint,
    reference_departure: str,
    reference_arrival: str,
    now: datetime,
) -> Optional[ScheduleEntry]:
    """Pick today's first trip that departs after ``now`` in the passenger's direction.

    A trip qualifies when its forward/reverse direction equals the
    passenger's. Only the current calendar day is searched.
    """
    schedule = find_today_schedule(bus, now)
    if schedule is None:
        return None

    try:
        passenger_forward = is_passenger_going_forward(bus, start, end)
    except ValueError as exc:  # DecodeError and InvalidLineError included
        logger.error(f"Cannot determine passenger direction on bus {bus.vehicle_number}: {exc}")
        return None

    for entry in schedule.entries:
        bus_forward = is_bus_going_forward(
            entry.departure_place, entry.arrival_place, reference_departure, reference_arrival
        )
        if bus_forward != passenger_forward:
            continue
        try:
            departure = departure_on(now, entry.departure_time)
        except ValueError as exc:
            logger.warning(f"Skipping entry with invalid departure time '{entry.departure_time}': {exc}")
            continue
        if departure > now:
            return entry

    logger.error(f"No upcoming trips found for bus {bus.vehicle_number} in the correct direction")
    return None
