"""Domain models for buses, routes and schedules."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """A WGS84 coordinate in (lat, lng) order."""

    lat: float
    lng: float


@dataclass(frozen=True, slots=True)
class Route:
    """Route geometry owned by a bus, as an encoded polyline."""

    polyline: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ScheduleEntry:
    departure_time: str
    arrival_time: str
    departure_place: str
    arrival_place: str


@dataclass(frozen=True, slots=True)
class DaySchedule:
    """Trips for one weekday, ordered by departure time."""

    day: str
    entries: tuple[ScheduleEntry, ...] = ()


@dataclass(frozen=True, slots=True)
class Bus:
    """A vehicle with its route and weekly timetable."""

    vehicle_number: str
    route: Optional[Route] = None
    schedules: tuple[DaySchedule, ...] = ()


@dataclass(frozen=True, slots=True)
class ProjectionResult:
    distance: float
    index: int
    point: GeoPoint


@dataclass(slots=True)
class TripSelection:
    """Outcome of matching a passenger to a bus and trip."""

    status: str
    evaluated_at: datetime
    vehicle_number: Optional[str] = None
    bus: Optional[Bus] = None
    reference_departure: Optional[str] = None
    reference_arrival: Optional[str] = None
    trip: Optional[ScheduleEntry] = None
    metadata: dict = field(default_factory=dict)
