"""Nearest-route selection and trip resolution."""

from .selection import select_nearest_bus
from .service import search_schedule
from .session import ScheduleSession
from .trips import is_bus_going_forward, is_passenger_going_forward, resolve_trip

__all__ = [
    "select_nearest_bus",
    "search_schedule",
    "ScheduleSession",
    "is_bus_going_forward",
    "is_passenger_going_forward",
    "resolve_trip",
]
