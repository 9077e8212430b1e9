"""Nearest-route selection across candidate buses."""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

from ...models.domain import Bus, GeoPoint
from ..geospatial import InvalidLineError, project_point_onto_line
from ..polyline import DecodeError, decode_polyline

logger = logging.getLogger(__name__)


def select_nearest_bus(start: GeoPoint, end: GeoPoint, candidates: Sequence[Bus]) -> Optional[str]:
    """Return the vehicle number of the bus whose route passes closest to the passenger.

    Candidates are scanned once, in the given order. The start and end
    distances of every bus are compared against one shared running minimum,
    and only a strictly smaller distance takes over, so the first candidate
    reaching a given minimum keeps it.
    """
    nearest_bus: Optional[str] = None
    min_distance = math.inf

    for bus in candidates:
        if bus.route is None or not bus.route.polyline:
            logger.warning(f"Bus route or polyline is missing for vehicle: {bus.vehicle_number}")
            continue

        try:
            line = decode_polyline(bus.route.polyline)
            distance_start = project_point_onto_line(line, start).distance
            distance_end = project_point_onto_line(line, end).distance
        except (DecodeError, InvalidLineError) as exc:
            logger.warning(f"Skipping vehicle {bus.vehicle_number}: unusable route ({exc})")
            continue

        if distance_start < min_distance:
            min_distance = distance_start
            nearest_bus = bus.vehicle_number

        if distance_end < min_distance:
            min_distance = distance_end
            nearest_bus = bus.vehicle_number

    if nearest_bus is None:
        logger.error("Could not find a nearest point on any bus route")
    return nearest_bus
