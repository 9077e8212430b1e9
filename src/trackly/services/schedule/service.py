"""Schedule search orchestration: fetch, select, resolve."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

from ...config import settings
from ...data.bus_repository import load_buses
from ...models.domain import Bus, GeoPoint, TripSelection
from .selection import select_nearest_bus
from .trips import reference_endpoints, resolve_trip, weekday_name

logger = logging.getLogger(__name__)

STATUS_MATCHED = "matched"
STATUS_NO_BUS = "no_bus"
STATUS_NO_REFERENCE = "no_reference"
STATUS_NO_TRIP = "no_trip"


def current_time() -> datetime:
    return datetime.now(ZoneInfo(settings.service_timezone))


def _localize(now: datetime) -> datetime:
    if now.tzinfo is None:
        return now.replace(tzinfo=ZoneInfo(settings.service_timezone))
    return now.astimezone(ZoneInfo(settings.service_timezone))


def search_schedule(
    start: GeoPoint,
    end: GeoPoint,
    *,
    buses: Optional[Sequence[Bus]] = None,
    now: Optional[datetime] = None,
) -> TripSelection:
    """Match the passenger to the nearest bus and its next trip in their direction.

    ``buses`` defaults to the cached bus collection and ``now`` to the
    current time in the service timezone.
    """
    candidates = load_buses() if buses is None else buses
    moment = _localize(now) if now is not None else current_time()
    metadata = {"candidates": len(candidates), "day": weekday_name(moment)}

    vehicle_number = select_nearest_bus(start, end, candidates)
    bus = next((item for item in candidates if item.vehicle_number == vehicle_number), None)
    if bus is None:
        return TripSelection(status=STATUS_NO_BUS, evaluated_at=moment, metadata=metadata)

    endpoints = reference_endpoints(bus)
    if endpoints is None:
        return TripSelection(
            status=STATUS_NO_REFERENCE,
            evaluated_at=moment,
            vehicle_number=vehicle_number,
            bus=bus,
            metadata=metadata,
        )

    reference_departure, reference_arrival = endpoints
    trip = resolve_trip(bus, start, end, reference_departure, reference_arrival, moment)
    logger.info(
        f"Schedule search matched vehicle {vehicle_number}; "
        f"trip {'found' if trip else 'not found'} for {metadata['day']} {moment:%H:%M}"
    )
    return TripSelection(
        status=STATUS_MATCHED if trip else STATUS_NO_TRIP,
        evaluated_at=moment,
        vehicle_number=vehicle_number,
        bus=bus,
        reference_departure=reference_departure,
        reference_arrival=reference_arrival,
        trip=trip,
        metadata=metadata,
    )
