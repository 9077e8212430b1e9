"""Session cache of bus records fetched from the bus data server."""

from __future__ import annotations

import functools
import logging
from typing import Iterable, Optional

from pydantic import ValidationError

from ..models.domain import Bus
from ..schemas.buses import BusModel
from ..services.buses.client import BusServerClient

logger = logging.getLogger(__name__)


def parse_buses(records: Iterable[dict]) -> tuple[Bus, ...]:
    """Convert raw bus documents, skipping invalid rows and repeated vehicle numbers."""
    buses: list[Bus] = []
    seen: set[str] = set()
    for row in records:
        try:
            bus = BusModel.model_validate(row).to_domain()
        except ValidationError as e:
            logger.warning(f"Skipping invalid bus record: {e}")
            continue
        if bus.vehicle_number in seen:
            logger.warning(f"Skipping duplicate bus record for vehicle {bus.vehicle_number}")
            continue
        seen.add(bus.vehicle_number)
        buses.append(bus)
    return tuple(buses)


@functools.lru_cache(maxsize=1)
def load_buses() -> tuple[Bus, ...]:
    """Load buses once; later calls reuse the result until ``refresh_buses``."""
    records = BusServerClient().list_buses()
    buses = parse_buses(records)
    logger.info(f"Loaded {len(buses)} buses into the session cache")
    return buses


def refresh_buses() -> tuple[Bus, ...]:
    load_buses.cache_clear()
    return load_buses()


def get_bus(vehicle_number: str) -> Optional[Bus]:
    return next((bus for bus in load_buses() if bus.vehicle_number == vehicle_number), None)
