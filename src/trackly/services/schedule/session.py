"""Per-passenger session state around the schedule search pipeline."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ...models.domain import Bus, GeoPoint, ScheduleEntry, TripSelection
from .service import current_time, search_schedule

logger = logging.getLogger(__name__)


class ScheduleSession:
    """Holds the bus data and the latest selection for one passenger.

    Bus data is fetched once through ``loader`` and kept until ``refresh``.
    ``schedule`` keeps the last trip that was found, while ``selected_trip``
    always reflects the latest search.
    """

    def __init__(
        self,
        loader: Callable[[], Sequence[Bus]],
        clock: Callable[[], datetime] = current_time,
    ) -> None:
        self._loader = loader
        self._clock = clock
        self.bus_data: Optional[tuple[Bus, ...]] = None
        self.start_position: Optional[GeoPoint] = None
        self.end_position: Optional[GeoPoint] = None
        self.selection: Optional[TripSelection] = None
        self.schedule: Optional[ScheduleEntry] = None

    @property
    def selected_bus(self) -> Optional[Bus]:
        return self.selection.bus if self.selection else None

    @property
    def selected_trip(self) -> Optional[ScheduleEntry]:
        return self.selection.trip if self.selection else None

    def refresh(self) -> tuple[Bus, ...]:
        self.bus_data = tuple(self._loader())
        logger.info(f"Session loaded {len(self.bus_data)} buses")
        if self.start_position and self.end_position:
            self._search()
        return self.bus_data

    def set_references(self, start: GeoPoint, end: GeoPoint) -> Optional[TripSelection]:
        self.start_position = start
        self.end_position = end
        if self.bus_data is None:
            self.refresh()
            return self.selection
        return self._search()

    def _search(self) -> TripSelection:
        self.selection = search_schedule(
            self.start_position,
            self.end_position,
            buses=self.bus_data,
            now=self._clock(),
        )
        if self.selection.trip is not None:
            self.schedule = self.selection.trip
        return self.selection
