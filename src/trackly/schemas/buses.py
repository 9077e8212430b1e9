"""Bus data wire schemas, shaped like the bus server's JSON documents."""

from __future__ import annotations

import re
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..models.domain import Bus, DaySchedule, Route, ScheduleEntry

_CLOCK_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")


class RouteModel(BaseModel):
    polyline: Optional[str] = None


class ScheduleEntryModel(BaseModel):
    departureTime: str
    arrivalTime: str
    departurePlace: str
    arrivalPlace: str

    @field_validator("departureTime", "arrivalTime")
    @classmethod
    def _validate_clock(cls, value: str) -> str:
        value = value.strip()
        if not _CLOCK_PATTERN.match(value):
            raise ValueError(f"Expected HH:MM time, got '{value}'")
        return value

    def to_domain(self) -> ScheduleEntry:
        return ScheduleEntry(
            departure_time=self.departureTime,
            arrival_time=self.arrivalTime,
            departure_place=self.departurePlace,
            arrival_place=self.arrivalPlace,
        )


class DayScheduleModel(BaseModel):
    day: str
    entries: List[ScheduleEntryModel] = Field(default_factory=list)

    def to_domain(self) -> DaySchedule:
        return DaySchedule(day=self.day, entries=tuple(entry.to_domain() for entry in self.entries))


class BusModel(BaseModel):
    vehicleNumber: str
    route: Optional[RouteModel] = None
    schedules: List[DayScheduleModel] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_days(self) -> "BusModel":
        seen: set[str] = set()
        for schedule in self.schedules:
            if schedule.day in seen:
                raise ValueError(f"Duplicate schedule for day '{schedule.day}' on bus {self.vehicleNumber}")
            seen.add(schedule.day)
        return self

    def to_domain(self) -> Bus:
        return Bus(
            vehicle_number=self.vehicleNumber,
            route=Route(polyline=self.route.polyline) if self.route else None,
            schedules=tuple(schedule.to_domain() for schedule in self.schedules),
        )

    @classmethod
    def from_domain(cls, bus: Bus) -> "BusModel":
        return cls(
            vehicleNumber=bus.vehicle_number,
            route=RouteModel(polyline=bus.route.polyline) if bus.route else None,
            schedules=[
                DayScheduleModel(
                    day=schedule.day,
                    entries=[
                        ScheduleEntryModel(
                            departureTime=entry.departure_time,
                            arrivalTime=entry.arrival_time,
                            departurePlace=entry.departure_place,
                            arrivalPlace=entry.arrival_place,
                        )
                        for entry in schedule.entries
                    ],
                )
                for schedule in bus.schedules
            ],
        )
