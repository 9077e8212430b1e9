"""Schedule search request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .buses import ScheduleEntryModel


class GeoPointModel(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class ScheduleSearchRequest(BaseModel):
    start: GeoPointModel
    end: GeoPointModel
    now: Optional[datetime] = Field(
        default=None,
        description="Evaluation time. Defaults to the current time in the service timezone.",
    )


class ScheduleSearchResponse(BaseModel):
    status: str
    evaluatedAt: datetime
    vehicleNumber: Optional[str] = None
    referenceDeparture: Optional[str] = None
    referenceArrival: Optional[str] = None
    trip: Optional[ScheduleEntryModel] = None
    departureAt: Optional[datetime] = None
    arrivalAt: Optional[datetime] = None
    departureDisplay: Optional[str] = None
    arrivalDisplay: Optional[str] = None
