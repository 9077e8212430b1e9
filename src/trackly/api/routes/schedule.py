"""Schedule search endpoints."""

from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, HTTPException, status

from ...config import settings
from ...models.domain import GeoPoint
from ...schemas.schedule import ScheduleSearchRequest, ScheduleSearchResponse
from ...services.outputs.formatter import selection_to_response
from ...services.schedule.service import search_schedule

router = APIRouter(prefix="/schedule", tags=["schedule"])


@router.post("/search", response_model=ScheduleSearchResponse, status_code=status.HTTP_200_OK)
def search(payload: ScheduleSearchRequest) -> ScheduleSearchResponse:
    """Find the nearest bus and its next trip for the passenger's journey.

    A missing bus or trip is reported through ``status``, not as an error.
    """
    start = GeoPoint(lat=payload.start.lat, lng=payload.start.lng)
    end = GeoPoint(lat=payload.end.lat, lng=payload.end.lng)
    try:
        selection = search_schedule(start, end, now=payload.now)
    except (httpx.HTTPError, ConnectionError, ValueError) as exc:
        # ValueError here means the bus server is unconfigured or sent a bad payload
        logging.exception(f"Error loading buses for schedule search: {exc}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to load bus data: {str(exc)}",
        ) from exc
    return selection_to_response(selection, settings.display_timezone)
