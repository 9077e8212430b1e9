"""Bus data endpoints backed by the bus data server."""

from __future__ import annotations

import logging
from typing import List

import httpx
from fastapi import APIRouter, HTTPException, status

from ...data import bus_repository
from ...schemas.buses import BusModel
from ...services.buses.client import BusServerClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/buses", tags=["buses"])


def _upstream_error(action: str, exc: Exception) -> HTTPException:
    logger.exception(f"Error {action}: {exc}")
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"Failed {action}: {str(exc)}",
    )


@router.get("", response_model=List[BusModel], status_code=status.HTTP_200_OK)
def list_buses() -> List[BusModel]:
    try:
        buses = bus_repository.load_buses()
    except (httpx.HTTPError, ConnectionError, ValueError) as exc:
        raise _upstream_error("loading buses", exc) from exc
    return [BusModel.from_domain(bus) for bus in buses]


@router.post("/refresh", status_code=status.HTTP_200_OK)
def refresh_buses() -> dict:
    """Drop the cached bus collection and fetch it again."""
    try:
        buses = bus_repository.refresh_buses()
    except (httpx.HTTPError, ConnectionError, ValueError) as exc:
        raise _upstream_error("refreshing buses", exc) from exc
    return {"status": "success", "buses": len(buses)}


@router.get("/{vehicle_number}", response_model=BusModel, status_code=status.HTTP_200_OK)
def get_bus(vehicle_number: str) -> BusModel:
    try:
        bus = bus_repository.get_bus(vehicle_number)
    except (httpx.HTTPError, ConnectionError, ValueError) as exc:
        raise _upstream_error("loading buses", exc) from exc
    if bus is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Bus {vehicle_number} not found",
        )
    return BusModel.from_domain(bus)


@router.post("", status_code=status.HTTP_201_CREATED)
def add_bus(payload: BusModel) -> dict:
    """Forward a new bus record to the bus data server."""
    try:
        BusServerClient().add_bus(payload.model_dump())
    except (httpx.HTTPError, ConnectionError, ValueError) as exc:
        raise _upstream_error("adding bus", exc) from exc
    return {"success": True, "vehicleNumber": payload.vehicleNumber}
