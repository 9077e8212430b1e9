"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...services.buses.client import check_health

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/bus-server", status_code=status.HTTP_200_OK)
def health_bus_server() -> dict:
    """Check that the bus data server is reachable."""
    return {"service": "bus-server", "healthy": check_health()}
