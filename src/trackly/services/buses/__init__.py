"""Bus data server access."""

from .client import BusServerClient, check_health

__all__ = ["BusServerClient", "check_health"]
