"""Route group exports."""

from . import buses, health, schedule

__all__ = ["buses", "health", "schedule"]
