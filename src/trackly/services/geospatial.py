"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Optional, Sequence

from shapely.geometry import LineString, Point

from ..models.domain import GeoPoint, ProjectionResult

EARTH_RADIUS_KM = 6371.0


class InvalidLineError(ValueError):
    """Raised when a line operation receives fewer than two points."""


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def haversine_m(a: GeoPoint, b: GeoPoint) -> float:
    return haversine_km(a.lat, a.lng, b.lat, b.lng) * 1000.0


def _segment_foot(
    start: tuple[float, float],
    stop: tuple[float, float],
    target: Point,
    scale: float,
) -> Optional[GeoPoint]:
    """Perpendicular foot of ``target`` on the segment, if it lies strictly inside it.

    Coordinates are (lng, lat). Longitudes are scaled by ``cos(lat)`` so the
    planar projection is locally equidistant.
    """
    segment = LineString([(start[0] * scale, start[1]), (stop[0] * scale, stop[1])])
    if segment.length == 0:
        return None
    fraction = segment.project(Point(target.x * scale, target.y), normalized=True)
    if fraction <= 0.0 or fraction >= 1.0:
        return None
    foot = segment.interpolate(fraction, normalized=True)
    return GeoPoint(lat=foot.y, lng=foot.x / scale)


def project_point_onto_line(line: Sequence[GeoPoint], point: GeoPoint) -> ProjectionResult:
    """Find the point on ``line`` nearest to ``point``.

    Each segment contributes its start vertex (ordinal ``i``), its end vertex
    (ordinal ``i + 1``) and, when it falls inside the segment, the
    perpendicular foot (ordinal ``i``). Only a strictly smaller distance
    replaces the current best, so ties resolve to the earliest candidate.

    Returns:
        ProjectionResult with the distance in meters, the ordinal index along
        the line, and the nearest point itself.

    Raises:
        InvalidLineError: if ``line`` has fewer than two points.
    """
    if len(line) < 2:
        raise InvalidLineError(f"A line needs at least 2 points, got {len(line)}.")

    # shapely expects (x, y) == (lng, lat)
    route_line = LineString([(p.lng, p.lat) for p in line])
    target = Point(point.lng, point.lat)
    scale = max(math.cos(math.radians(point.lat)), 1e-12)

    coords = list(route_line.coords)
    first = GeoPoint(lat=coords[0][1], lng=coords[0][0])
    best = ProjectionResult(distance=haversine_m(point, first), index=0, point=first)
    for i, (start, stop) in enumerate(zip(coords[:-1], coords[1:])):
        candidates = [
            (GeoPoint(lat=start[1], lng=start[0]), i),
            (GeoPoint(lat=stop[1], lng=stop[0]), i + 1),
        ]
        foot = _segment_foot(start, stop, target, scale)
        if foot is not None:
            candidates.append((foot, i))

        for candidate, ordinal in candidates:
            distance = haversine_m(point, candidate)
            if distance < best.distance:
                best = ProjectionResult(distance=distance, index=ordinal, point=candidate)

    return best
