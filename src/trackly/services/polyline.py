"""Encoded polyline codec (Google polyline algorithm, precision 1e-5)."""

from __future__ import annotations

import math
from typing import Iterable

from ..models.domain import GeoPoint

PRECISION = 1e5
# Every encoded character sits in the printable range '?' (63) .. '~' (126).
_MIN_CHAR = 63
_MAX_CHAR = 126


class DecodeError(ValueError):
    """Raised when an encoded polyline string is malformed."""


def _read_value(encoded: str, index: int) -> tuple[int, int]:
    """Read one zigzag-encoded value starting at ``index``.

    Returns the signed delta and the index just past it.
    """
    shift = 0
    result = 0
    while True:
        if index >= len(encoded):
            raise DecodeError(f"Polyline terminated prematurely at position {index}.")
        char = encoded[index]
        code = ord(char)
        if code < _MIN_CHAR or code > _MAX_CHAR:
            raise DecodeError(f"Invalid polyline character {char!r} at position {index}.")
        b = code - _MIN_CHAR
        index += 1
        result |= (b & 0x1F) << shift
        shift += 5
        if b < 0x20:
            break
    delta = ~(result >> 1) if (result & 1) else (result >> 1)
    return delta, index


def decode_polyline(encoded: str) -> list[GeoPoint]:
    """Decode a polyline string into GeoPoints in route order.

    Raises:
        DecodeError: if the string is not a well-formed polyline.
    """
    if not isinstance(encoded, str):
        raise DecodeError(f"Polyline must be a string, got {type(encoded).__name__}.")

    points: list[GeoPoint] = []
    index = 0
    lat = 0
    lng = 0
    while index < len(encoded):
        dlat, index = _read_value(encoded, index)
        if index >= len(encoded):
            raise DecodeError("Polyline ends with a latitude that has no longitude.")
        dlng, index = _read_value(encoded, index)
        lat += dlat
        lng += dlng
        points.append(GeoPoint(lat=lat / PRECISION, lng=lng / PRECISION))
    return points


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _encode_value(value: int) -> str:
    value = ~(value << 1) if value < 0 else (value << 1)
    chunks: list[str] = []
    while value >= 0x20:
        chunks.append(chr((0x20 | (value & 0x1F)) + _MIN_CHAR))
        value >>= 5
    chunks.append(chr(value + _MIN_CHAR))
    return "".join(chunks)


def encode_polyline(points: Iterable[GeoPoint]) -> str:
    """Encode GeoPoints into a polyline string."""
    parts: list[str] = []
    prev_lat = 0
    prev_lng = 0
    for point in points:
        lat = _round_half_away(point.lat * PRECISION)
        lng = _round_half_away(point.lng * PRECISION)
        parts.append(_encode_value(lat - prev_lat))
        parts.append(_encode_value(lng - prev_lng))
        prev_lat, prev_lng = lat, lng
    return "".join(parts)
