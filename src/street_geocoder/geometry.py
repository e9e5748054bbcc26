from __future__ import annotations

import math
import struct
from typing import Iterable, List, Sequence

from .components import Point
from .exceptions import DegenerateGeometry, MalformedGeometry

_SCALE = 1_000_000
_PAIR_SIZE = 8


def decode_geometry(blob: bytes) -> List[Point]:
    """Unpack little-endian int32 micro-degree pairs into ``(lon, lat)`` points."""
    if len(blob) % _PAIR_SIZE:
        raise MalformedGeometry(len(blob))
    count = len(blob) // 4
    coords = struct.unpack(f"<{count}i", blob)
    return [
        Point(coords[i] / _SCALE, coords[i + 1] / _SCALE)
        for i in range(0, count, 2)
    ]


def encode_geometry(points: Iterable[Sequence[float]]) -> bytes:
    values: List[int] = []
    for lon, lat in points:
        values.append(round(lon * _SCALE))
        values.append(round(lat * _SCALE))
    return struct.pack(f"<{len(values)}i", *values)


def scale_lon(lat1: float, lat2: float) -> float:
    """Cosine of the mean latitude, used to shrink longitude deltas."""
    return math.cos(math.radians((lat1 + lat2) / 2))


def planar_distance(a: Point, b: Point) -> float:
    dx = (b.lon - a.lon) * scale_lon(a.lat, b.lat)
    dy = b.lat - a.lat
    return math.sqrt(dx ** 2 + dy ** 2)


def point_at(points: Sequence[Point], fraction: float) -> Point:
    """Return the point *fraction* of the way along the polyline.

    Endpoints are returned untouched at exactly 0.0 and 1.0.
    """
    if not points:
        raise DegenerateGeometry(0, fraction)
    if fraction == 0.0:
        return points[0]
    if fraction == 1.0:
        return points[-1]
    if len(points) < 2:
        raise DegenerateGeometry(len(points), fraction)

    steps = [planar_distance(points[n - 1], points[n]) for n in range(1, len(points))]
    target = sum(steps) * fraction

    for n, step in enumerate(steps, start=1):
        if step < target:
            target -= step
            continue
        start, end = points[n - 1], points[n]
        ratio = target / step if step else 0.0
        scale = scale_lon(end.lat, start.lat)
        dx = (end.lon - start.lon) * ratio * scale
        dy = (end.lat - start.lat) * ratio
        return Point(round(start.lon + dx, 6), round(start.lat + dy, 6))

    # accumulated rounding can leave target just past the final step
    return points[-1]
