"""Tolerance-based point comparison and planar distance helpers."""

from __future__ import annotations

import math
from typing import Any, Tuple

from src.schema import InvalidInput

# Independent defaults: raw equality checks are strict, duplicate resolution is loose.
POINT_TOLERANCE = 0.2
DUPLICATE_TOLERANCE = 1.0


def coords(point: Any, min_len: int) -> Tuple[float, ...]:
    """Return the coordinates of a sequence or of an object with ``position``."""
    raw = getattr(point, "position", point)
    if raw is None:
        raise InvalidInput("point has no coordinates")
    try:
        values = tuple(raw)
    except TypeError:
        raise InvalidInput(f"point is not a coordinate sequence: {type(raw).__name__}") from None
    if len(values) < min_len:
        raise InvalidInput(f"expected at least {min_len} coordinates, got {len(values)}")
    return values


def points_near(a: Any, b: Any, tolerance: float = POINT_TOLERANCE) -> bool:
    ax, ay, az = coords(a, 3)[:3]
    bx, by, bz = coords(b, 3)[:3]
    return (
        abs(ax - bx) <= tolerance
        and abs(ay - by) <= tolerance
        and abs(az - bz) <= tolerance
    )


def distance_2d(p1: Any, p2: Any) -> float:
    x1, y1 = coords(p1, 2)[:2]
    x2, y2 = coords(p2, 2)[:2]
    return math.hypot(x1 - x2, y1 - y2)


def point_in_box(point: Any, min_x: float, min_y: float, max_x: float, max_y: float) -> bool:
    x, y = coords(point, 2)[:2]
    return min_x <= x <= max_x and min_y <= y <= max_y
