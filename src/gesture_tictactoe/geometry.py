"""Point and path geometry used by the shape classifier.

All coordinates are surface-local (pixels, origin top-left). Paths are
plain sequences of ``Point``; metrics are computed with numpy over an
(N, 2) array, the same way trajectory lengths are measured elsewhere.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np


@dataclass(frozen=True)
class Point:
    """A single pointer sample."""
    x: float
    y: float

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict) -> Point:
        return cls(x=float(data["x"]), y=float(data["y"]))

    @classmethod
    def coerce(cls, value) -> Point:
        """Accept a Point, an ``{"x", "y"}`` mapping or an ``(x, y)`` pair."""
        if isinstance(value, Point):
            return value
        if isinstance(value, dict):
            return cls.from_dict(value)
        x, y = value
        return cls(float(x), float(y))


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounds of a point set."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


def as_array(points: Sequence[Point]) -> np.ndarray:
    """Stack points into a float64 array of shape (N, 2)."""
    if not points:
        return np.zeros((0, 2), dtype=np.float64)
    return np.array([(p.x, p.y) for p in points], dtype=np.float64)


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(b.x - a.x, b.y - a.y)


def path_length(points: Sequence[Point]) -> float:
    """Sum of distances between consecutive points (0 for fewer than 2)."""
    pts = as_array(points)
    if len(pts) < 2:
        return 0.0
    return float(np.sum(np.linalg.norm(np.diff(pts, axis=0), axis=1)))


def bounding_box(points: Sequence[Point]) -> BoundingBox:
    """Bounding box over all points. Raises ValueError for an empty path."""
    pts = as_array(points)
    if len(pts) == 0:
        raise ValueError("bounding box of an empty path is undefined")
    mins = pts.min(axis=0)
    maxs = pts.max(axis=0)
    return BoundingBox(
        min_x=float(mins[0]),
        min_y=float(mins[1]),
        max_x=float(maxs[0]),
        max_y=float(maxs[1]),
    )


def aspect_ratio(width: float, height: float) -> Optional[float]:
    """``width / height``, or None when the ratio is undefined."""
    if height == 0 or not math.isfinite(height) or not math.isfinite(width):
        return None
    return width / height
