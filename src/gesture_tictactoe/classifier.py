"""Shape classification of finished gesture paths.

Each symbol is accepted by a small set of geometric rules over the path's
bounding box and ink length, scaled by the size of one board cell. There is
no training step: the thresholds below are the whole model.

    O  closed loop: 0.5 < width/height < 2.0,
                    start-to-end gap < 0.5 * cell,
                    ink length > 0.8 * cell
    X  open cross:  width > 0.2 * cell, height > 0.2 * cell,
                    ink length > 0.2 * cell

Every comparison is strict, so a value sitting exactly on a threshold is
rejected. Paths shorter than ``MIN_POINTS`` samples are taps, not drawings.

Usage:
    classifier = ShapeClassifier()
    result = classifier.classify(path.points, Player.O, cell_dim=100.0)
    if result.accepted:
        ...
"""

from __future__ import annotations

import math
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional, Sequence

from gesture_tictactoe.game import Player
from gesture_tictactoe.geometry import (
    Point,
    aspect_ratio,
    bounding_box,
    distance,
    path_length,
)

MIN_POINTS = 5

O_MIN_ASPECT = 0.5
O_MAX_ASPECT = 2.0
O_MAX_CLOSURE = 0.5  # start-to-end gap, as a fraction of the cell
O_MIN_INK = 0.8

X_MIN_EXTENT = 0.2  # width and height, as a fraction of the cell
X_MIN_INK = 0.2


class RejectReason(Enum):
    TOO_SHORT = "too_short"
    BAD_ASPECT = "bad_aspect"
    NOT_CLOSED = "not_closed"
    TOO_LITTLE_INK = "too_little_ink"
    TOO_NARROW = "too_narrow"
    TOO_FLAT = "too_flat"
    INVALID_GEOMETRY = "invalid_geometry"


@dataclass(frozen=True)
class ShapeThresholds:
    """Tunable classification thresholds, all relative to the cell size."""
    min_points: int = MIN_POINTS
    o_min_aspect: float = O_MIN_ASPECT
    o_max_aspect: float = O_MAX_ASPECT
    o_max_closure: float = O_MAX_CLOSURE
    o_min_ink: float = O_MIN_INK
    x_min_extent: float = X_MIN_EXTENT
    x_min_ink: float = X_MIN_INK

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> ShapeThresholds:
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        for key, value in known.items():
            known[key] = int(value) if key == "min_points" else float(value)
        return cls(**known)


@dataclass(frozen=True)
class PathMetrics:
    """Derived measurements of a finished path."""
    point_count: int
    total_distance: float
    width: float
    height: float
    closure: float  # distance between first and last point
    aspect_ratio: Optional[float]

    @classmethod
    def from_points(cls, points: Sequence[Point]) -> PathMetrics:
        box = bounding_box(points)
        return cls(
            point_count=len(points),
            total_distance=path_length(points),
            width=box.width,
            height=box.height,
            closure=distance(points[0], points[-1]),
            aspect_ratio=aspect_ratio(box.width, box.height),
        )

    @property
    def is_finite(self) -> bool:
        values = (self.total_distance, self.width, self.height, self.closure)
        return all(math.isfinite(v) for v in values)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Classification:
    """Verdict for one path. ``metrics`` is None for paths too short to
    measure."""
    accepted: bool
    player: Player
    reason: Optional[RejectReason] = None
    metrics: Optional[PathMetrics] = None


class ShapeClassifier:
    """Decides whether a drawn path is an acceptable O or X.

    Stateless: the verdict depends only on the points, the player and the
    cell size.
    """

    def __init__(self, thresholds: Optional[ShapeThresholds] = None):
        self.thresholds = thresholds or ShapeThresholds()

    def classify(
        self, points: Sequence[Point], player: Player, cell_dim: float
    ) -> Classification:
        # An empty path has no bounding box, whatever min_points says.
        if len(points) < max(1, self.thresholds.min_points):
            return Classification(False, player, RejectReason.TOO_SHORT)

        if not (math.isfinite(cell_dim) and cell_dim > 0):
            return Classification(False, player, RejectReason.INVALID_GEOMETRY)

        metrics = PathMetrics.from_points(points)
        if not metrics.is_finite:
            return Classification(False, player, RejectReason.INVALID_GEOMETRY, metrics)

        if player == Player.O:
            reason = self._check_circle(metrics, cell_dim)
        else:
            reason = self._check_cross(metrics, cell_dim)

        return Classification(reason is None, player, reason, metrics)

    def _check_circle(self, m: PathMetrics, cell_dim: float) -> Optional[RejectReason]:
        t = self.thresholds
        # Zero height leaves the ratio undefined, which can never fall inside the band.
        if m.aspect_ratio is None or not (t.o_min_aspect < m.aspect_ratio < t.o_max_aspect):
            return RejectReason.BAD_ASPECT
        if not m.closure < cell_dim * t.o_max_closure:
            return RejectReason.NOT_CLOSED
        if not m.total_distance > cell_dim * t.o_min_ink:
            return RejectReason.TOO_LITTLE_INK
        return None

    def _check_cross(self, m: PathMetrics, cell_dim: float) -> Optional[RejectReason]:
        t = self.thresholds
        min_extent = cell_dim * t.x_min_extent
        if not m.width > min_extent:
            return RejectReason.TOO_NARROW
        if not m.height > min_extent:
            return RejectReason.TOO_FLAT
        if not m.total_distance > cell_dim * t.x_min_ink:
            return RejectReason.TOO_LITTLE_INK
        return None


def classify_path(
    points: Sequence[Point],
    player: Player,
    cell_dim: float,
    thresholds: Optional[ShapeThresholds] = None,
) -> bool:
    """Accept/reject shortcut around ``ShapeClassifier.classify``."""
    return ShapeClassifier(thresholds).classify(points, player, cell_dim).accepted
