"""Board layout: maps surface coordinates onto the 3×3 cell grid."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from gesture_tictactoe.geometry import Point

GRID_SIZE = 3
CELL_COUNT = GRID_SIZE * GRID_SIZE


def row_col(index: int) -> tuple[int, int]:
    """Row and column of a cell index (row-major)."""
    return index // GRID_SIZE, index % GRID_SIZE


@dataclass(frozen=True)
class BoardLayout:
    """Pixel geometry of the drawing surface.

    The classifier scales its thresholds by ``cell_size``, which is the
    surface width divided by three.
    """
    width: float = 300.0
    height: float = 300.0

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"board size must be positive, got {self.width}x{self.height}")

    @property
    def cell_size(self) -> float:
        return self.width / GRID_SIZE

    @property
    def cell_height(self) -> float:
        return self.height / GRID_SIZE

    def cell_index_at(self, point: Point) -> Optional[int]:
        """Index of the cell under ``point``, or None when off the board."""
        if not (0 <= point.x < self.width and 0 <= point.y < self.height):
            return None
        col = int(point.x // self.cell_size)
        row = int(point.y // self.cell_height)
        return row * GRID_SIZE + col

    def cell_center(self, index: int) -> Point:
        row, col = row_col(index)
        return Point(
            x=col * self.cell_size + self.cell_size / 2,
            y=row * self.cell_height + self.cell_height / 2,
        )

    def to_dict(self) -> dict:
        return {"width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: dict) -> BoardLayout:
        return cls(
            width=float(data.get("width", 300.0)),
            height=float(data.get("height", 300.0)),
        )
