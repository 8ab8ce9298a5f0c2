"""Exclusive capture of one in-progress gesture path.

The capture is a two-state machine, ``IDLE`` and ``CAPTURING``. A
``GesturePath`` exists only while capturing; a second ``start`` is refused
and leaves the open path untouched, so overlapping touches cannot corrupt
it. ``cancel`` goes through the same close path as ``finish``.

Usage:
    capture = GestureCapture(game)
    started = capture.start(4, Point(150, 150))
    capture.extend(Point(160, 140))   # once per input sample
    path = capture.finish()
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from gesture_tictactoe.game import GameState, Player
from gesture_tictactoe.geometry import Point
from gesture_tictactoe.layout import CELL_COUNT

logger = logging.getLogger("gesture_tictactoe.capture")


class CaptureState(Enum):
    IDLE = "idle"
    CAPTURING = "capturing"


class CaptureRejection(Enum):
    GAME_INACTIVE = "game_inactive"
    CELL_OCCUPIED = "cell_occupied"
    CELL_OUT_OF_RANGE = "cell_out_of_range"
    ALREADY_CAPTURING = "already_capturing"
    OFF_BOARD = "off_board"


@dataclass
class GesturePath:
    """Points drawn for one gesture, bound to the cell it started in."""
    cell_index: int
    player: Player
    points: list[Point] = field(default_factory=list)
    started_at: float = 0.0

    def __len__(self) -> int:
        return len(self.points)


@dataclass(frozen=True)
class CaptureHandle:
    """Identifies an open capture."""
    capture_id: int
    cell_index: int
    player: Player


@dataclass(frozen=True)
class StartResult:
    """Result of ``GestureCapture.start``: a handle or a rejection."""
    handle: Optional[CaptureHandle] = None
    rejection: Optional[CaptureRejection] = None

    @property
    def ok(self) -> bool:
        return self.handle is not None


class GestureCapture:
    """Tracks at most one open gesture path against a game.

    The capture only reads the game (status, cell occupancy, current
    player); it never mutates it.
    """

    def __init__(self, game: GameState):
        self._game = game
        self._path: Optional[GesturePath] = None
        self._handle: Optional[CaptureHandle] = None
        self._next_id = 1

    @property
    def state(self) -> CaptureState:
        return CaptureState.CAPTURING if self._path is not None else CaptureState.IDLE

    @property
    def is_capturing(self) -> bool:
        return self._path is not None

    @property
    def handle(self) -> Optional[CaptureHandle]:
        return self._handle

    @property
    def path(self) -> Optional[GesturePath]:
        """The open path, or None when idle."""
        return self._path

    def start(self, cell_index: int, point: Point, timestamp: Optional[float] = None) -> StartResult:
        """Open a new path in ``cell_index`` seeded with ``point``."""
        rejection = self._check_start(cell_index)
        if rejection is not None:
            logger.debug("Capture start in cell %s refused: %s", cell_index, rejection.value)
            return StartResult(rejection=rejection)

        player = self._game.current_player
        self._path = GesturePath(
            cell_index=cell_index,
            player=player,
            points=[point],
            started_at=timestamp if timestamp is not None else time.monotonic(),
        )
        self._handle = CaptureHandle(self._next_id, cell_index, player)
        self._next_id += 1
        return StartResult(handle=self._handle)

    def _check_start(self, cell_index: int) -> Optional[CaptureRejection]:
        if self._path is not None:
            return CaptureRejection.ALREADY_CAPTURING
        if not self._game.is_active:
            return CaptureRejection.GAME_INACTIVE
        if not 0 <= cell_index < CELL_COUNT:
            return CaptureRejection.CELL_OUT_OF_RANGE
        if not self._game.is_empty(cell_index):
            return CaptureRejection.CELL_OCCUPIED
        return None

    def extend(self, point: Point) -> bool:
        """Append a sample to the open path. Returns False when idle."""
        if self._path is None:
            return False
        self._path.points.append(point)
        return True

    def finish(self) -> Optional[GesturePath]:
        """Close the capture and hand over its path (None when idle)."""
        path = self._path
        self._path = None
        self._handle = None
        return path

    def cancel(self) -> Optional[GesturePath]:
        return self.finish()
