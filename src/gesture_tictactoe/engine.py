"""Game engine: input events → capture → classification → placement → notifications."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from gesture_tictactoe import messages
from gesture_tictactoe.canvas import BoardRenderer
from gesture_tictactoe.capture import (
    CaptureRejection,
    GestureCapture,
    GesturePath,
    StartResult,
)
from gesture_tictactoe.classifier import Classification, RejectReason, ShapeClassifier
from gesture_tictactoe.config import GameConfig
from gesture_tictactoe.game import GameSnapshot, GameState, PlacementResult
from gesture_tictactoe.geometry import Point
from gesture_tictactoe.listeners import GameListener, ListenerManager
from gesture_tictactoe.orientation import OrientationController, OrientationEvent

logger = logging.getLogger("gesture_tictactoe.engine")


@dataclass
class TurnOutcome:
    """What happened to one finished gesture."""
    path: GesturePath
    classification: Classification
    placement: Optional[PlacementResult] = None

    @property
    def accepted(self) -> bool:
        return self.placement is not None and self.placement.ok


@dataclass
class EngineStats:
    """Running counters since the engine was created."""
    gestures_started: int = 0
    gestures_rejected: int = 0
    placements: int = 0
    games_finished: int = 0
    orientation_toggles: int = 0


class GameEngine:
    """Single-device gesture tic-tac-toe.

    The input layer drives the engine with ``start_gesture`` /
    ``extend_gesture`` / ``finish_gesture`` / ``cancel_gesture``,
    ``submit_tilt`` and ``reset``. Presenters register a ``GameListener``
    and receive placements, status changes, rejections, orientation
    toggles, status text and draw commands.

    Everything runs synchronously on the caller's thread; events for a
    gesture must arrive in order (start, extends, one finish or cancel).
    """

    def __init__(self, config: Optional[GameConfig] = None):
        self.config = config or GameConfig()
        self.layout = self.config.layout

        self.game = GameState()
        self.capture = GestureCapture(self.game)
        self.classifier = ShapeClassifier(self.config.thresholds)
        self.orientation = OrientationController(
            lambda: self.game.current_player,
            flip_above=self.config.flip_above,
            unflip_below=self.config.unflip_below,
        )
        self.renderer = BoardRenderer(self.layout)
        self.listeners = ListenerManager()
        self._stats = EngineStats()

    def add_listener(self, listener: GameListener):
        self.listeners.register(listener)

    def remove_listener(self, name: str):
        self.listeners.unregister(name)

    # -- gestures --

    def start_gesture(self, cell_index: int, point: Point) -> StartResult:
        """Begin drawing in ``cell_index``. Refused while another gesture is
        open, on a filled cell, or once the game is over."""
        result = self.capture.start(cell_index, point)
        if not result.ok:
            self._reject(result.rejection.value)
            return result

        self._stats.gestures_started += 1
        player = result.handle.player
        self.listeners.dispatch("message", messages.NEXT_TURN.format(player=player.value))
        self.listeners.dispatch("draw", self.renderer.hint(cell_index, player))
        return result

    def start_gesture_at(self, point: Point) -> StartResult:
        """Begin drawing in whichever cell lies under ``point``."""
        cell_index = self.layout.cell_index_at(point)
        if cell_index is None:
            if self.capture.is_capturing:
                rejection = CaptureRejection.ALREADY_CAPTURING
            else:
                rejection = CaptureRejection.OFF_BOARD
            self._reject(rejection.value)
            return StartResult(rejection=rejection)
        return self.start_gesture(cell_index, point)

    def extend_gesture(self, point: Point) -> bool:
        """Add a sample to the open gesture. No-op when nothing is open."""
        path = self.capture.path
        if path is None:
            return False
        previous = path.points[-1]
        self.capture.extend(point)
        self.listeners.dispatch("draw", [self.renderer.ink(previous, point, path.player)])
        return True

    def finish_gesture(self) -> Optional[TurnOutcome]:
        """Close the open gesture, classify it and place on success."""
        path = self.capture.finish()
        if path is None:
            return None

        classification = self.classifier.classify(path.points, path.player, self.layout.cell_size)
        outcome = TurnOutcome(path=path, classification=classification)

        if not classification.accepted:
            logger.debug(
                "Gesture for %s in cell %d rejected: %s (%d points)",
                path.player.value, path.cell_index, classification.reason.value, len(path),
            )
            if classification.reason == RejectReason.TOO_SHORT:
                text = messages.LIFTED_EARLY
            else:
                text = messages.NOT_RECOGNISED
            self.listeners.dispatch("draw", self.renderer.redraw(self.game.snapshot()))
            self._reject(classification.reason.value, path)
            self.listeners.dispatch("message", text.format(player=path.player.value))
            return outcome

        placement = self.game.place(path.cell_index, path.player)
        outcome.placement = placement
        self.listeners.dispatch("draw", self.renderer.redraw(self.game.snapshot()))

        if not placement.ok:
            logger.warning(
                "Accepted gesture could not be placed in cell %d: %s",
                path.cell_index, placement.error.value,
            )
            self._reject(placement.error.value, path)
            return outcome

        self._stats.placements += 1
        logger.info("%s placed in cell %d → %s", path.player.value, path.cell_index, placement.status)
        if placement.status.is_terminal:
            self._stats.games_finished += 1

        self.listeners.dispatch("placement", path.cell_index, path.player)
        self.listeners.dispatch("status_changed", placement.status)
        self.listeners.dispatch("message", messages.status_message(placement.status))
        return outcome

    def cancel_gesture(self) -> Optional[TurnOutcome]:
        """Abort from the input layer (pointer left the surface, touch
        cancelled). Takes the same path as ``finish_gesture``."""
        return self.finish_gesture()

    def _reject(self, reason: str, path: Optional[GesturePath] = None):
        self._stats.gestures_rejected += 1
        player = path.player if path is not None else self.game.current_player
        self.listeners.dispatch("gesture_rejected", reason, player)

    # -- orientation --

    def submit_tilt(self, angle: float) -> Optional[OrientationEvent]:
        """Feed one tilt sample in degrees."""
        event = self.orientation.submit(angle)
        if event is None:
            return None

        self._stats.orientation_toggles += 1
        self.listeners.dispatch("orientation_toggled", event.is_flipped, event.player)
        self.listeners.dispatch("draw", [self.renderer.flip(event.is_flipped)])
        self.listeners.dispatch("message", event.message)
        return event

    # -- lifecycle --

    def reset(self):
        """Start a new game. An open gesture is discarded unclassified;
        the orientation flip is left as it is."""
        if self.capture.cancel() is not None:
            logger.debug("Discarded open gesture on reset")
        self.game.reset()
        logger.info("Game reset")

        self.listeners.dispatch("draw", self.renderer.redraw(self.game.snapshot()))
        self.listeners.dispatch("status_changed", self.game.status)
        self.listeners.dispatch("message", messages.start_message(self.game.current_player))

    def snapshot(self) -> GameSnapshot:
        return self.game.snapshot()

    @property
    def is_flipped(self) -> bool:
        return self.orientation.is_flipped

    @property
    def stats(self) -> EngineStats:
        return EngineStats(**vars(self._stats))
