"""Edge case tests for numeric and ordering corner cases."""

import math

import numpy as np
import pytest

from gesture_tictactoe.classifier import RejectReason, ShapeClassifier
from gesture_tictactoe.engine import GameEngine
from gesture_tictactoe.game import Player
from gesture_tictactoe.geometry import Point


class TestNumericEdgeCases:
    """Degenerate paths must reject, never raise."""

    def test_nan_points(self):
        path = [Point(math.nan, math.nan)] * 6
        result = ShapeClassifier().classify(path, Player.O, 100.0)
        assert result.reason == RejectReason.INVALID_GEOMETRY

    def test_inf_points(self):
        path = [Point(0, 0), Point(math.inf, 5), Point(1, 1), Point(2, 2), Point(3, 3)]
        result = ShapeClassifier().classify(path, Player.X, 100.0)
        assert not result.accepted

    def test_all_same_point(self):
        path = [Point(50, 50)] * 10
        for player in Player:
            assert not ShapeClassifier().classify(path, player, 100.0).accepted

    def test_zero_cell(self):
        path = [Point(i, i) for i in range(10)]
        result = ShapeClassifier().classify(path, Player.X, 0.0)
        assert result.reason == RejectReason.INVALID_GEOMETRY

    def test_numpy_scalars_accepted(self):
        path = [Point(np.float32(x), np.float32(y)) for x, y in
                [(10, 10), (40, 10), (40, 40), (10, 40), (10, 10)]]
        assert ShapeClassifier().classify(path, Player.O, 100.0).accepted

    def test_very_large_coordinates(self):
        path = [Point(1e12 + i, 1e12 + i * 2) for i in range(10)]
        result = ShapeClassifier().classify(path, Player.X, 100.0)
        assert result.reason == RejectReason.TOO_NARROW


class TestOrderingEdgeCases:
    def test_extend_after_finish_ignored(self):
        engine = GameEngine()
        engine.start_gesture(0, Point(10, 10))
        engine.finish_gesture()
        assert engine.extend_gesture(Point(20, 20)) is False

    def test_double_finish(self):
        engine = GameEngine()
        engine.start_gesture(0, Point(10, 10))
        assert engine.finish_gesture() is not None
        assert engine.finish_gesture() is None
        assert engine.cancel_gesture() is None

    def test_tilt_during_gesture_keeps_capture(self):
        engine = GameEngine()
        engine.start_gesture(4, Point(150, 150))
        engine.submit_tilt(80)
        assert engine.capture.is_capturing
        assert engine.capture.path.player == Player.O

    def test_many_samples(self):
        engine = GameEngine()
        engine.start_gesture(4, Point(150, 150))
        for i in range(10000):
            engine.extend_gesture(Point(150 + 30 * math.cos(i / 100), 150 + 30 * math.sin(i / 100)))
        assert len(engine.capture.path) == 10001

    def test_rejection_never_changes_turn(self):
        engine = GameEngine()
        for _ in range(5):
            engine.start_gesture(4, Point(150, 150))
            engine.finish_gesture()
        assert engine.game.current_player == Player.O
        assert engine.game.board == (None,) * 9

