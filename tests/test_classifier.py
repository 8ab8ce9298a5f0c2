"""Tests for O/X shape classification."""

import math

import pytest

from gesture_tictactoe.classifier import (
    MIN_POINTS,
    PathMetrics,
    RejectReason,
    ShapeClassifier,
    ShapeThresholds,
    classify_path,
)
from gesture_tictactoe.game import Player
from gesture_tictactoe.geometry import Point

CELL = 100.0


def pts(*coords):
    return [Point(x, y) for x, y in coords]


def make_circle(cx=50.0, cy=50.0, r=30.0, n=24):
    """Near-closed loop: last point stops one step short of the first."""
    return [
        Point(cx + r * math.cos(2 * math.pi * i / n), cy + r * math.sin(2 * math.pi * i / n))
        for i in range(n)
    ]


def make_cross_stroke():
    """Diagonal stroke with a short hook: 30x30 box, about 0.5 cells of ink."""
    return pts((0, 0), (10, 10), (20, 20), (30, 30), (22.426, 30))


class TestShortPaths:
    @pytest.mark.parametrize("n", range(1, MIN_POINTS))
    @pytest.mark.parametrize("player", [Player.O, Player.X])
    def test_fewer_than_five_points_rejected(self, n, player):
        # A big sweeping stroke that would pass on shape alone
        path = make_circle(n=24)[:n] if player == Player.O else make_cross_stroke()[:n]
        result = ShapeClassifier().classify(path, player, CELL)
        assert not result.accepted
        assert result.reason == RejectReason.TOO_SHORT
        assert result.metrics is None

    def test_five_points_are_measured(self):
        square = pts((10, 10), (40, 10), (40, 40), (10, 40), (10, 10))
        result = ShapeClassifier().classify(square, Player.O, CELL)
        assert result.metrics is not None
        assert result.metrics.point_count == 5


class TestCircle:
    def test_closed_square_loop_accepted(self):
        # aspect 1.0, closure 0, ink 1.2 * cell
        square = pts((10, 10), (40, 10), (40, 40), (10, 40), (10, 10))
        result = ShapeClassifier().classify(square, Player.O, CELL)
        assert result.metrics.total_distance == pytest.approx(1.2 * CELL)
        assert result.metrics.aspect_ratio == 1.0
        assert result.accepted
        assert result.reason is None

    def test_round_circle_accepted(self):
        assert classify_path(make_circle(), Player.O, CELL)

    def test_aspect_exactly_half_rejected(self):
        tall = pts((0, 0), (20, 0), (20, 40), (0, 40), (0, 0))
        result = ShapeClassifier().classify(tall, Player.O, CELL)
        assert result.metrics.aspect_ratio == 0.5
        assert result.reason == RejectReason.BAD_ASPECT

    def test_aspect_exactly_two_rejected(self):
        wide = pts((0, 0), (40, 0), (40, 20), (0, 20), (0, 0))
        result = ShapeClassifier().classify(wide, Player.O, CELL)
        assert result.metrics.aspect_ratio == 2.0
        assert result.reason == RejectReason.BAD_ASPECT

    def test_zero_height_rejected(self):
        flat = pts((0, 10), (30, 10), (60, 10), (30, 10), (0, 10))
        result = ShapeClassifier().classify(flat, Player.O, CELL)
        assert result.metrics.aspect_ratio is None
        assert result.reason == RejectReason.BAD_ASPECT

    def test_gap_exactly_half_cell_not_closed(self):
        open_loop = pts((0, 0), (30, 0), (30, 40), (0, 40), (0, 50))
        result = ShapeClassifier().classify(open_loop, Player.O, CELL)
        assert result.metrics.closure == 50.0
        assert result.reason == RejectReason.NOT_CLOSED

    def test_ink_exactly_threshold_rejected(self):
        small = pts((0, 0), (20, 0), (20, 20), (0, 20), (0, 0))
        result = ShapeClassifier().classify(small, Player.O, CELL)
        assert result.metrics.total_distance == 80.0
        assert result.reason == RejectReason.TOO_LITTLE_INK

    def test_cross_stroke_is_not_a_circle(self):
        assert not classify_path(make_cross_stroke(), Player.O, CELL)


class TestCross:
    def test_cross_stroke_accepted(self):
        result = ShapeClassifier().classify(make_cross_stroke(), Player.X, CELL)
        assert result.metrics.width == pytest.approx(0.3 * CELL)
        assert result.metrics.height == pytest.approx(0.3 * CELL)
        assert result.metrics.total_distance == pytest.approx(0.5 * CELL, abs=0.01)
        assert result.accepted

    def test_narrow_stroke_rejected(self):
        narrow = pts((0, 0), (2, 10), (5, 20), (8, 30), (10, 40))
        result = ShapeClassifier().classify(narrow, Player.X, CELL)
        assert result.metrics.width == pytest.approx(0.1 * CELL)
        assert not result.accepted
        assert result.reason == RejectReason.TOO_NARROW

    def test_flat_stroke_rejected(self):
        flat = pts((0, 0), (10, 2), (20, 5), (30, 8), (40, 10))
        result = ShapeClassifier().classify(flat, Player.X, CELL)
        assert result.reason == RejectReason.TOO_FLAT

    def test_width_exactly_threshold_rejected(self):
        edge = pts((0, 0), (5, 10), (10, 20), (15, 30), (20, 40))
        result = ShapeClassifier().classify(edge, Player.X, CELL)
        assert result.metrics.width == 20.0
        assert result.reason == RejectReason.TOO_NARROW

    def test_no_closure_requirement(self):
        # Open stroke with far-apart ends is fine for X
        stroke = pts((0, 0), (20, 20), (40, 40), (60, 60), (80, 80))
        assert classify_path(stroke, Player.X, CELL)

    def test_circle_also_passes_loose_cross_rules(self):
        assert classify_path(make_circle(), Player.X, CELL)


class TestThresholds:
    def test_custom_min_points(self):
        square = pts((10, 10), (40, 10), (40, 40), (10, 40), (10, 10))
        strict = ShapeClassifier(ShapeThresholds(min_points=6))
        assert strict.classify(square, Player.O, CELL).reason == RejectReason.TOO_SHORT

    def test_scales_with_cell(self):
        square = pts((10, 10), (40, 10), (40, 40), (10, 40), (10, 10))
        # Same 120px of ink is too little for a 200px cell
        assert not classify_path(square, Player.O, 200.0)

    def test_zero_min_points_still_rejects_empty_path(self):
        lenient = ShapeClassifier(ShapeThresholds(min_points=0))
        result = lenient.classify([], Player.X, CELL)
        assert result.reason == RejectReason.TOO_SHORT

    def test_from_dict_converts_numbers(self):
        t = ShapeThresholds.from_dict({"x_min_ink": "0.3", "min_points": 7.0})
        assert t.x_min_ink == 0.3
        assert t.min_points == 7

    def test_from_dict_rejects_non_numeric(self):
        with pytest.raises(ValueError):
            ShapeThresholds.from_dict({"o_min_ink": "lots"})

    def test_from_dict_ignores_unknown(self):
        t = ShapeThresholds.from_dict({"o_min_ink": 0.5, "bogus": 1})
        assert t.o_min_ink == 0.5
        assert t.min_points == MIN_POINTS

    def test_metrics_from_points(self):
        m = PathMetrics.from_points(pts((0, 0), (3, 4)))
        assert m.total_distance == 5.0
        assert m.closure == 5.0
        assert m.width == 3.0
