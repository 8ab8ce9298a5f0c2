"""Tests for the command-line interface."""

import json

import pytest
import yaml
from typer.testing import CliRunner

from gesture_tictactoe.cli import app, format_board
from gesture_tictactoe.engine import GameEngine
from gesture_tictactoe.game import GameState, Player
from gesture_tictactoe.geometry import Point
from gesture_tictactoe.recorder import SessionRecorder

runner = CliRunner()

SQUARE_LOOP = [[10, 10], [40, 10], [40, 40], [10, 40], [10, 10]]


class TestClassifyCommand:
    def test_accepts_loop_for_o(self, tmp_path):
        stroke = tmp_path / "loop.json"
        stroke.write_text(json.dumps(SQUARE_LOOP))
        result = runner.invoke(app, ["classify", str(stroke), "--player", "O"])
        assert result.exit_code == 0
        assert "Accepted as O" in result.output

    def test_rejects_with_reason(self, tmp_path):
        stroke = tmp_path / "tap.json"
        stroke.write_text(json.dumps({"points": [[1, 1], [2, 2]]}))
        result = runner.invoke(app, ["classify", str(stroke), "--player", "x"])
        assert result.exit_code == 2
        assert "too_short" in result.output

    def test_bad_player(self, tmp_path):
        stroke = tmp_path / "loop.json"
        stroke.write_text(json.dumps(SQUARE_LOOP))
        result = runner.invoke(app, ["classify", str(stroke), "--player", "Z"])
        assert result.exit_code == 1

    def test_missing_file(self):
        result = runner.invoke(app, ["classify", "/tmp/does_not_exist_stroke.json"])
        assert result.exit_code == 1

    def test_invalid_json(self, tmp_path):
        stroke = tmp_path / "broken.json"
        stroke.write_text("[[1, 2], ")
        result = runner.invoke(app, ["classify", str(stroke)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "not valid JSON" in result.output


class TestConfigCommand:
    def test_prints_defaults(self):
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        data = yaml.safe_load(result.output)
        assert data["board"]["width"] == 300.0

    def test_writes_file(self, tmp_path):
        out = tmp_path / "game.yml"
        result = runner.invoke(app, ["config", "-o", str(out)])
        assert result.exit_code == 0
        assert out.exists()

    def test_rejects_invalid_source(self, tmp_path):
        src = tmp_path / "bad.yml"
        src.write_text("orientation:\n  flip_above: 10\n  unflip_below: 50\n")
        result = runner.invoke(app, ["config", "--from", str(src)])
        assert result.exit_code == 1


class TestReplayCommand:
    def test_replay_prints_board(self, tmp_path):
        rec = SessionRecorder(GameEngine())
        rec.start()
        rec.start_gesture(0, Point(*SQUARE_LOOP[0]))
        for x, y in SQUARE_LOOP[1:]:
            rec.extend_gesture(Point(x, y))
        rec.finish_gesture()
        rec.stop()
        path = tmp_path / "session.json"
        rec.save(path)

        result = runner.invoke(app, ["replay", str(path)])
        assert result.exit_code == 0
        assert "O → cell 0" in result.output
        assert "O . ." in result.output
        assert "active(X)" in result.output

    @pytest.mark.parametrize("payload", [
        [{"t": 0.0, "type": "reset"}],
        {"version": 1, "config": {"orientation": {"flip_above": 10, "unflip_below": 20}}, "events": []},
        {"version": 1, "events": [{"t": 0.0, "type": "tilt", "angle": "abc"}]},
    ])
    def test_unusable_recording(self, tmp_path, payload):
        path = tmp_path / "session.json"
        path.write_text(json.dumps(payload))
        result = runner.invoke(app, ["replay", str(path)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "❌" in result.output

    def test_missing_recording(self):
        result = runner.invoke(app, ["replay", "/tmp/does_not_exist_session.json"])
        assert result.exit_code == 1


class TestFormatBoard:
    def test_format(self):
        game = GameState.from_board(["O", None, "X", None, "O", None, None, None, "X"])
        assert format_board(game.snapshot()) == "O . X\n. O .\n. . X"
