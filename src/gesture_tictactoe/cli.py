"""gesture-tictactoe CLI.

Usage:
    gesture-tictactoe replay     — Replay a recorded session and show the result
    gesture-tictactoe classify   — Run the shape classifier on a stroke file
    gesture-tictactoe config     — Print or write the default configuration
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer

from gesture_tictactoe.config import ConfigError, GameConfig
from gesture_tictactoe.game import GameSnapshot, Player
from gesture_tictactoe.geometry import Point

app = typer.Typer(
    name="gesture-tictactoe",
    help="✍️ Tic-tac-toe played by drawing O and X.",
    add_completion=False,
)


@app.callback()
def main_options(
    log_level: str = typer.Option("warning", help="Log level"),
):
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_config(path: Optional[str]) -> GameConfig:
    if not path:
        return GameConfig()
    if not Path(path).exists():
        typer.echo(f"❌ Config not found: {path}", err=True)
        raise typer.Exit(1)
    try:
        return GameConfig.from_yaml(path)
    except ConfigError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1)


def format_board(snapshot: GameSnapshot) -> str:
    """Three text rows, ``.`` for an empty cell."""
    cells = [p.value if p else "." for p in snapshot.board]
    rows = [" ".join(cells[i:i + 3]) for i in range(0, 9, 3)]
    return "\n".join(rows)


@app.command()
def replay(
    recording: str = typer.Argument(..., help="Path to a session recording (.json)"),
    realtime: bool = typer.Option(False, help="Play at original timing"),
    speed: float = typer.Option(1.0, help="Playback speed multiplier"),
):
    """Replay a recorded session through a fresh engine."""
    from gesture_tictactoe.engine import GameEngine
    from gesture_tictactoe.listeners import GameListener
    from gesture_tictactoe.recorder import RecordingError, SessionPlayer, apply_event

    path = Path(recording)
    if not path.exists():
        typer.echo(f"❌ Recording not found: {recording}", err=True)
        raise typer.Exit(1)

    try:
        player = SessionPlayer.load(path)
    except (ConfigError, RecordingError) as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"▶️  Replaying {path.name} ({player.event_count} events, {player.duration:.1f}s)")

    engine = GameEngine(player.config)
    echo = GameListener(name="echo")

    @echo.handler("placement")
    def on_placement(cell_index, symbol):
        typer.echo(f"   ✅ {symbol.value} → cell {cell_index}")

    @echo.handler("gesture_rejected")
    def on_rejected(reason, who):
        typer.echo(f"   ❌ {who.value}: {reason}")

    @echo.handler("orientation_toggled")
    def on_orientation(is_flipped, who):
        typer.echo(f"   🔄 {'flipped' if is_flipped else 'restored'} ({who.value} to play)")

    engine.add_listener(echo)

    events = player.play_realtime(speed=speed) if realtime else player.play()
    try:
        for event in events:
            apply_event(engine, event)
    except RecordingError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1)

    snapshot = engine.snapshot()
    typer.echo("")
    typer.echo(format_board(snapshot))
    typer.echo(f"\nStatus: {snapshot.status}")


@app.command()
def classify(
    stroke: str = typer.Argument(..., help="JSON file with a list of [x, y] points"),
    player: str = typer.Option("O", help="Symbol the stroke is drawn for: O or X"),
    config: Optional[str] = typer.Option(None, help="Path to a config YAML"),
):
    """Classify a single stroke and print its metrics."""
    from gesture_tictactoe.classifier import ShapeClassifier

    try:
        symbol = Player(player.upper())
    except ValueError:
        typer.echo(f"❌ Player must be O or X, got {player!r}", err=True)
        raise typer.Exit(1)

    cfg = _load_config(config)

    path = Path(stroke)
    if not path.exists():
        typer.echo(f"❌ Stroke file not found: {stroke}", err=True)
        raise typer.Exit(1)

    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            typer.echo(f"❌ {stroke}: not valid JSON ({e})", err=True)
            raise typer.Exit(1)
    if isinstance(data, dict):
        data = data.get("points", [])
    try:
        points = [Point.coerce(p) for p in data]
    except (TypeError, ValueError, KeyError) as e:
        typer.echo(f"❌ Malformed stroke: {e}", err=True)
        raise typer.Exit(1)

    result = ShapeClassifier(cfg.thresholds).classify(points, symbol, cfg.layout.cell_size)

    typer.echo(f"Points: {len(points)}  cell: {cfg.layout.cell_size:.1f}px")
    if result.metrics:
        m = result.metrics
        ratio = f"{m.aspect_ratio:.2f}" if m.aspect_ratio is not None else "undefined"
        typer.echo(f"   ink length:   {m.total_distance:.1f}")
        typer.echo(f"   bounding box: {m.width:.1f} x {m.height:.1f} (ratio {ratio})")
        typer.echo(f"   start→end:    {m.closure:.1f}")

    if result.accepted:
        typer.echo(f"✅ Accepted as {symbol.value}")
    else:
        typer.echo(f"❌ Rejected for {symbol.value}: {result.reason.value}")
        raise typer.Exit(2)


@app.command("config")
def show_config(
    source: Optional[str] = typer.Option(None, "--from", help="Config YAML to validate and print"),
    output: Optional[str] = typer.Option(None, "-o", help="Write to this file instead of stdout"),
):
    """Print the effective configuration as YAML."""
    cfg = _load_config(source)
    if output:
        cfg.to_yaml(output)
        typer.echo(f"💾 Saved to: {output}")
    else:
        typer.echo(cfg.dumps().rstrip())


def main():
    app()


if __name__ == "__main__":
    main()
