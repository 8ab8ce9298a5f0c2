"""Renderer-agnostic draw commands for the board.

The engine never touches a drawing surface. It describes what should be
on screen as ``DrawCommand`` lists: grid lines, placed symbols, a faint
dashed hint of the expected symbol while a gesture is open, live ink
segments and the flip transform. A presenter replays them onto whatever
surface it owns (HTML canvas, pygame, Qt, ...).

Usage:
    renderer = BoardRenderer(BoardLayout(300, 300))
    commands = renderer.redraw(game.snapshot())
    presenter.paint([c.to_dict() for c in commands])
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from gesture_tictactoe.game import GameSnapshot, Player
from gesture_tictactoe.geometry import Point
from gesture_tictactoe.layout import BoardLayout, GRID_SIZE

GRID_COLOR = "#4b3014"
GRID_WIDTH = 5.0

SYMBOL_COLORS = {
    Player.O: "#cc0000",
    Player.X: "#006600",
}
HINT_COLORS = {
    Player.O: "rgba(204, 0, 0, 0.3)",
    Player.X: "rgba(0, 102, 0, 0.3)",
}
SYMBOL_WIDTH = 10.0
HINT_WIDTH = 8.0
HINT_DASH = (5.0, 5.0)


@dataclass
class DrawCommand:
    """A single drawing instruction."""
    type: str  # "clear", "line", "circle", "transform"
    x: float = 0.0
    y: float = 0.0
    x2: float = 0.0
    y2: float = 0.0
    radius: float = 0.0
    color: str = GRID_COLOR
    width: float = 1.0
    dash: tuple[float, ...] = field(default_factory=tuple)
    round_cap: bool = False
    rotate_x: float = 0.0

    def to_dict(self) -> dict:
        if self.type == "line":
            d = {
                "type": "line",
                "x1": round(self.x, 1),
                "y1": round(self.y, 1),
                "x2": round(self.x2, 1),
                "y2": round(self.y2, 1),
                "color": self.color,
                "width": self.width,
            }
        elif self.type == "circle":
            d = {
                "type": "circle",
                "x": round(self.x, 1),
                "y": round(self.y, 1),
                "radius": round(self.radius, 1),
                "color": self.color,
                "width": self.width,
            }
        elif self.type == "transform":
            return {"type": "transform", "rotate_x": self.rotate_x}
        else:
            return {"type": self.type}

        if self.dash:
            d["dash"] = list(self.dash)
        if self.round_cap:
            d["cap"] = "round"
        return d


class BoardRenderer:
    """Builds draw commands for a given board layout."""

    def __init__(self, layout: Optional[BoardLayout] = None):
        self.layout = layout or BoardLayout()

    def grid(self) -> list[DrawCommand]:
        """The two vertical and two horizontal separators."""
        w, h = self.layout.width, self.layout.height
        commands = []
        for i in range(1, GRID_SIZE):
            x = w * i / GRID_SIZE
            commands.append(DrawCommand(
                type="line", x=x, y=0.0, x2=x, y2=h,
                color=GRID_COLOR, width=GRID_WIDTH,
            ))
        for i in range(1, GRID_SIZE):
            y = h * i / GRID_SIZE
            commands.append(DrawCommand(
                type="line", x=0.0, y=y, x2=w, y2=y,
                color=GRID_COLOR, width=GRID_WIDTH,
            ))
        return commands

    def symbol(self, index: int, player: Player) -> list[DrawCommand]:
        """A placed symbol, centred in its cell."""
        return self._shape(index, player, SYMBOL_COLORS[player], SYMBOL_WIDTH, ())

    def hint(self, index: int, player: Player) -> list[DrawCommand]:
        """Faint dashed outline of the symbol ``player`` should draw."""
        return self._shape(index, player, HINT_COLORS[player], HINT_WIDTH, HINT_DASH)

    def _shape(
        self,
        index: int,
        player: Player,
        color: str,
        width: float,
        dash: tuple[float, ...],
    ) -> list[DrawCommand]:
        center = self.layout.cell_center(index)
        size = self.layout.cell_size

        if player == Player.O:
            return [DrawCommand(
                type="circle", x=center.x, y=center.y, radius=size / 3,
                color=color, width=width, dash=dash,
            )]

        offset = size / 4
        return [
            DrawCommand(
                type="line",
                x=center.x - offset, y=center.y - offset,
                x2=center.x + offset, y2=center.y + offset,
                color=color, width=width, dash=dash,
            ),
            DrawCommand(
                type="line",
                x=center.x + offset, y=center.y - offset,
                x2=center.x - offset, y2=center.y + offset,
                color=color, width=width, dash=dash,
            ),
        ]

    def ink(self, a: Point, b: Point, player: Player) -> DrawCommand:
        """One segment of the stroke being drawn."""
        return DrawCommand(
            type="line", x=a.x, y=a.y, x2=b.x, y2=b.y,
            color=SYMBOL_COLORS[player], width=SYMBOL_WIDTH, round_cap=True,
        )

    def redraw(self, snapshot: GameSnapshot) -> list[DrawCommand]:
        """Clear the surface and paint the grid plus every placed symbol."""
        commands = [DrawCommand(type="clear")]
        commands.extend(self.grid())
        for index, player in enumerate(snapshot.board):
            if player is not None:
                commands.extend(self.symbol(index, player))
        return commands

    def flip(self, is_flipped: bool) -> DrawCommand:
        return DrawCommand(type="transform", rotate_x=180.0 if is_flipped else 0.0)
