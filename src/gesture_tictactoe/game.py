"""Board, turn and win/draw state machine."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from gesture_tictactoe.layout import CELL_COUNT

logger = logging.getLogger("gesture_tictactoe.game")


class Player(Enum):
    O = "O"
    X = "X"

    @property
    def other(self) -> Player:
        return Player.X if self is Player.O else Player.O


class StatusKind(Enum):
    ACTIVE = "active"
    WON = "won"
    DRAW = "draw"


@dataclass(frozen=True)
class GameStatus:
    """Game status. ``player`` is whose turn it is while active, the winner
    once won, and None for a draw."""
    kind: StatusKind
    player: Optional[Player] = None

    @classmethod
    def active(cls, player: Player) -> GameStatus:
        return cls(StatusKind.ACTIVE, player)

    @classmethod
    def won(cls, player: Player) -> GameStatus:
        return cls(StatusKind.WON, player)

    @classmethod
    def draw(cls) -> GameStatus:
        return cls(StatusKind.DRAW)

    @property
    def is_active(self) -> bool:
        return self.kind == StatusKind.ACTIVE

    @property
    def is_terminal(self) -> bool:
        return self.kind != StatusKind.ACTIVE

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "player": self.player.value if self.player else None,
        }

    def __str__(self) -> str:
        if self.kind == StatusKind.DRAW:
            return "draw"
        return f"{self.kind.value}({self.player.value})"


# Rows, columns, diagonals
WIN_LINES: tuple[tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)


class PlacementError(Enum):
    GAME_OVER = "game_over"
    CELL_OCCUPIED = "cell_occupied"
    WRONG_PLAYER = "wrong_player"
    OUT_OF_RANGE = "out_of_range"


@dataclass(frozen=True)
class PlacementResult:
    """Outcome of ``GameState.place``. ``ok`` is False for a rejected call,
    in which case ``error`` says why and the game is unchanged."""
    ok: bool
    cell_index: int
    symbol: Player
    status: GameStatus
    error: Optional[PlacementError] = None
    winning_line: Optional[tuple[int, int, int]] = None


@dataclass(frozen=True)
class GameSnapshot:
    """Immutable view of the game for presenters and recordings."""
    board: tuple[Optional[Player], ...]
    current_player: Player
    status: GameStatus
    winning_line: Optional[tuple[int, int, int]] = None

    def to_dict(self) -> dict:
        return {
            "board": [p.value if p else None for p in self.board],
            "current_player": self.current_player.value,
            "status": self.status.to_dict(),
            "winning_line": list(self.winning_line) if self.winning_line else None,
        }


class GameState:
    """Sole owner of the board, the current player and the game status.

    All mutation goes through ``place`` and ``reset``. Cells are written
    once and never erased; ``Won`` and ``Draw`` absorb further placements
    until the next reset.
    """

    def __init__(self):
        self._board: list[Optional[Player]] = [None] * CELL_COUNT
        self._current = Player.O
        self._status = GameStatus.active(Player.O)
        self._winning_line: Optional[tuple[int, int, int]] = None

    @classmethod
    def from_board(
        cls,
        cells: Sequence[Optional[Player | str]],
        current_player: Optional[Player | str] = None,
    ) -> GameState:
        """Build a game from a 9-cell board (``Player``, "O"/"X" or None).

        When ``current_player`` is omitted it is inferred from the piece
        count (O moves first). Status is derived from the board.
        """
        if len(cells) != CELL_COUNT:
            raise ValueError(f"board must have {CELL_COUNT} cells, got {len(cells)}")

        game = cls()
        game._board = [Player(c) if c is not None else None for c in cells]

        if current_player is None:
            o_count = game._board.count(Player.O)
            x_count = game._board.count(Player.X)
            game._current = Player.O if o_count <= x_count else Player.X
        else:
            game._current = Player(current_player)

        line = game._find_winning_line()
        if line is not None:
            game._winning_line = line
            game._status = GameStatus.won(game._board[line[0]])
        elif None not in game._board:
            game._status = GameStatus.draw()
        else:
            game._status = GameStatus.active(game._current)
        return game

    @property
    def board(self) -> tuple[Optional[Player], ...]:
        return tuple(self._board)

    @property
    def current_player(self) -> Player:
        return self._current

    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def is_active(self) -> bool:
        return self._status.is_active

    @property
    def winning_line(self) -> Optional[tuple[int, int, int]]:
        return self._winning_line

    def cell(self, index: int) -> Optional[Player]:
        if not 0 <= index < CELL_COUNT:
            raise IndexError(f"cell index out of range: {index}")
        return self._board[index]

    def is_empty(self, index: int) -> bool:
        """True for an in-range, unoccupied cell."""
        return 0 <= index < CELL_COUNT and self._board[index] is None

    def place(self, cell_index: int, symbol: Player) -> PlacementResult:
        """Write ``symbol`` into an empty cell and advance the game.

        The win check runs before the draw check, so a final move that
        both completes a line and fills the board is a win.
        """
        error = self._check_placement(cell_index, symbol)
        if error is not None:
            logger.debug("Rejected placement of %s at %d: %s", symbol.value, cell_index, error.value)
            return PlacementResult(
                ok=False,
                cell_index=cell_index,
                symbol=symbol,
                status=self._status,
                error=error,
            )

        self._board[cell_index] = symbol

        line = self._find_winning_line()
        if line is not None:
            self._winning_line = line
            self._status = GameStatus.won(symbol)
            logger.info("%s wins on line %s", symbol.value, line)
        elif None not in self._board:
            self._status = GameStatus.draw()
            logger.info("Game drawn")
        else:
            self._current = symbol.other
            self._status = GameStatus.active(self._current)

        return PlacementResult(
            ok=True,
            cell_index=cell_index,
            symbol=symbol,
            status=self._status,
            winning_line=self._winning_line,
        )

    def _check_placement(self, cell_index: int, symbol: Player) -> Optional[PlacementError]:
        if not self._status.is_active:
            return PlacementError.GAME_OVER
        if not 0 <= cell_index < CELL_COUNT:
            return PlacementError.OUT_OF_RANGE
        if self._board[cell_index] is not None:
            return PlacementError.CELL_OCCUPIED
        if symbol != self._current:
            return PlacementError.WRONG_PLAYER
        return None

    def _find_winning_line(self) -> Optional[tuple[int, int, int]]:
        b = self._board
        for line in WIN_LINES:
            a, c, d = line
            if b[a] is not None and b[a] == b[c] == b[d]:
                return line
        return None

    def reset(self):
        """Empty board, O to move, status active."""
        self._board = [None] * CELL_COUNT
        self._current = Player.O
        self._status = GameStatus.active(Player.O)
        self._winning_line = None

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            board=tuple(self._board),
            current_player=self._current,
            status=self._status,
            winning_line=self._winning_line,
        )
