"""Player-facing status lines."""

from __future__ import annotations

from gesture_tictactoe.game import GameStatus, Player, StatusKind

GAME_START = "Game start! {player} to play. Draw with your finger."
NEXT_TURN = "{player} to play next! Draw with your finger."
WON = "{player} wins!"
DRAW = "It's a draw!"
LIFTED_EARLY = "You lifted your finger! Start over. {player}, it's still your turn."
NOT_RECOGNISED = "Gesture not recognised! Draw again without lifting. {player}, it's still your turn."
BOARD_FLIPPED = "Board flipped! {player} to play next."
BOARD_RESTORED = "Board restored. {player} to play next."


def status_message(status: GameStatus) -> str:
    if status.kind == StatusKind.WON:
        return WON.format(player=status.player.value)
    if status.kind == StatusKind.DRAW:
        return DRAW
    return NEXT_TURN.format(player=status.player.value)


def start_message(player: Player = Player.O) -> str:
    return GAME_START.format(player=player.value)
