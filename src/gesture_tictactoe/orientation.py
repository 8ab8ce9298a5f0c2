"""Tilt-driven board flip with a hysteresis band.

The board flips when the tilt rises above ``flip_above`` and only flips
back once it drops below ``unflip_below``; samples in between never change
state, so a device held near one threshold does not oscillate.

The controller sees the game only through a callable returning the
current player, which it uses for the status text. It has no way to
change whose turn it is.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from gesture_tictactoe import messages
from gesture_tictactoe.game import Player

logger = logging.getLogger("gesture_tictactoe.orientation")

FLIP_ABOVE = 60.0
UNFLIP_BELOW = 30.0


class OrientationCommand(Enum):
    FLIP = "flip"
    UNFLIP = "unflip"


@dataclass(frozen=True)
class OrientationEvent:
    """Fired when the flip state toggles."""
    command: OrientationCommand
    is_flipped: bool
    player: Player
    angle: float
    message: str


class OrientationController:
    """Observes tilt samples (degrees, one axis) and toggles ``is_flipped``."""

    def __init__(
        self,
        current_player: Callable[[], Player],
        flip_above: float = FLIP_ABOVE,
        unflip_below: float = UNFLIP_BELOW,
    ):
        if unflip_below >= flip_above:
            raise ValueError(
                f"unflip_below ({unflip_below}) must be below flip_above ({flip_above})"
            )
        self._current_player = current_player
        self.flip_above = flip_above
        self.unflip_below = unflip_below
        self._flipped = False

    @property
    def is_flipped(self) -> bool:
        return self._flipped

    def submit(self, angle: float) -> Optional[OrientationEvent]:
        """Feed one tilt sample. Returns an event only on a toggle."""
        if not math.isfinite(angle):
            return None

        if not self._flipped and angle > self.flip_above:
            self._flipped = True
            command, template = OrientationCommand.FLIP, messages.BOARD_FLIPPED
        elif self._flipped and angle < self.unflip_below:
            self._flipped = False
            command, template = OrientationCommand.UNFLIP, messages.BOARD_RESTORED
        else:
            return None

        player = self._current_player()
        logger.debug("Orientation %s at %.1f°", command.value, angle)
        return OrientationEvent(
            command=command,
            is_flipped=self._flipped,
            player=player,
            angle=angle,
            message=template.format(player=player.value),
        )
