"""Notification fan-out from the game engine to presenters.

A presenter subclasses ``GameListener`` and overrides the callbacks it
cares about:

    class Screen(GameListener):
        name = "screen"

        def on_placement(self, cell_index, symbol):
            ...

        def on_status_changed(self, status):
            ...

Or registers plain functions with the decorator API:

    listener = GameListener(name="log")

    @listener.handler("gesture_rejected")
    def on_rejected(reason, player):
        print(f"{player.value}: {reason}")

Event types: "placement", "status_changed", "gesture_rejected",
"orientation_toggled", "message", "draw".
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from gesture_tictactoe.game import GameStatus, Player

logger = logging.getLogger("gesture_tictactoe.listeners")

EVENT_TYPES = (
    "placement",
    "status_changed",
    "gesture_rejected",
    "orientation_toggled",
    "message",
    "draw",
)


class GameListener:
    """Base class for engine observers. Every callback defaults to
    forwarding its arguments to handlers registered for that event."""

    name: str = "unnamed"

    def __init__(self, name: Optional[str] = None):
        if name:
            self.name = name
        self._handlers: dict[str, list[Callable]] = {}

    def on_placement(self, cell_index: int, symbol: Player):
        self._emit("placement", cell_index, symbol)

    def on_status_changed(self, status: GameStatus):
        self._emit("status_changed", status)

    def on_gesture_rejected(self, reason: str, player: Player):
        self._emit("gesture_rejected", reason, player)

    def on_orientation_toggled(self, is_flipped: bool, current_player: Player):
        self._emit("orientation_toggled", is_flipped, current_player)

    def on_message(self, text: str):
        self._emit("message", text)

    def on_draw(self, commands: list):
        self._emit("draw", commands)

    def handler(self, event_type: str):
        """Decorator to register a function for one event type."""
        if event_type not in EVENT_TYPES:
            raise ValueError(f"Unknown event type: {event_type!r}")

        def decorator(fn: Callable):
            self._handlers.setdefault(event_type, []).append(fn)
            return fn
        return decorator

    def _emit(self, event_type: str, *args: Any):
        for fn in self._handlers.get(event_type, []):
            try:
                fn(*args)
            except Exception as e:
                logger.error("Listener %s handler error: %s", self.name, e)


class ListenerManager:
    """Holds registered listeners and dispatches notifications to them.

    A listener that raises is logged and skipped; the remaining listeners
    still receive the notification.
    """

    def __init__(self):
        self._listeners: dict[str, GameListener] = {}

    def register(self, listener: GameListener):
        if listener.name in self._listeners:
            logger.warning("Listener '%s' already registered, replacing", listener.name)
        self._listeners[listener.name] = listener
        logger.debug("Registered listener: %s", listener.name)

    def unregister(self, name: str) -> Optional[GameListener]:
        return self._listeners.pop(name, None)

    def dispatch(self, event_type: str, *args: Any):
        """Call ``on_<event_type>(*args)`` on every listener."""
        method_name = f"on_{event_type}"
        for listener in list(self._listeners.values()):
            callback = getattr(listener, method_name, None)
            if callback is None:
                continue
            try:
                callback(*args)
            except Exception as e:
                logger.error("Listener %s %s error: %s", listener.name, method_name, e)

    @property
    def listener_names(self) -> list[str]:
        return list(self._listeners.keys())

    def __len__(self) -> int:
        return len(self._listeners)
