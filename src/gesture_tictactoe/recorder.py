"""Session recording and replay — capture the input event stream to disk.

Record real play sessions for:
- Reproducible tests of recognition thresholds without a touchscreen
- Tuning thresholds against the same strokes
- Demo sessions that play back deterministically
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional

from gesture_tictactoe.config import ConfigError, GameConfig
from gesture_tictactoe.engine import GameEngine
from gesture_tictactoe.geometry import Point

logger = logging.getLogger("gesture_tictactoe.recorder")

FORMAT_VERSION = 1
EVENT_TYPES = ("start", "start_at", "extend", "finish", "cancel", "tilt", "reset")


class RecordingError(ValueError):
    """Raised for a recording that cannot be replayed."""


@dataclass
class RecordedEvent:
    """A single inbound call."""
    t: float  # seconds from recording start
    type: str
    data: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"t": round(self.t, 4), "type": self.type, **self.data}

    @classmethod
    def from_dict(cls, data: dict) -> RecordedEvent:
        data = dict(data)
        try:
            t = float(data.pop("t"))
            kind = data.pop("type")
        except KeyError as e:
            raise RecordingError(f"event missing field {e}") from e
        except (TypeError, ValueError) as e:
            raise RecordingError(f"event has a bad timestamp: {e}") from e
        if kind not in EVENT_TYPES:
            raise RecordingError(f"unknown event type: {kind!r}")
        return cls(t=t, type=kind, data=data)


class SessionRecorder:
    """Forwards inbound calls to an engine while recording them.

    Usage:
        recorder = SessionRecorder(engine)
        recorder.start()
        # Drive the recorder exactly like the engine:
        recorder.start_gesture(4, Point(150, 150))
        recorder.extend_gesture(Point(160, 140))
        recorder.finish_gesture()
        recorder.save("session.json")
    """

    def __init__(self, engine: GameEngine):
        self.engine = engine
        self._events: list[RecordedEvent] = []
        self._start_time: Optional[float] = None
        self._recording = False

    def start(self):
        """Begin a new recording session."""
        self._events = []
        self._start_time = time.monotonic()
        self._recording = True

    def stop(self) -> int:
        """Stop recording. Returns number of events captured."""
        self._recording = False
        return len(self._events)

    @property
    def is_recording(self) -> bool:
        return self._recording

    @property
    def event_count(self) -> int:
        return len(self._events)

    @property
    def duration(self) -> float:
        if not self._events:
            return 0.0
        return self._events[-1].t

    def _record(self, kind: str, **data):
        if not self._recording:
            return
        self._events.append(RecordedEvent(
            t=time.monotonic() - self._start_time,
            type=kind,
            data=data,
        ))

    def start_gesture(self, cell_index: int, point: Point):
        self._record("start", cell=cell_index, x=point.x, y=point.y)
        return self.engine.start_gesture(cell_index, point)

    def start_gesture_at(self, point: Point):
        self._record("start_at", x=point.x, y=point.y)
        return self.engine.start_gesture_at(point)

    def extend_gesture(self, point: Point):
        self._record("extend", x=point.x, y=point.y)
        return self.engine.extend_gesture(point)

    def finish_gesture(self):
        self._record("finish")
        return self.engine.finish_gesture()

    def cancel_gesture(self):
        self._record("cancel")
        return self.engine.cancel_gesture()

    def submit_tilt(self, angle: float):
        self._record("tilt", angle=angle)
        return self.engine.submit_tilt(angle)

    def reset(self):
        self._record("reset")
        return self.engine.reset()

    def save(self, path: str | Path):
        """Save recording (with the engine's config) to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "version": FORMAT_VERSION,
            "config": self.engine.config.to_dict(),
            "event_count": len(self._events),
            "duration": self.duration,
            "events": [e.to_dict() for e in self._events],
        }

        with open(path, "w") as f:
            json.dump(data, f)


class SessionPlayer:
    """Replays a recorded session into an engine.

    Usage:
        player = SessionPlayer.load("session.json")
        engine = player.replay()
        print(engine.snapshot().status)
    """

    def __init__(self, events: list[RecordedEvent], config: Optional[GameConfig] = None):
        self._events = events
        self.config = config or GameConfig()

    @classmethod
    def load(cls, path: str | Path) -> SessionPlayer:
        """Load a recording from a JSON file."""
        with open(path) as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise RecordingError(f"{path}: not valid JSON ({e})") from e

        if not isinstance(data, dict):
            raise RecordingError(f"{path}: recording must be a JSON object")

        version = data.get("version")
        if version != FORMAT_VERSION:
            raise RecordingError(f"unsupported recording version: {version!r}")

        raw_events = data.get("events", [])
        if not isinstance(raw_events, list) or not all(isinstance(e, dict) for e in raw_events):
            raise RecordingError(f"{path}: events must be a list of objects")
        events = [RecordedEvent.from_dict(e) for e in raw_events]

        try:
            config = GameConfig.from_dict(data.get("config"))
        except ConfigError as e:
            raise RecordingError(f"{path}: embedded config: {e}") from e
        return cls(events, config)

    @property
    def event_count(self) -> int:
        return len(self._events)

    @property
    def duration(self) -> float:
        if not self._events:
            return 0.0
        return self._events[-1].t

    def play(self) -> Iterator[RecordedEvent]:
        """Iterate through all events instantly (no timing)."""
        yield from self._events

    def play_realtime(self, speed: float = 1.0) -> Iterator[RecordedEvent]:
        """Iterate at the original timing (or scaled by speed factor)."""
        start = time.monotonic()
        for event in self._events:
            target_time = event.t / speed
            elapsed = time.monotonic() - start
            if target_time > elapsed:
                time.sleep(target_time - elapsed)
            yield event

    def replay(self, engine: Optional[GameEngine] = None) -> GameEngine:
        """Apply every event to ``engine`` (a fresh one by default)."""
        engine = engine or GameEngine(self.config)
        for event in self.play():
            apply_event(engine, event)
        return engine


def apply_event(engine: GameEngine, event: RecordedEvent):
    """Perform the inbound call that ``event`` records."""
    d = event.data
    try:
        if event.type == "start":
            args = (int(d["cell"]), Point(float(d["x"]), float(d["y"])))
        elif event.type in ("start_at", "extend"):
            args = (Point(float(d["x"]), float(d["y"])),)
        elif event.type == "tilt":
            args = (float(d["angle"]),)
        else:
            args = ()
    except KeyError as e:
        raise RecordingError(f"{event.type} event missing field {e}") from e
    except (TypeError, ValueError) as e:
        raise RecordingError(f"{event.type} event has a bad value: {e}") from e

    handlers = {
        "start": engine.start_gesture,
        "start_at": engine.start_gesture_at,
        "extend": engine.extend_gesture,
        "finish": engine.finish_gesture,
        "cancel": engine.cancel_gesture,
        "tilt": engine.submit_tilt,
        "reset": engine.reset,
    }
    if event.type not in handlers:
        raise RecordingError(f"unknown event type: {event.type!r}")
    return handlers[event.type](*args)
