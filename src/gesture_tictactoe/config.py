"""Game configuration: board geometry, shape thresholds, tilt thresholds.

Loaded from YAML:

    board:
      width: 300
      height: 300
    classifier:
      min_points: 5
      o_min_aspect: 0.5
      ...
    orientation:
      flip_above: 60
      unflip_below: 30

Missing sections fall back to defaults; unknown keys are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from gesture_tictactoe.classifier import ShapeThresholds
from gesture_tictactoe.layout import BoardLayout
from gesture_tictactoe.orientation import FLIP_ABOVE, UNFLIP_BELOW


class ConfigError(ValueError):
    """Raised for a config file that cannot be used."""


@dataclass
class GameConfig:
    layout: BoardLayout = field(default_factory=BoardLayout)
    thresholds: ShapeThresholds = field(default_factory=ShapeThresholds)
    flip_above: float = FLIP_ABOVE
    unflip_below: float = UNFLIP_BELOW

    def __post_init__(self):
        if self.unflip_below >= self.flip_above:
            raise ConfigError(
                f"orientation.unflip_below ({self.unflip_below}) must be "
                f"below orientation.flip_above ({self.flip_above})"
            )
        if self.thresholds.min_points < 1:
            raise ConfigError("classifier.min_points must be at least 1")
        t = self.thresholds
        if not 0 < t.o_min_aspect < t.o_max_aspect:
            raise ConfigError(
                f"classifier.o_min_aspect ({t.o_min_aspect}) must be positive and "
                f"below classifier.o_max_aspect ({t.o_max_aspect})"
            )
        for name in ("o_max_closure", "o_min_ink", "x_min_extent", "x_min_ink"):
            if not getattr(t, name) > 0:
                raise ConfigError(f"classifier.{name} must be positive")

    def to_dict(self) -> dict:
        return {
            "board": self.layout.to_dict(),
            "classifier": self.thresholds.to_dict(),
            "orientation": {
                "flip_above": self.flip_above,
                "unflip_below": self.unflip_below,
            },
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> GameConfig:
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigError(f"config must be a mapping, got {type(data).__name__}")

        orientation = data.get("orientation") or {}
        try:
            return cls(
                layout=BoardLayout.from_dict(data.get("board") or {}),
                thresholds=ShapeThresholds.from_dict(data.get("classifier") or {}),
                flip_above=float(orientation.get("flip_above", FLIP_ABOVE)),
                unflip_below=float(orientation.get("unflip_below", UNFLIP_BELOW)),
            )
        except ConfigError:
            raise
        except (AttributeError, TypeError, ValueError) as e:
            raise ConfigError(f"invalid config: {e}") from e

    @classmethod
    def from_yaml(cls, path: str | Path) -> GameConfig:
        """Load config from a YAML file."""
        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"{path}: {e}") from e
        return cls.from_dict(data)

    def to_yaml(self, path: str | Path):
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def dumps(self) -> str:
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)
