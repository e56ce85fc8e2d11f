"""
Persisted lamp placement and colour.

The record is a small JSON object::

    {"x": 120, "y": 1040, "width": 320, "height": 40, "colorARGB": 4294274590}

Files written by older builds use ``X / Y / Width / Height /
LavaColorArgb`` keys and signed colour integers; both are accepted.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .engine import Bounds
from .palettes import DEFAULT_COLOR_ARGB, normalize_argb, resolve_color

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "lavalamp.config.json"

_LEGACY_KEYS = {
    "X": "x",
    "Y": "y",
    "Width": "width",
    "Height": "height",
    "LavaColorArgb": "colorARGB",
}


class ConfigError(ValueError):
    """The persisted configuration is unreadable or malformed."""


@dataclass(frozen=True)
class LampConfig:
    """Window geometry (screen pixels) and lava colour."""
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0
    color_argb: int = 0

    @property
    def is_valid(self) -> bool:
        return self.width > 0 and self.height > 0

    @property
    def bounds(self) -> Bounds:
        """Simulation bounds: the window's client rect at the origin."""
        return Bounds.from_size(self.width, self.height)

    @property
    def resolved_color(self) -> int:
        return resolve_color(self.color_argb)

    def with_color(self, color_argb: int) -> "LampConfig":
        return replace(self, color_argb=normalize_argb(color_argb))

    def to_dict(self) -> Dict[str, int]:
        d = asdict(self)
        d["colorARGB"] = normalize_argb(d.pop("color_argb"))
        return d

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "LampConfig":
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a JSON object, got {type(data).__name__}")
        norm = {_LEGACY_KEYS.get(k, k): v for k, v in data.items()}
        try:
            return LampConfig(
                x=int(norm.get("x", 0)),
                y=int(norm.get("y", 0)),
                width=int(norm["width"]),
                height=int(norm["height"]),
                color_argb=normalize_argb(norm.get("colorARGB", 0)),
            )
        except KeyError as e:
            raise ConfigError(f"Missing field: {e.args[0]}") from None
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Bad field value: {e}") from None


class ConfigStore:
    """Reads and writes the lamp record as JSON at *path*."""

    def __init__(self, path: Union[str, Path] = DEFAULT_CONFIG_FILE) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Optional[LampConfig]:
        """Return the stored record, or None when no file exists.

        Raises ``ConfigError`` if the file exists but cannot be used.
        """
        if not self.exists():
            logger.info("No config at %s", self.path)
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot read {self.path}: {e}") from e
        config = LampConfig.from_dict(data)
        logger.info("Loaded config from %s: %s", self.path, config)
        return config

    def save(self, config: LampConfig) -> None:
        self.path.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
        logger.info("Saved config to %s", self.path)

    def update_color(self, color_argb: int) -> LampConfig:
        """Store a new colour, keeping any saved geometry."""
        try:
            current = self.load() or LampConfig()
        except ConfigError as e:
            logger.warning("Replacing unreadable config: %s", e)
            current = LampConfig()
        config = current.with_color(color_argb)
        self.save(config)
        return config


def initial_color(config: Optional[LampConfig]) -> int:
    """Colour a new placement should keep: the saved one, else the default."""
    if config is not None and normalize_argb(config.color_argb) != 0:
        return normalize_argb(config.color_argb)
    return DEFAULT_COLOR_ARGB
