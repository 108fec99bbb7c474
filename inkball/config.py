"""Game configuration loaded from the JSON document and level layout files."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from inkball.types import Color, ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LevelConfig:
    """One entry of the ``levels`` list.

    Attributes:
        layout: Path of the layout file as written in the document.
        time: Seconds allowed for the level.
        spawn_interval: Seconds between spawns.
        capture_modifier: Multiplier for points earned on a correct capture.
        miss_modifier: Multiplier for points lost on a wrong-hole capture.
        balls: Colours of the queued balls, in spawn order.
        layout_text: Raw layout contents.
    """

    layout: str
    time: int
    spawn_interval: int
    capture_modifier: float
    miss_modifier: float
    balls: tuple[int, ...]
    layout_text: str = ""


@dataclass(frozen=True)
class GameConfig:
    levels: tuple[LevelConfig, ...]
    capture_points: Mapping[int, int] = field(default_factory=dict)
    miss_points: Mapping[int, int] = field(default_factory=dict)

    @property
    def total_levels(self) -> int:
        return len(self.levels)

    def capture_score(self, level: int, color: int) -> float:
        return self.levels[level].capture_modifier * self.capture_points.get(color, 0)

    def miss_score(self, level: int, color: int) -> float:
        return self.levels[level].miss_modifier * self.miss_points.get(color, 0)

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], base_dir: str | Path | None = None
    ) -> GameConfig:
        """Validate a parsed configuration document.

        Layout files are read relative to ``base_dir`` (the current directory
        when omitted) unless a level already carries ``layout_text``.
        """
        if not isinstance(data, Mapping):
            raise ConfigError("configuration root must be an object")
        raw_levels = _require(data, "levels", list, "")
        if not raw_levels:
            raise ConfigError("levels: at least one level is required")
        base = Path(base_dir) if base_dir is not None else Path.cwd()
        levels = tuple(
            _parse_level(entry, f"levels[{i}]", base)
            for i, entry in enumerate(raw_levels)
        )
        return cls(
            levels=levels,
            capture_points=_parse_points(data, "score_increase_from_hole_capture"),
            miss_points=_parse_points(data, "score_decrease_from_wrong_hole"),
        )


def load_config(path: str | Path) -> GameConfig:
    """Read and validate the configuration file at ``path``."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"cannot read configuration {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path}: invalid JSON: {exc}") from exc
    config = GameConfig.from_dict(data, base_dir=path.parent)
    logger.info("loaded %s with %d level(s)", path, config.total_levels)
    return config


def _require(data: Mapping[str, Any], key: str, kind: type | tuple[type, ...], where: str) -> Any:
    name = f"{where}.{key}" if where else key
    if key not in data:
        raise ConfigError(f"{name}: missing")
    value = data[key]
    # bool is an int subclass; never accept it as a number.
    if isinstance(value, bool) or not isinstance(value, kind):
        raise ConfigError(f"{name}: expected {_kind_name(kind)}, got {value!r}")
    return value


def _kind_name(kind: type | tuple[type, ...]) -> str:
    if isinstance(kind, tuple):
        return " or ".join(k.__name__ for k in kind)
    return kind.__name__


def _parse_level(entry: Any, where: str, base: Path) -> LevelConfig:
    if not isinstance(entry, Mapping):
        raise ConfigError(f"{where}: expected object, got {entry!r}")
    layout = _require(entry, "layout", str, where)
    time = _require(entry, "time", int, where)
    interval = _require(entry, "spawn_interval", int, where)
    if time < 0 or interval < 0:
        raise ConfigError(f"{where}: time and spawn_interval must not be negative")
    capture = _require(entry, "score_increase_from_hole_capture_modifier", (int, float), where)
    miss = _require(entry, "score_decrease_from_wrong_hole_modifier", (int, float), where)
    names = _require(entry, "balls", list, where)
    try:
        balls = tuple(int(Color.from_name(name)) for name in names)
    except ConfigError as exc:
        raise ConfigError(f"{where}.balls: {exc}") from None

    text = entry.get("layout_text")
    if text is None:
        layout_path = Path(layout)
        if not layout_path.is_absolute():
            layout_path = base / layout_path
        try:
            text = layout_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"{where}.layout: cannot read {layout_path}: {exc}") from exc
    elif not isinstance(text, str):
        raise ConfigError(f"{where}.layout_text: expected str, got {text!r}")

    return LevelConfig(
        layout=layout,
        time=time,
        spawn_interval=interval,
        capture_modifier=float(capture),
        miss_modifier=float(miss),
        balls=balls,
        layout_text=text,
    )


def _parse_points(data: Mapping[str, Any], key: str) -> dict[int, int]:
    table = _require(data, key, Mapping, "")
    points: dict[int, int] = {}
    for name, value in table.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"{key}.{name}: expected int, got {value!r}")
        try:
            color = Color.from_name(name)
        except ConfigError as exc:
            raise ConfigError(f"{key}: {exc}") from None
        points[int(color)] = value
    return points
