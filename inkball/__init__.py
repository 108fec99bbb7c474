"""inkball - frame-stepped simulation of a ball-and-ink arcade puzzle."""

from inkball import vec
from inkball.board import Board
from inkball.clock import Clock, ManualClock, MonotonicClock
from inkball.components import Ball, Hole, Point, Spawner, Wall
from inkball.config import GameConfig, LevelConfig, load_config
from inkball.engine import Engine
from inkball.input import Button, InputFeed, KeyPress, PointerDown, PointerDrag, PointerUp
from inkball.level import LevelPhase, LevelState
from inkball.render import build_frame
from inkball.types import (
    Color,
    ConfigError,
    InkballError,
    InvariantError,
    TickContext,
)

__all__ = [
    "Engine",
    "Board",
    "GameConfig",
    "LevelConfig",
    "load_config",
    "Clock",
    "ManualClock",
    "MonotonicClock",
    "TickContext",
    "Ball",
    "Wall",
    "Hole",
    "Spawner",
    "Point",
    "Color",
    "LevelPhase",
    "LevelState",
    "InputFeed",
    "Button",
    "PointerDown",
    "PointerDrag",
    "PointerUp",
    "KeyPress",
    "build_frame",
    "InkballError",
    "ConfigError",
    "InvariantError",
    "vec",
]
