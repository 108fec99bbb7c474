"""Shared constants, colours, tick context and errors for inkball."""

from __future__ import annotations

import random as _random
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Callable

# Window and board geometry, in pixels unless noted.
CELL = 32
TOPBAR = 2 * CELL
WIDTH = 576
HEIGHT = 640
BOARD_WIDTH = WIDTH // CELL  # cells
BOARD_HEIGHT = (HEIGHT - TOPBAR) // CELL  # cells
BALL = 24
HOLE = 2 * CELL
POINTSIZE = 10

FPS = 30

BALL_SPEED = 2.0
PARK_POSITION = (-10.0, -10.0)


class Color(IntEnum):
    GREY = 0
    ORANGE = 1
    BLUE = 2
    GREEN = 3
    YELLOW = 4

    @classmethod
    def from_name(cls, name: str) -> Color:
        """Look up a colour by its lowercase configuration name (``"grey"``, ``"blue"`` ...)."""
        if not isinstance(name, str):
            raise ConfigError(f"colour name must be a string, got {name!r}")
        by_name = {color.name.lower(): color for color in cls}
        try:
            return by_name[name]
        except KeyError:
            raise ConfigError(f"unknown colour name {name!r}") from None


@dataclass(frozen=True, slots=True)
class TickContext:
    tick_number: int
    now_ms: int
    random: _random.Random


class InkballError(Exception):
    """Base class for errors raised by inkball."""


class ConfigError(InkballError):
    """Raised when the configuration document or a layout file cannot be used."""


class InvariantError(InkballError):
    """Raised when the board's internal bookkeeping is inconsistent."""


if TYPE_CHECKING:
    from inkball.board import Board

System = Callable[["Board", TickContext], None]
