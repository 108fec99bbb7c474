"""Board entities, balls and ink points."""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from inkball.types import BALL, BALL_SPEED, CELL, PARK_POSITION, TOPBAR

BRICK_LIFE = 3


@dataclass(eq=False)
class Wall:
    """Solid wall or breakable brick occupying one cell.

    Colour 0 is neutral: it never repaints balls and takes damage from any
    ball. A brick is removed once ``hits`` reaches ``BRICK_LIFE``.
    """

    x: int
    y: int
    color: int = 0
    is_brick: bool = False
    hits: int = 0

    @property
    def cell(self) -> tuple[int, int]:
        return (self.y - TOPBAR) // CELL, self.x // CELL

    @property
    def broken(self) -> bool:
        return self.is_brick and self.hits >= BRICK_LIFE

    @property
    def sprite(self) -> str:
        return f"{'brick' if self.is_brick else 'wall'}{self.color}"

    def hit_by(self, ball_color: int) -> None:
        if ball_color == self.color or self.color == 0:
            self.hits += 1


@dataclass(eq=False)
class Hole:
    """2x2 sink. ``x``/``y`` is the pixel origin of its top-left quadrant."""

    x: int
    y: int
    color: int = 0

    @property
    def center(self) -> tuple[float, float]:
        return (float(self.x + CELL), float(self.y + CELL))

    def accepts(self, ball_color: int) -> bool:
        return self.color == 0 or ball_color == 0 or self.color == ball_color


@dataclass(eq=False)
class Spawner:
    x: int
    y: int


Entity = Union[Wall, Hole, Spawner]


class CellKind(str, Enum):
    TILE = "tile"
    WALL = "wall"
    HOLE = "hole"
    SPAWNER = "spawner"


@dataclass
class Cell:
    """Grid square at pixel origin (x, y) holding at most one entity."""

    x: int
    y: int
    entity: Entity | None = None

    @property
    def kind(self) -> CellKind:
        if self.entity is None:
            return CellKind.TILE
        if isinstance(self.entity, Wall):
            return CellKind.WALL
        if isinstance(self.entity, Hole):
            return CellKind.HOLE
        return CellKind.SPAWNER


@dataclass(frozen=True)
class Point:
    x: float
    y: float


def random_velocity(rng: random.Random) -> tuple[float, float]:
    """Each component independently +/- BALL_SPEED."""
    vx = BALL_SPEED if rng.random() < 0.5 else -BALL_SPEED
    vy = BALL_SPEED if rng.random() < 0.5 else -BALL_SPEED
    return vx, vy


@dataclass(eq=False)
class Ball:
    """A ball on the board, in the spawn queue, or already absorbed.

    Position is the top-left corner of the BALL x BALL sprite rectangle.
    ``last_*`` holds the position before the most recent move and feeds the
    wall resolver's approach tests; ``next_*`` is a read-only prediction.
    """

    x: float
    y: float
    color: int
    vx: float = 0.0
    vy: float = 0.0
    absorbed: bool = False
    display_scale: float = 1.0
    being_absorbed: bool = False
    line_collided: bool = False
    wall_collided: bool = False
    last_x: float = field(init=False)
    last_y: float = field(init=False)
    next_x: float = field(init=False)
    next_y: float = field(init=False)

    def __post_init__(self) -> None:
        self.last_x = self.x
        self.last_y = self.y
        self.update_next_pos()

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + BALL / 2, self.y + BALL / 2)

    @property
    def ix(self) -> int:
        return int(self.x)

    @property
    def iy(self) -> int:
        return int(self.y)

    @property
    def velocity(self) -> tuple[float, float]:
        return (self.vx, self.vy)

    def set_velocity(self, vx: float, vy: float) -> None:
        self.vx = vx
        self.vy = vy
        self.update_next_pos()

    def update_next_pos(self) -> None:
        self.next_x = self.x + self.vx
        self.next_y = self.y + self.vy

    def advance(self) -> None:
        self.last_x = self.x
        self.last_y = self.y
        self.x += self.vx
        self.y += self.vy
        self.update_next_pos()

    def reset_flags(self) -> None:
        self.being_absorbed = False
        self.line_collided = False
        self.wall_collided = False

    def place_at(self, x: float, y: float) -> None:
        self.x = x
        self.y = y
        self.last_x = x
        self.last_y = y
        self.update_next_pos()

    def launch(self, x: float, y: float, rng: random.Random) -> None:
        """Teleport to (x, y) with a fresh random diagonal velocity."""
        self.place_at(x, y)
        self.set_velocity(*random_velocity(rng))
        self.display_scale = 1.0

    def park(self) -> None:
        """Move off-screen while waiting in the spawn queue."""
        self.place_at(*PARK_POSITION)
        self.display_scale = 1.0
