"""Level layout parsing.

A layout is up to BOARD_HEIGHT rows of up to BOARD_WIDTH characters:

``' '`` empty, ``X`` neutral wall, ``1``-``4`` coloured wall,
``5``-``9`` brick of colour ``c - 5``, ``S`` spawner,
``H<d>`` 2x2 hole of colour d, ``B<d>`` pre-placed ball of colour d.

Content problems never raise: short or missing rows are empty, unknown
glyphs are empty tiles, and a hole or ball that would not fit (or whose
colour digit is out of range) is dropped together with its digit.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from inkball.components import Ball, Hole, Spawner, Wall
from inkball.grid import Grid, cell_to_pixel
from inkball.types import BOARD_HEIGHT, BOARD_WIDTH, Color

logger = logging.getLogger(__name__)

_MAX_COLOR = max(Color)


@dataclass
class Layout:
    grid: Grid
    walls: list[Wall] = field(default_factory=list)
    holes: list[Hole] = field(default_factory=list)
    spawners: list[Spawner] = field(default_factory=list)
    balls: list[Ball] = field(default_factory=list)


def split_rows(text: str) -> list[str]:
    """Normalise raw layout text into at most BOARD_HEIGHT right-trimmed rows."""
    return [row.rstrip() for row in text.splitlines()[:BOARD_HEIGHT]]


def _color_digit(row: str, col: int) -> int | None:
    if col >= len(row) or not row[col].isdigit():
        return None
    value = int(row[col])
    return value if value <= _MAX_COLOR else None


def _pair_width(row: str, col: int) -> int:
    """Cells taken by a rejected H or B glyph: its colour digit goes with it."""
    return 2 if col + 1 < len(row) and row[col + 1].isdigit() else 1


def _holds_hole(grid: Grid, cells: list[tuple[int, int]]) -> bool:
    return any(isinstance(grid.at(r, c), Hole) for r, c in cells)


def parse_layout(text: str, rng: random.Random) -> Layout:
    """Build a fresh grid and entity lists from layout text.

    ``rng`` gives pre-placed balls their initial velocity.
    """
    grid = Grid()
    layout = Layout(grid=grid)
    rows = split_rows(text)

    for r, row in enumerate(rows):
        c = 0
        width = min(len(row), BOARD_WIDTH)
        while c < width:
            glyph = row[c]
            x, y = cell_to_pixel(r, c)
            if _holds_hole(grid, [(r, c)]):
                # Lower half of a hole opened on the previous row.
                c += 1
                continue
            if glyph == "X":
                wall = Wall(x, y, 0)
                grid.place(r, c, wall)
                layout.walls.append(wall)
            elif glyph in "1234":
                wall = Wall(x, y, int(glyph))
                grid.place(r, c, wall)
                layout.walls.append(wall)
            elif glyph in "56789":
                wall = Wall(x, y, int(glyph) - 5, is_brick=True)
                grid.place(r, c, wall)
                layout.walls.append(wall)
            elif glyph == "S":
                spawner = Spawner(x, y)
                grid.place(r, c, spawner)
                layout.spawners.append(spawner)
            elif glyph == "H":
                color = _color_digit(row, c + 1)
                if (
                    color is None
                    or not grid.fits_hole(r, c)
                    or _holds_hole(grid, [(r, c + 1), (r + 1, c), (r + 1, c + 1)])
                ):
                    logger.debug("layout row %d col %d: ignoring malformed hole", r, c)
                    c += _pair_width(row, c)
                    continue
                hole = Hole(x, y, color)
                grid.install_hole(r, c, hole)
                layout.holes.append(hole)
                c += 2
                continue
            elif glyph == "B":
                color = _color_digit(row, c + 1)
                if (
                    color is None
                    or not grid.in_bounds(r, c + 1)
                    or _holds_hole(grid, [(r, c + 1)])
                ):
                    logger.debug("layout row %d col %d: ignoring malformed ball", r, c)
                    c += _pair_width(row, c)
                    continue
                grid.clear(r, c)
                grid.clear(r, c + 1)
                ball = Ball(float(x), float(y), color)
                ball.launch(float(x), float(y), rng)
                layout.balls.append(ball)
                c += 2
                continue
            elif glyph != " ":
                logger.debug("layout row %d col %d: unknown glyph %r", r, c, glyph)
            c += 1

    return layout
