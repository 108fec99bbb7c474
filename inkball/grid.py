"""Grid - fixed 2D array of cells used for neighbour lookups."""
from __future__ import annotations

from typing import Iterator

from inkball.components import Cell, Entity, Hole, Wall
from inkball.types import BOARD_HEIGHT, BOARD_WIDTH, CELL, TOPBAR


def cell_to_pixel(row: int, col: int) -> tuple[int, int]:
    return col * CELL, row * CELL + TOPBAR


def pixel_to_cell(x: float, y: float) -> tuple[int, int]:
    """Inverse of cell_to_pixel with integer truncation. Returns (row, col)."""
    return int((y - TOPBAR) / CELL), int(x / CELL)


class Grid:
    def __init__(self, width: int = BOARD_WIDTH, height: int = BOARD_HEIGHT) -> None:
        self._width = width
        self._height = height
        self._cells = [
            [Cell(*cell_to_pixel(r, c)) for c in range(width)]
            for r in range(height)
        ]

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self._height and 0 <= col < self._width

    def _check_bounds(self, row: int, col: int) -> None:
        if not self.in_bounds(row, col):
            raise ValueError(
                f"({row}, {col}) out of bounds for {self._width}x{self._height} grid"
            )

    def cell(self, row: int, col: int) -> Cell:
        self._check_bounds(row, col)
        return self._cells[row][col]

    def at(self, row: int, col: int) -> Entity | None:
        """Entity in a cell, or None for empty and out-of-bounds cells."""
        if not self.in_bounds(row, col):
            return None
        return self._cells[row][col].entity

    def place(self, row: int, col: int, entity: Entity) -> None:
        self._check_bounds(row, col)
        self._cells[row][col].entity = entity

    def clear(self, row: int, col: int) -> None:
        self._check_bounds(row, col)
        self._cells[row][col].entity = None

    def wall_at(self, row: int, col: int) -> Wall | None:
        entity = self.at(row, col)
        return entity if isinstance(entity, Wall) else None

    def is_wall(self, row: int, col: int) -> bool:
        return self.wall_at(row, col) is not None

    def fits_hole(self, row: int, col: int) -> bool:
        return self.in_bounds(row, col) and self.in_bounds(row + 1, col + 1)

    def install_hole(self, row: int, col: int, hole: Hole) -> None:
        """Put the same hole into the 2x2 block whose top-left is (row, col)."""
        if not self.fits_hole(row, col):
            raise ValueError(f"hole at ({row}, {col}) does not fit on the grid")
        for r in (row, row + 1):
            for c in (col, col + 1):
                self._cells[r][c].entity = hole

    def rows(self) -> Iterator[list[Cell]]:
        return iter(self._cells)

    def cells(self) -> Iterator[tuple[int, int, Cell]]:
        for r, row in enumerate(self._cells):
            for c, cell in enumerate(row):
                yield r, c, cell
