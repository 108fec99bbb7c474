"""InkStore - the player's drawn polylines."""
from __future__ import annotations

import logging
from typing import Iterator

from inkball import vec
from inkball.components import Point
from inkball.types import POINTSIZE

logger = logging.getLogger(__name__)

Polyline = list[Point]


def polyline_length(line: Polyline) -> float:
    return sum(
        vec.distance((a.x, a.y), (b.x, b.y)) for a, b in zip(line, line[1:])
    )


class InkStore:
    """Ordered polylines. The most recent stroke is always last."""

    def __init__(self) -> None:
        self._lines: list[Polyline] = []

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[Polyline]:
        return iter(self._lines)

    @property
    def lines(self) -> list[Polyline]:
        return list(self._lines)

    def begin(self) -> Polyline:
        """Open a new, empty stroke at the end of the list."""
        line: Polyline = []
        self._lines.append(line)
        return line

    def extend(self, x: float, y: float) -> None:
        """Append a point to the most recent stroke, if any."""
        if self._lines:
            self._lines[-1].append(Point(float(x), float(y)))

    def end(self) -> None:
        """Close the current stroke, dropping it if it never got a point."""
        if self._lines and not self._lines[-1]:
            self._lines.pop()

    def remove(self, line: Polyline) -> bool:
        for i, existing in enumerate(self._lines):
            if existing is line:
                del self._lines[i]
                return True
        return False

    def erase_at(self, x: float, y: float) -> bool:
        """Erase the first polyline with a point inside the POINTSIZE square at (x, y)."""
        half = POINTSIZE / 2
        for i, line in enumerate(self._lines):
            for p in line:
                if p.x - half < x < p.x + half and p.y - half < y < p.y + half:
                    del self._lines[i]
                    logger.debug("erased stroke of %d point(s) at (%s, %s)", len(line), x, y)
                    return True
        return False

    def clear(self) -> None:
        self._lines.clear()
