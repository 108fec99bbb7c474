"""Board - the mutable world of one level."""
from __future__ import annotations

import logging
import random
from collections import deque

from inkball.components import Ball, CellKind, Hole, Spawner, Wall
from inkball.config import GameConfig, LevelConfig
from inkball.grid import Grid, pixel_to_cell
from inkball.ink import InkStore
from inkball.layout import parse_layout
from inkball.level import LevelState
from inkball.types import PARK_POSITION, InvariantError

logger = logging.getLogger(__name__)


class Board:
    """Grid, entities, ball roster and ink for the level being played.

    Walls live both in ``walls`` (iteration order) and in the grid (neighbour
    lookups); ``remove_wall`` keeps the two views in step. Every ball in
    ``roster`` is exactly one of: on the board (``active``), waiting in
    ``queue``, or absorbed.
    """

    def __init__(
        self,
        config: GameConfig,
        level_index: int,
        grid: Grid,
        state: LevelState,
    ) -> None:
        self.config = config
        self.level_index = level_index
        self.grid = grid
        self.state = state
        self.walls: list[Wall] = []
        self.holes: list[Hole] = []
        self.spawners: list[Spawner] = []
        self.roster: list[Ball] = []
        self.queue: deque[Ball] = deque()
        self.active: list[Ball] = []
        self.ink = InkStore()

    @classmethod
    def create(
        cls,
        config: GameConfig,
        level_index: int,
        rng: random.Random,
        now_ms: int,
        total_score: int = 0,
    ) -> Board:
        """Build the board for ``level_index`` from its layout and ball list."""
        level = config.levels[level_index]
        layout = parse_layout(level.layout_text, rng)
        board = cls(config, level_index, layout.grid, LevelState.begin(now_ms, total_score))
        board.walls = layout.walls
        board.holes = layout.holes
        board.spawners = layout.spawners

        for color in level.balls:
            ball = Ball(*PARK_POSITION, color)
            board.roster.append(ball)
            board.queue.append(ball)
        for ball in layout.balls:
            board.roster.append(ball)
            board.active.append(ball)

        if board.queue and not board.spawners:
            logger.warning(
                "level %d has %d queued ball(s) but no spawner",
                level_index + 1,
                len(board.queue),
            )
        logger.info(
            "level %d started: %d wall(s), %d hole(s), %d ball(s)",
            level_index + 1,
            len(board.walls),
            len(board.holes),
            len(board.roster),
        )
        return board

    @property
    def level(self) -> LevelConfig:
        return self.config.levels[self.level_index]

    def all_absorbed(self) -> bool:
        return all(ball.absorbed for ball in self.roster)

    def remove_wall(self, wall: Wall) -> None:
        row, col = wall.cell
        if self.grid.at(row, col) is wall:
            self.grid.clear(row, col)
        self.walls = [w for w in self.walls if w is not wall]

    def spawn_countdown(self, now_ms: int) -> float:
        """Seconds until the next spawn, as shown in the top bar."""
        now = self.state.clock_ms(now_ms)
        return (self.level.spawn_interval * 1000 - (now - self.state.last_spawn_time)) / 1000

    def time_left(self, now_ms: int) -> int:
        """Whole seconds left on the level timer; conversion time while levelling up."""
        state = self.state
        if state.level_up and state.remaining_time_ms is not None:
            return state.remaining_time_ms // 1000
        return max(0, self.level.time - state.elapsed_ms(now_ms) // 1000)

    def check_invariants(self) -> None:
        """Raise InvariantError if the roster or wall bookkeeping is inconsistent."""
        active = {id(b) for b in self.active}
        queued = {id(b) for b in self.queue}
        if len(active) != len(self.active) or len(queued) != len(self.queue):
            raise InvariantError("ball listed twice in the active set or queue")
        roster = {id(b) for b in self.roster}
        if not (active | queued) <= roster:
            raise InvariantError("ball on the board or queue is not in the roster")
        for ball in self.roster:
            places = (id(ball) in active) + (id(ball) in queued) + ball.absorbed
            if places != 1:
                raise InvariantError(
                    f"ball {ball!r} is in {places} of board/queue/absorbed"
                )

        listed = {id(w) for w in self.walls}
        for wall in self.walls:
            if self.grid.at(*wall.cell) is not wall:
                raise InvariantError(f"wall at {wall.cell} missing from its grid cell")
        for r, c, cell in self.grid.cells():
            if cell.kind is CellKind.WALL and id(cell.entity) not in listed:
                raise InvariantError(f"grid cell ({r}, {c}) holds an unlisted wall")
        for hole in self.holes:
            row, col = pixel_to_cell(hole.x, hole.y)
            for r in (row, row + 1):
                for c in (col, col + 1):
                    if self.grid.at(r, c) is not hole:
                        raise InvariantError(f"hole quadrant ({r}, {c}) not installed")

