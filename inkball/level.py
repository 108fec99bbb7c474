"""Level state, phase machine, score-to-time conversion and perimeter rotation."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable

from inkball.components import Wall
from inkball.grid import cell_to_pixel
from inkball.types import BOARD_HEIGHT, BOARD_WIDTH, FPS, TOPBAR, TickContext

if TYPE_CHECKING:
    from inkball.board import Board

logger = logging.getLogger(__name__)

# 0.067 s per conversion step, evaluated in floating point: round(2.01) == 2.
FRAMES_PER_CONVERSION = max(1, round(0.067 * FPS))
CONVERSION_STEP_MS = 1000
ROTATING_WALL_COLOR = 4


class LevelPhase(str, Enum):
    RUNNING = "running"
    PAUSED = "paused"
    LEVELUP_CONVERTING = "levelup_converting"
    TIME_UP = "time_up"
    GAME_WIN = "game_win"


def perimeter_step(row: int, col: int) -> tuple[int, int]:
    """Next cell clockwise around the board edge.

    Top edge rightward, right edge downward, bottom edge leftward, left
    edge upward.
    """
    if row == 0 and col < BOARD_WIDTH - 1:
        return row, col + 1
    if col == BOARD_WIDTH - 1 and row < BOARD_HEIGHT - 1:
        return row + 1, col
    if row == BOARD_HEIGHT - 1 and col > 0:
        return row, col - 1
    return row - 1, col


def rotate(wall: Wall) -> None:
    row, col = wall.cell
    wall.x, wall.y = cell_to_pixel(*perimeter_step(row, col))


def make_rotating_walls() -> list[Wall]:
    return [
        Wall(0, TOPBAR, ROTATING_WALL_COLOR),
        Wall(*cell_to_pixel(BOARD_HEIGHT - 1, BOARD_WIDTH - 1), ROTATING_WALL_COLOR),
    ]


@dataclass
class LevelState:
    """Per-level timers, flags and scores. ``total_score`` carries over between levels."""

    start_time: int = 0
    last_spawn_time: int = 0
    paused: bool = False
    paused_at: int = 0
    game_over: bool = False
    level_up: bool = False
    game_win: bool = False
    level_score: int = 0
    total_score: int = 0
    remaining_time_ms: int | None = None
    conversion_countdown: int = 0
    rotating_walls: list[Wall] = field(default_factory=make_rotating_walls)

    @classmethod
    def begin(cls, now_ms: int, total_score: int = 0) -> LevelState:
        return cls(start_time=now_ms, last_spawn_time=now_ms, total_score=total_score)

    @property
    def score(self) -> int:
        return self.total_score + self.level_score

    def clock_ms(self, now_ms: int) -> int:
        """The level's notion of "now": frozen at ``paused_at`` while paused."""
        return self.paused_at if self.paused else now_ms

    def elapsed_ms(self, now_ms: int) -> int:
        return self.clock_ms(now_ms) - self.start_time

    def time_is_up(self, now_ms: int, limit_s: int) -> bool:
        return self.elapsed_ms(now_ms) // 1000 >= limit_s

    def add_score(self, delta: float) -> None:
        # Truncate toward zero on accumulation.
        self.level_score = int(self.level_score + delta)

    def pause(self, now_ms: int) -> None:
        if not self.paused:
            self.paused = True
            self.paused_at = now_ms

    def resume(self, now_ms: int) -> None:
        if self.paused:
            frozen = now_ms - self.paused_at
            self.start_time += frozen
            self.last_spawn_time += frozen
            self.paused = False

    def phase(self) -> LevelPhase:
        if self.game_win:
            return LevelPhase.GAME_WIN
        if self.level_up:
            return LevelPhase.LEVELUP_CONVERTING
        if self.game_over:
            return LevelPhase.TIME_UP
        if self.paused:
            return LevelPhase.PAUSED
        return LevelPhase.RUNNING

    @property
    def simulating(self) -> bool:
        return not self.paused and not self.level_up

    def enter_level_up(self, now_ms: int) -> None:
        self.level_up = True
        self.game_over = True
        self.total_score += self.level_score
        self.level_score = 0
        self.pause(now_ms)
        if self.remaining_time_ms is None:
            self.remaining_time_ms = now_ms - self.start_time

    def convert_step(self) -> bool:
        """Advance the score-to-time conversion by one frame.

        Returns True once the remaining time has been fully converted.
        """
        if self.remaining_time_ms is None:
            return False
        if self.remaining_time_ms > 0:
            if self.conversion_countdown - 1 <= 0:
                self.remaining_time_ms = max(0, self.remaining_time_ms - CONVERSION_STEP_MS)
                self.total_score += 1
                for wall in self.rotating_walls:
                    rotate(wall)
                self.conversion_countdown = FRAMES_PER_CONVERSION
            else:
                self.conversion_countdown -= 1
        return self.remaining_time_ms <= 0


def make_level_system(
    on_converted: Callable[[Board, TickContext], None],
) -> Callable[[Board, TickContext], None]:
    """Return a system that drives level transitions at the end of a tick.

    ``on_converted`` fires once the level-up conversion has drained the
    remaining time; the caller decides whether to advance or declare a win.
    """

    def level_system(board: Board, ctx: TickContext) -> None:
        state = board.state
        now = ctx.now_ms
        if state.game_win:
            return
        if state.level_up:
            if state.convert_step():
                on_converted(board, ctx)
            return
        if board.all_absorbed():
            state.enter_level_up(now)
            logger.info(
                "level %d cleared, total score %d", board.level_index + 1, state.total_score
            )
            return
        if not state.game_over and state.time_is_up(now, board.level.time):
            state.game_over = True
            state.pause(now)
            logger.info("level %d: time is up", board.level_index + 1)

    return level_system
