"""Engine - fixed-step game loop, level lifecycle and key handling."""
from __future__ import annotations

import logging
import os
import random

from inkball.board import Board
from inkball.clock import Clock
from inkball.config import GameConfig
from inkball.input import (
    PAUSE_KEYS,
    RESTART_KEYS,
    InputEvent,
    InputFeed,
    make_input_system,
)
from inkball.level import LevelPhase, LevelState, make_level_system
from inkball.render import RenderCommand, build_frame
from inkball.systems import (
    make_brick_system,
    make_hole_system,
    make_ink_system,
    make_motion_system,
    make_spawn_system,
    make_wall_system,
)
from inkball.types import FPS, InvariantError, System, TickContext

logger = logging.getLogger(__name__)

TICK_MS = 1000 / FPS


def while_simulating(system: System) -> System:
    """Wrap ``system`` so it only runs while the level is neither paused nor converting."""

    def gated(board: Board, ctx: TickContext) -> None:
        if board.state.simulating:
            system(board, ctx)

    gated.__name__ = getattr(system, "__name__", "gated")
    return gated


class Engine:
    """Drives one game: a board per level, stepped at a fixed rate.

    Each ``step`` builds a ``TickContext`` from the injected clock and
    random source, runs the registered systems against the current board
    and returns that frame's render commands. Systems see ``self.board``
    afresh, so a restart or level change mid-tick is picked up by the
    systems that follow.
    """

    def __init__(
        self,
        config: GameConfig,
        clock: Clock,
        seed: int | None = None,
        rng: random.Random | None = None,
        level: int = 0,
    ) -> None:
        if not 0 <= level < config.total_levels:
            raise ValueError(f"level {level} out of range 0..{config.total_levels - 1}")
        if rng is None:
            if seed is None:
                seed = int.from_bytes(os.urandom(8))
            rng = random.Random(seed)
        self._config = config
        self._clock = clock
        self._seed = seed
        self._rng = rng
        self._tick_number = 0
        self._feed = InputFeed()
        self._board = Board.create(config, level, rng, clock.now_ms())
        self._systems: list[System] = []

        self.add_system(make_input_system(self._feed, self._on_key))
        for factory in (
            make_motion_system,
            make_wall_system,
            make_brick_system,
            make_ink_system,
            make_hole_system,
            make_spawn_system,
        ):
            self.add_system(while_simulating(factory()))
        self.add_system(make_level_system(self._on_converted))
        self.add_system(self._verify)

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def seed(self) -> int | None:
        return self._seed

    @property
    def feed(self) -> InputFeed:
        return self._feed

    @property
    def board(self) -> Board:
        return self._board

    @property
    def state(self) -> LevelState:
        return self._board.state

    @property
    def level(self) -> int:
        return self._board.level_index

    @property
    def phase(self) -> LevelPhase:
        return self._board.state.phase()

    @property
    def tick_number(self) -> int:
        return self._tick_number

    def add_system(self, system: System) -> None:
        self._systems.append(system)

    def push(self, event: InputEvent) -> None:
        self._feed.push(event)

    def step(self) -> list[RenderCommand]:
        self._tick_number += 1
        ctx = TickContext(
            tick_number=self._tick_number,
            now_ms=self._clock.now_ms(),
            random=self._rng,
        )
        for system in self._systems:
            system(self._board, ctx)
        return build_frame(self._board, ctx.now_ms)

    def run(self, n: int) -> None:
        for _ in range(n):
            self.step()

    def frame(self) -> list[RenderCommand]:
        """Render commands for the current state without advancing."""
        return build_frame(self._board, self._clock.now_ms())

    # ── Lifecycle ─────────────────────────────────────────────────

    def reset(self) -> Board:
        """Restart the current level, or the whole game once it has been won.

        A mid-game restart keeps the total carried in from earlier levels
        and discards the level score.
        """
        state = self._board.state
        if state.game_win:
            level, total = 0, 0
        else:
            level, total = self._board.level_index, state.total_score
        self._board = Board.create(
            self._config, level, self._rng, self._clock.now_ms(), total_score=total
        )
        logger.info("restarted at level %d", level + 1)
        return self._board

    def toggle_pause(self, now_ms: int | None = None) -> bool:
        """Flip pause while the level clock is running. Returns True if it toggled."""
        now = self._clock.now_ms() if now_ms is None else now_ms
        state = self._board.state
        if state.game_win or state.level_up:
            return False
        if state.time_is_up(now, self._board.level.time):
            return False
        if state.paused:
            state.resume(now)
        else:
            state.pause(now)
        logger.debug("paused" if state.paused else "resumed")
        return True

    def _on_key(self, key: str, ctx: TickContext) -> Board:
        if key in PAUSE_KEYS:
            self.toggle_pause(ctx.now_ms)
        elif key in RESTART_KEYS:
            self.reset()
        return self._board

    def _on_converted(self, board: Board, ctx: TickContext) -> None:
        state = board.state
        next_level = board.level_index + 1
        if next_level >= self._config.total_levels:
            state.game_win = True
            state.pause(ctx.now_ms)
            logger.info("game won with total score %d", state.total_score)
            return
        self._board = Board.create(
            self._config, next_level, self._rng, ctx.now_ms, total_score=state.total_score
        )

    def _verify(self, board: Board, ctx: TickContext) -> None:
        try:
            board.check_invariants()
        except InvariantError:
            if __debug__:
                raise
            logger.error("tick %d: board invariant violated", ctx.tick_number, exc_info=True)

