"""System factories for the per-tick gameplay pipeline.

Each factory returns a ``(board, ctx) -> None`` closure. The engine runs
them in order: motion, walls, brick cleanup, ink, holes, spawn.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from inkball import vec
from inkball.collision import (
    find_ink_hit,
    hole_captures,
    hole_pull,
    ink_reflection,
    reflect_off_boundary,
    resolve_wall_collision,
)

if TYPE_CHECKING:
    from inkball.board import Board
    from inkball.types import TickContext

logger = logging.getLogger(__name__)


def make_motion_system() -> Callable[["Board", "TickContext"], None]:
    """Advance every active ball one step and bounce it off the play area edges.

    Per-tick flags are cleared here, so they never survive into the next
    frame.
    """

    def motion_system(board: "Board", ctx: "TickContext") -> None:
        for ball in board.active:
            if ball.absorbed:
                continue
            ball.advance()
            ball.set_velocity(*reflect_off_boundary(ball.x, ball.y, ball.vx, ball.vy))
            ball.reset_flags()

    return motion_system


def make_wall_system() -> Callable[["Board", "TickContext"], None]:
    """Resolve at most one wall hit per ball per tick, walls in list order."""

    def wall_system(board: "Board", ctx: "TickContext") -> None:
        for wall in board.walls:
            for ball in board.active:
                if ball.wall_collided:
                    continue
                resolve_wall_collision(wall, ball, board.grid)

    return wall_system


def make_brick_system() -> Callable[["Board", "TickContext"], None]:
    """Drop bricks whose hit count has reached the limit."""

    def brick_system(board: "Board", ctx: "TickContext") -> None:
        for wall in [w for w in board.walls if w.broken]:
            board.remove_wall(wall)
            logger.debug("brick at %s broke", wall.cell)

    return brick_system


def make_ink_system() -> Callable[["Board", "TickContext"], None]:
    """Bounce balls off ink. A struck polyline is consumed whole."""

    def ink_system(board: "Board", ctx: "TickContext") -> None:
        for ball in board.active:
            if ball.line_collided:
                continue
            center = ball.center
            for line in board.ink:
                hit = find_ink_hit(line, center)
                if hit is None:
                    continue
                p1, p2 = hit
                ball.set_velocity(*ink_reflection(p1, p2, center, ball.velocity))
                ball.line_collided = True
                board.ink.remove(line)
                break

    return ink_system


def make_hole_system() -> Callable[["Board", "TickContext"], None]:
    """Capture, requeue or attract balls near holes.

    A matching capture absorbs the ball and credits the level score. A
    mismatch sends the ball to the back of the spawn queue and debits it.
    Balls within one cell of a hole centre are pulled toward it by every
    such hole.
    """

    def hole_system(board: "Board", ctx: "TickContext") -> None:
        state = board.state
        level = board.level_index
        config = board.config
        for hole in board.holes:
            hole_center = hole.center
            for ball in list(board.active):
                if ball not in board.active:
                    continue
                center = ball.center
                if hole_captures(center, hole_center):
                    board.active.remove(ball)
                    if hole.accepts(ball.color):
                        ball.absorbed = True
                        state.add_score(config.capture_score(level, ball.color))
                        logger.debug("ball colour %d captured", ball.color)
                    else:
                        ball.park()
                        board.queue.append(ball)
                        state.add_score(-config.miss_score(level, ball.color))
                        if len(board.queue) == 1:
                            state.last_spawn_time = ctx.now_ms
                        logger.debug(
                            "ball colour %d missed hole colour %d", ball.color, hole.color
                        )
                    continue
                pull = hole_pull(center, hole_center)
                if pull is not None:
                    nudge, display_scale = pull
                    ball.set_velocity(*vec.add(ball.velocity, nudge))
                    ball.display_scale = display_scale
                    ball.being_absorbed = True
                elif not ball.being_absorbed:
                    ball.display_scale = 1.0

    return hole_system


def make_spawn_system() -> Callable[["Board", "TickContext"], None]:
    """Launch the head of the queue from a random spawner once the interval has elapsed."""

    def spawn_system(board: "Board", ctx: "TickContext") -> None:
        state = board.state
        if not board.queue or not board.spawners:
            return
        if ctx.now_ms - state.last_spawn_time < board.level.spawn_interval * 1000:
            return
        spawner = ctx.random.choice(board.spawners)
        ball = board.queue.popleft()
        ball.launch(float(spawner.x), float(spawner.y), ctx.random)
        board.active.append(ball)
        state.last_spawn_time = ctx.now_ms
        logger.debug("spawned ball colour %d at (%d, %d)", ball.color, spawner.x, spawner.y)

    return spawn_system
