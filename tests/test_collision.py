"""Tests for collision predicates and responses."""
from __future__ import annotations

import math

import pytest

from inkball import vec
from inkball.collision import (
    Side,
    classify_side,
    find_ink_hit,
    hole_captures,
    hole_pull,
    ink_reflection,
    reflect_off_boundary,
    resolve_wall_collision,
    segment_hit,
)
from inkball.components import Ball, Point, Wall
from inkball.grid import Grid, cell_to_pixel


def _wall(grid: Grid, row: int, col: int, color: int = 0, is_brick: bool = False) -> Wall:
    wall = Wall(*cell_to_pixel(row, col), color=color, is_brick=is_brick)
    grid.place(row, col, wall)
    return wall


def _ball(
    x: float, y: float, vx: float, vy: float, last: tuple[float, float], color: int = 0
) -> Ball:
    ball = Ball(x, y, color, vx, vy)
    ball.last_x, ball.last_y = last
    return ball


# ── boundary ──────────────────────────────────────────────────────


class TestBoundary:
    def test_inside_is_unchanged(self) -> None:
        assert reflect_off_boundary(100, 200, 2, -2) == (2, -2)

    def test_left_and_right(self) -> None:
        assert reflect_off_boundary(-1, 200, -2, 2) == (2, 2)
        assert reflect_off_boundary(553, 200, 2, 2) == (-2, 2)

    def test_top_bar_and_bottom(self) -> None:
        assert reflect_off_boundary(100, 63, 2, -2) == (2, 2)
        assert reflect_off_boundary(100, 617, 2, 2) == (2, -2)

    def test_corner_inverts_both(self) -> None:
        assert reflect_off_boundary(-1, 63, -2, -2) == (2, 2)

    def test_touching_the_edge_is_inside(self) -> None:
        assert reflect_off_boundary(552, 616, 2, 2) == (2, 2)


# ── side classification ───────────────────────────────────────────


class TestClassifySide:
    # Wall cell (2, 2) spans x 64..96, y 128..160.

    def test_top(self) -> None:
        assert classify_side(64, 128, 68, 110) is Side.TOP

    def test_bottom(self) -> None:
        assert classify_side(64, 128, 68, 150) is Side.BOTTOM

    def test_left(self) -> None:
        assert classify_side(64, 128, 45, 132) is Side.LEFT

    def test_right(self) -> None:
        assert classify_side(64, 128, 90, 132) is Side.RIGHT

    def test_no_overlap(self) -> None:
        assert classify_side(64, 128, 200, 132) is None
        assert classify_side(64, 128, 68, 104) is None

    def test_top_wins_over_left(self) -> None:
        # Overlaps both the top and left edges; top is tested first.
        assert classify_side(64, 128, 45, 110) is Side.TOP


# ── wall resolution ───────────────────────────────────────────────


class TestFlatWallHits:
    def test_middle_top_flips_vy(self) -> None:
        grid = Grid()
        wall = _wall(grid, 2, 2)
        ball = _ball(68, 110, 2, 2, last=(66, 100))
        assert resolve_wall_collision(wall, ball, grid)
        assert ball.velocity == (2, -2)
        assert ball.wall_collided

    def test_middle_top_anti_trap(self) -> None:
        grid = Grid()
        wall = _wall(grid, 2, 2)
        # Already overlapping the top edge last frame and moving up:
        # the flip would send it back in, the clamp keeps it leaving.
        ball = _ball(68, 110, 2, -2, last=(66, 108))
        resolve_wall_collision(wall, ball, grid)
        assert ball.vy == -2

    def test_middle_bottom_flips_vy(self) -> None:
        grid = Grid()
        wall = _wall(grid, 2, 2)
        ball = _ball(68, 150, 2, -2, last=(66, 170))
        resolve_wall_collision(wall, ball, grid)
        assert ball.velocity == (2, 2)

    def test_left_side(self) -> None:
        grid = Grid()
        wall = _wall(grid, 2, 2)
        ball = _ball(45, 132, 2, 2, last=(43, 130))
        resolve_wall_collision(wall, ball, grid)
        assert ball.velocity == (-2, 2)

    def test_right_side(self) -> None:
        grid = Grid()
        wall = _wall(grid, 2, 2)
        ball = _ball(90, 132, -2, 2, last=(92, 130))
        resolve_wall_collision(wall, ball, grid)
        assert ball.velocity == (2, 2)

    def test_flat_hit_preserves_speed(self) -> None:
        grid = Grid()
        wall = _wall(grid, 2, 2)
        ball = _ball(68, 110, 2, 2, last=(66, 100))
        before = vec.magnitude(ball.velocity)
        resolve_wall_collision(wall, ball, grid)
        assert math.isclose(vec.magnitude(ball.velocity), before)

    def test_miss_changes_nothing(self) -> None:
        grid = Grid()
        wall = _wall(grid, 2, 2)
        ball = _ball(300, 300, 2, 2, last=(298, 298))
        assert not resolve_wall_collision(wall, ball, grid)
        assert ball.velocity == (2, 2)
        assert not ball.wall_collided
        assert wall.hits == 0

    def test_next_position_follows_new_velocity(self) -> None:
        grid = Grid()
        wall = _wall(grid, 2, 2)
        ball = _ball(68, 110, 2, 2, last=(66, 100))
        resolve_wall_collision(wall, ball, grid)
        assert (ball.next_x, ball.next_y) == (70, 108)


class TestWallSideEffects:
    def test_coloured_wall_repaints_and_takes_damage(self) -> None:
        grid = Grid()
        wall = _wall(grid, 2, 2, color=3)
        ball = _ball(68, 110, 2, 2, last=(66, 100), color=1)
        resolve_wall_collision(wall, ball, grid)
        assert ball.color == 3
        assert wall.hits == 1

    def test_neutral_wall_keeps_ball_colour(self) -> None:
        grid = Grid()
        wall = _wall(grid, 2, 2)
        ball = _ball(68, 110, 2, 2, last=(66, 100), color=2)
        resolve_wall_collision(wall, ball, grid)
        assert ball.color == 2
        assert wall.hits == 1


class TestCorners:
    # Ball approaching the top-left corner of wall (2, 2) at (64, 128).

    @pytest.mark.parametrize(
        "last, expected",
        [
            ((43, 108), (2, -2)),  # came down past the wall's left edge
            ((38, 108), (-2, 2)),  # came across from the left
            ((38, 100), (-2, -2)),  # clean diagonal
        ],
    )
    def test_isolated_corner_uses_approach(
        self, last: tuple[float, float], expected: tuple[float, float]
    ) -> None:
        grid = Grid()
        wall = _wall(grid, 2, 2)
        ball = _ball(45, 110, 2, 2, last=last)
        resolve_wall_collision(wall, ball, grid)
        assert ball.velocity == expected

    def test_column_continuation_flips_vx(self) -> None:
        grid = Grid()
        wall = _wall(grid, 2, 2)
        _wall(grid, 1, 2)
        ball = _ball(45, 110, 2, 2, last=(43, 108))
        resolve_wall_collision(wall, ball, grid)
        assert ball.velocity == (-2, 2)

    def test_row_continuation_flips_vy(self) -> None:
        grid = Grid()
        wall = _wall(grid, 2, 2)
        _wall(grid, 2, 1)
        ball = _ball(45, 110, 2, 2, last=(38, 108))
        resolve_wall_collision(wall, ball, grid)
        assert ball.velocity == (2, -2)

    def test_diagonal_neighbour_inverts_both(self) -> None:
        grid = Grid()
        wall = _wall(grid, 2, 2)
        _wall(grid, 1, 2)
        _wall(grid, 1, 1)
        ball = _ball(45, 110, 2, 2, last=(43, 108))
        resolve_wall_collision(wall, ball, grid)
        assert ball.velocity == (-2, -2)

    def test_top_row_corner_flips_vx(self) -> None:
        grid = Grid()
        wall = _wall(grid, 0, 2)
        ball = _ball(45, 46, 2, 2, last=(43, 44))
        resolve_wall_collision(wall, ball, grid)
        assert ball.velocity == (-2, 2)

    def test_bottom_right_corner(self) -> None:
        # Ball below and right of wall (2, 2), moving up-left.
        grid = Grid()
        wall = _wall(grid, 2, 2)
        ball = _ball(90, 150, -2, -2, last=(92, 152))
        resolve_wall_collision(wall, ball, grid)
        assert ball.velocity == (-2, 2)

    def test_corner_preserves_speed(self) -> None:
        grid = Grid()
        wall = _wall(grid, 2, 2)
        _wall(grid, 1, 1)
        ball = _ball(45, 110, 2, 2, last=(43, 108))
        resolve_wall_collision(wall, ball, grid)
        assert math.isclose(vec.magnitude(ball.velocity), math.hypot(2, 2))

    def test_corner_damages_matching_neighbours(self) -> None:
        grid = Grid()
        wall = _wall(grid, 2, 2)
        column = _wall(grid, 1, 2)
        diagonal = _wall(grid, 1, 1, color=3)
        row = _wall(grid, 2, 1, color=1)
        ball = _ball(45, 110, 2, 2, last=(43, 108), color=1)
        resolve_wall_collision(wall, ball, grid)
        assert wall.hits == 1
        assert column.hits == 1
        assert row.hits == 1
        assert diagonal.hits == 0

    def test_bottom_right_damages_neutral_neighbours(self) -> None:
        grid = Grid()
        wall = _wall(grid, 2, 2)
        below = _wall(grid, 3, 2)
        ball = _ball(90, 150, -2, -2, last=(92, 152), color=4)
        resolve_wall_collision(wall, ball, grid)
        assert below.hits == 1


# ── ink ───────────────────────────────────────────────────────────


class TestInk:
    def test_segment_hit(self) -> None:
        p1, p2 = Point(100, 200), Point(100, 260)
        assert segment_hit(p1, p2, (100, 230))
        assert segment_hit(p1, p2, (120, 230))
        assert not segment_hit(p1, p2, (150, 230))

    def test_reflection_uses_nearer_normal(self) -> None:
        p1, p2 = Point(100, 200), Point(100, 260)
        assert ink_reflection(p1, p2, (90, 230), (2, 2)) == (-2, 2)
        assert ink_reflection(p1, p2, (110, 230), (-2, 2)) == (2, 2)

    def test_reflection_law(self) -> None:
        p1, p2 = Point(100, 200), Point(160, 230)
        center = (120, 190)
        v = (2.0, 2.0)
        out = ink_reflection(p1, p2, center, v)
        n, _ = vec.unit_normals((100, 200), (160, 230))
        t = vec.scale(vec.sub((160, 230), (100, 200)), 1 / math.hypot(60, 30))
        assert math.isclose(vec.dot(out, n), -vec.dot(v, n))
        assert math.isclose(vec.dot(out, t), vec.dot(v, t))

    def test_equidistant_normals_leave_velocity(self) -> None:
        p1, p2 = Point(100, 200), Point(100, 260)
        assert ink_reflection(p1, p2, (100, 230), (2, 2)) == (2, 2)

    def test_zero_length_segment_leaves_velocity(self) -> None:
        p = Point(100, 200)
        assert ink_reflection(p, p, (105, 200), (2, -2)) == (2, -2)

    def test_find_first_hit_segment(self) -> None:
        line = [Point(0, 100), Point(0, 160), Point(200, 160), Point(200, 300)]
        assert find_ink_hit(line, (100, 170)) == (line[1], line[2])
        assert find_ink_hit(line, (400, 400)) is None
        assert find_ink_hit([Point(1, 1)], (1, 1)) is None


# ── holes ─────────────────────────────────────────────────────────


class TestHoles:
    def test_capture_window_is_integer_and_strict(self) -> None:
        assert hole_captures((109.9, 200.0), (100.0, 200.0))
        assert hole_captures((91.0, 191.0), (100.0, 200.0))
        assert not hole_captures((110.0, 200.0), (100.0, 200.0))
        assert not hole_captures((100.0, 210.5), (100.0, 200.0))

    def test_pull_toward_centre(self) -> None:
        result = hole_pull((100.0, 220.0), (100.0, 200.0))
        assert result is not None
        nudge, display_scale = result
        assert math.isclose(nudge[0], 0.0)
        assert math.isclose(nudge[1], -0.1)
        assert math.isclose(display_scale, 0.625)

    def test_pull_reaches_exactly_one_cell(self) -> None:
        assert hole_pull((132.0, 200.0), (100.0, 200.0)) is not None
        assert hole_pull((133.0, 200.0), (100.0, 200.0)) is None
