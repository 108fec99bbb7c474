"""Collision tests and responses for balls against the board edge, walls, ink and holes."""
from __future__ import annotations

from enum import Enum

from inkball import vec
from inkball.components import Ball, Point, Wall
from inkball.grid import Grid
from inkball.types import BALL, BOARD_HEIGHT, CELL, HEIGHT, TOPBAR, WIDTH

HOLE_CAPTURE_RADIUS = 10
HOLE_PULL = 0.005


# ── Board edge ────────────────────────────────────────────────────


def reflect_off_boundary(x: float, y: float, vx: float, vy: float) -> tuple[float, float]:
    """Velocity after bouncing off the edges of the play rectangle.

    Crossing a side and the top/bottom at once is a corner hit and inverts
    both components. Position is left alone.
    """
    out_x = x < 0 or x + BALL > WIDTH
    out_y = y < TOPBAR or y + BALL > HEIGHT
    if out_x:
        vx = -vx
    if out_y:
        vy = -vy
    return vx, vy


# ── Walls ─────────────────────────────────────────────────────────


class Side(Enum):
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


def classify_side(wx: float, wy: float, bx: float, by: float) -> Side | None:
    """Which side of the wall cell at (wx, wy) the ball rect at (bx, by) overlaps.

    Tested in order top, bottom, left, right; the first match wins.
    """
    h_overlap = wx < bx + BALL and wx + CELL > bx
    v_overlap = wy < by + BALL and wy + CELL > by
    if h_overlap and wy < by + BALL and wy > by:
        return Side.TOP
    if h_overlap and wy + CELL > by and wy + CELL < by + BALL:
        return Side.BOTTOM
    if v_overlap and wx < bx + BALL and wx > bx:
        return Side.LEFT
    if v_overlap and wx + CELL > bx and wx + CELL < bx + BALL:
        return Side.RIGHT
    return None


def _resolve_corner(wall: Wall, ball: Ball, grid: Grid, dr: int, dc: int) -> None:
    """Bounce off a wall corner, using the neighbouring cells to pick the axis.

    ``dr`` points away from the ball vertically (-1 above, +1 below) and
    ``dc`` horizontally (-1 left, +1 right). A neighbour that continues the
    same column or row turns the corner hit into a flat hit on that face.
    """
    row, col = wall.cell
    edge_row = 0 if dr < 0 else BOARD_HEIGHT - 1
    column_wall = grid.is_wall(row + dr, col)
    row_wall = grid.is_wall(row, col + dc)
    diagonal_wall = grid.is_wall(row + dr, col + dc)

    if row == edge_row:
        ball.vx = -ball.vx
    elif column_wall and not diagonal_wall:
        ball.vx = -ball.vx
    elif row_wall and not diagonal_wall:
        ball.vy = -ball.vy
    elif not column_wall and not row_wall:
        if dc < 0:
            came_vertically = ball.last_x + BALL >= wall.x
        else:
            came_vertically = ball.last_x <= wall.x + CELL
        if dr < 0:
            came_horizontally = ball.last_y + BALL >= wall.y
        else:
            came_horizontally = ball.last_y <= wall.y + CELL
        if came_vertically:
            ball.vy = -ball.vy
        elif came_horizontally:
            ball.vx = -ball.vx
        else:
            ball.vx = -ball.vx
            ball.vy = -ball.vy
    else:
        ball.vx = -ball.vx
        ball.vy = -ball.vy

    for r, c in ((row + dr, col), (row + dr, col + dc), (row, col + dc)):
        neighbour = grid.wall_at(r, c)
        if neighbour is not None:
            neighbour.hit_by(ball.color)


def resolve_wall_collision(wall: Wall, ball: Ball, grid: Grid) -> bool:
    """Bounce ``ball`` off ``wall`` if they overlap. Returns True on a hit.

    Side effects of a hit: the ball is flagged, repainted to a coloured
    wall's colour, and the wall (plus touched neighbours on a corner hit)
    takes damage when the colours match or the wall is neutral.
    """
    side = classify_side(wall.x, wall.y, ball.x, ball.y)
    if side is None:
        return False

    ball.wall_collided = True
    if wall.color > 0 and ball.color != wall.color:
        ball.color = wall.color
    wall.hit_by(ball.color)

    if side is Side.TOP or side is Side.BOTTOM:
        dr = -1 if side is Side.TOP else 1
        if wall.x > ball.x and wall.x > 0:
            _resolve_corner(wall, ball, grid, dr, -1)
        elif wall.x + CELL < ball.x + BALL and wall.x + CELL < WIDTH:
            _resolve_corner(wall, ball, grid, dr, 1)
        elif side is Side.TOP:
            ball.vy = -ball.vy
            # Already overlapping last frame: make sure it leaves upward.
            if ball.last_y < wall.y < ball.last_y + BALL:
                ball.vy = -abs(ball.vy)
        else:
            ball.vy = -ball.vy
            if ball.last_y < wall.y + CELL < ball.last_y + BALL:
                ball.vy = abs(ball.vy)
    elif side is Side.LEFT:
        ball.vx = -ball.vx
        if ball.last_x < wall.x < ball.last_x + BALL:
            ball.vx = -abs(ball.vx)
    else:
        ball.vx = -ball.vx
        if ball.last_x < wall.x + CELL < ball.last_x + BALL:
            ball.vx = abs(ball.vx)

    ball.update_next_pos()
    return True


# ── Ink ───────────────────────────────────────────────────────────


def segment_hit(p1: Point, p2: Point, center: vec.Vec) -> bool:
    """Distance-sum test: the ball centre lies inside the segment's stretched ellipse."""
    a = (p1.x, p1.y)
    b = (p2.x, p2.y)
    return vec.distance(a, center) + vec.distance(b, center) < (
        vec.distance(a, b) + BALL + BALL / 2
    )


def ink_reflection(p1: Point, p2: Point, center: vec.Vec, velocity: vec.Vec) -> vec.Vec:
    """Velocity after bouncing off segment p1→p2.

    Uses the normal whose offset from the segment midpoint lies nearer the
    ball centre. When both are equally near, velocity is unchanged.
    """
    a = (p1.x, p1.y)
    b = (p2.x, p2.y)
    mid = vec.midpoint(a, b)
    n1, n2 = vec.unit_normals(a, b)
    d1 = vec.distance(vec.add(mid, n1), center)
    d2 = vec.distance(vec.add(mid, n2), center)
    if d1 < d2:
        return vec.reflect(velocity, n1)
    if d2 < d1:
        return vec.reflect(velocity, n2)
    return velocity


def find_ink_hit(line: list[Point], center: vec.Vec) -> tuple[Point, Point] | None:
    for p1, p2 in zip(line, line[1:]):
        if segment_hit(p1, p2, center):
            return p1, p2
    return None


# ── Holes ─────────────────────────────────────────────────────────


def hole_captures(center: vec.Vec, hole_center: vec.Vec) -> bool:
    """Capture window: both integer centre offsets strictly under HOLE_CAPTURE_RADIUS."""
    return (
        abs(int(center[0]) - int(hole_center[0])) < HOLE_CAPTURE_RADIUS
        and abs(int(center[1]) - int(hole_center[1])) < HOLE_CAPTURE_RADIUS
    )


def hole_pull(center: vec.Vec, hole_center: vec.Vec) -> tuple[vec.Vec, float] | None:
    """Velocity nudge and display scale for a ball within one cell of a hole."""
    dist = vec.distance(center, hole_center)
    if dist > CELL:
        return None
    return vec.scale(vec.sub(hole_center, center), HOLE_PULL), dist / CELL
