"""Render commands - a host-agnostic description of one frame.

``build_frame`` walks the board in draw order and emits plain frozen
dataclasses. Hosts map sprite names to images (or flat colours) and text
anchors to their own alignment rules; anchor names follow pygame's
``Rect`` attribute names.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from inkball.components import CellKind
from inkball.types import BALL, CELL, HEIGHT, HOLE, POINTSIZE, TOPBAR, WIDTH

if TYPE_CHECKING:
    from inkball.board import Board

RGB = tuple[int, int, int]

BACKGROUND: RGB = (123, 123, 123)
INK: RGB = (0, 0, 0)
TEXT: RGB = (0, 0, 0)
QUEUE_STRIP: RGB = (0, 0, 0)
TEXT_SIZE = 16
QUEUE_PREVIEW = 5

ENDED_BANNER = "=== ENDED ==="
TIME_UP_BANNER = "=== TIME'S UP ==="
PAUSED_BANNER = "*** PAUSED ***"


@dataclass(frozen=True)
class Fill:
    color: RGB


@dataclass(frozen=True)
class Sprite:
    name: str
    x: float
    y: float
    size: float


@dataclass(frozen=True)
class Disk:
    x: float
    y: float
    diameter: float
    color: RGB


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float
    color: RGB


@dataclass(frozen=True)
class Text:
    text: str
    x: float
    y: float
    anchor: str
    size: int = TEXT_SIZE
    color: RGB = TEXT


RenderCommand = Union[Fill, Sprite, Disk, Rect, Text]


def ball_visible(x: float, y: float) -> bool:
    return x >= 0 and x + BALL < WIDTH and y >= TOPBAR and y + BALL <= HEIGHT


def banner_for(board: Board, now_ms: int) -> str | None:
    state = board.state
    if state.game_win:
        return ENDED_BANNER
    if state.game_over and not state.level_up and state.time_is_up(now_ms, board.level.time):
        return TIME_UP_BANNER
    if state.paused and not state.level_up:
        return PAUSED_BANNER
    return None


def build_frame(board: Board, now_ms: int) -> list[RenderCommand]:
    """Draw order: background, tiles, walls, holes, spawners, ink, balls, top bar."""
    state = board.state
    out: list[RenderCommand] = [Fill(BACKGROUND)]

    for _r, _c, cell in board.grid.cells():
        if cell.kind is CellKind.TILE:
            out.append(Sprite("tile", cell.x, cell.y, CELL))
    for wall in board.walls:
        out.append(Sprite(wall.sprite, wall.x, wall.y, CELL))
    for hole in board.holes:
        out.append(Sprite(f"hole{hole.color}", hole.x, hole.y, HOLE))
    for spawner in board.spawners:
        out.append(Sprite("entrypoint", spawner.x, spawner.y, CELL))

    for line in board.ink:
        for p in line:
            out.append(Disk(p.x, p.y, POINTSIZE, INK))

    for ball in board.roster:
        if ball.absorbed or not ball_visible(ball.x, ball.y):
            continue
        out.append(Sprite(f"ball{ball.color}", ball.x, ball.y, BALL * ball.display_scale))

    out.append(Rect(CELL / 2, (TOPBAR - CELL) / 2, QUEUE_PREVIEW * CELL, CELL, QUEUE_STRIP))
    for i, ball in enumerate(list(board.queue)[:QUEUE_PREVIEW]):
        out.append(
            Sprite(f"ball{ball.color}", i * CELL + CELL - BALL / 2, (TOPBAR - BALL) / 2, BALL)
        )

    if board.queue and board.spawners:
        out.append(
            Text(f"{board.spawn_countdown(now_ms):.1f}", 6 * CELL, TOPBAR / 2, "midleft")
        )

    if state.level_up:
        for wall in state.rotating_walls:
            out.append(Sprite(wall.sprite, wall.x, wall.y, CELL))

    out.append(Text(f"Score: {state.score}", WIDTH - CELL / 2, TOPBAR / 2, "bottomright"))
    out.append(Text(f"Time: {board.time_left(now_ms)}", WIDTH - CELL / 2, TOPBAR, "bottomright"))

    banner = banner_for(board, now_ms)
    if banner is not None:
        out.append(Text(banner, WIDTH / 2 + CELL, TOPBAR / 2, "center"))
    return out
