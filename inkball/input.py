"""InputFeed - pointer and key events queued by the host, drained once per tick."""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Union

if TYPE_CHECKING:
    from inkball.board import Board
    from inkball.types import TickContext


class Button(Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


@dataclass(frozen=True)
class PointerDown:
    x: float
    y: float
    button: Button = Button.PRIMARY


@dataclass(frozen=True)
class PointerDrag:
    x: float
    y: float
    button: Button = Button.PRIMARY


@dataclass(frozen=True)
class PointerUp:
    x: float
    y: float
    button: Button = Button.PRIMARY


@dataclass(frozen=True)
class KeyPress:
    key: str


InputEvent = Union[PointerDown, PointerDrag, PointerUp, KeyPress]

PAUSE_KEYS = frozenset({" ", "space"})
RESTART_KEYS = frozenset({"r", "R"})


class InputFeed:
    """FIFO of input events. Safe to push between ticks."""

    def __init__(self) -> None:
        self._pending: deque[InputEvent] = deque()

    def push(self, event: InputEvent) -> None:
        self._pending.append(event)

    def pending(self) -> int:
        return len(self._pending)

    def drain(self) -> list[InputEvent]:
        events = list(self._pending)
        self._pending.clear()
        return events


def apply_pointer(board: Board, event: InputEvent) -> None:
    """Mutate the board's ink for one pointer event.

    Primary down opens a stroke, primary drag extends it, primary up drops
    it if empty. Secondary drag erases the first stroke under the pointer.
    """
    ink = board.ink
    if isinstance(event, PointerDown):
        if event.button is Button.PRIMARY:
            ink.begin()
    elif isinstance(event, PointerDrag):
        if event.button is Button.PRIMARY:
            ink.extend(event.x, event.y)
        else:
            ink.erase_at(event.x, event.y)
    elif isinstance(event, PointerUp):
        if event.button is Button.PRIMARY:
            ink.end()


def make_input_system(
    feed: InputFeed,
    on_key: Callable[[str, "TickContext"], "Board"],
) -> Callable[["Board", "TickContext"], None]:
    """Return a system that drains ``feed`` at the start of each tick.

    ``on_key(key, ctx)`` handles pause and restart keys and returns the
    board in play afterwards, so pointer events that follow a restart in
    the same batch land on the new board. Other keys are ignored.
    """

    def input_system(board: Board, ctx: TickContext) -> None:
        for event in feed.drain():
            if isinstance(event, KeyPress):
                if event.key in PAUSE_KEYS or event.key in RESTART_KEYS:
                    board = on_key(event.key, ctx)
            else:
                apply_pointer(board, event)

    return input_system
