"""Tests for the input feed and its dispatch."""
from __future__ import annotations

import random

from inkball.board import Board
from inkball.config import GameConfig
from inkball.input import (
    Button,
    InputFeed,
    KeyPress,
    PointerDown,
    PointerDrag,
    PointerUp,
    make_input_system,
)
from inkball.types import TickContext


def _board() -> Board:
    config = GameConfig.from_dict(
        {
            "levels": [
                {
                    "layout": "inline",
                    "layout_text": "S",
                    "time": 60,
                    "spawn_interval": 5,
                    "score_increase_from_hole_capture_modifier": 1.0,
                    "score_decrease_from_wrong_hole_modifier": 1.0,
                    "balls": ["grey"],
                }
            ],
            "score_increase_from_hole_capture": {},
            "score_decrease_from_wrong_hole": {},
        }
    )
    return Board.create(config, 0, random.Random(0), now_ms=0)


def _ctx() -> TickContext:
    return TickContext(tick_number=1, now_ms=0, random=random.Random(0))


class TestInputFeed:
    def test_fifo_drain(self) -> None:
        feed = InputFeed()
        events = [PointerDown(1, 2), KeyPress("r"), PointerUp(1, 2)]
        for event in events:
            feed.push(event)
        assert feed.pending() == 3
        assert feed.drain() == events
        assert feed.pending() == 0
        assert feed.drain() == []


class TestInputSystem:
    def test_pointer_events_edit_ink(self) -> None:
        board = _board()
        feed = InputFeed()
        system = make_input_system(feed, lambda key, ctx: board)
        for event in (
            PointerDown(10, 100),
            PointerDrag(10, 100),
            PointerDrag(20, 100),
            PointerUp(20, 100),
        ):
            feed.push(event)
        system(board, _ctx())
        assert len(board.ink) == 1
        assert len(board.ink.lines[0]) == 2

    def test_secondary_drag_erases(self) -> None:
        board = _board()
        board.ink.begin()
        board.ink.extend(50, 150)
        feed = InputFeed()
        feed.push(PointerDrag(52, 148, Button.SECONDARY))
        make_input_system(feed, lambda key, ctx: board)(board, _ctx())
        assert len(board.ink) == 0

    def test_keys_are_forwarded(self) -> None:
        board = _board()
        feed = InputFeed()
        keys = []

        def on_key(key: str, ctx: TickContext) -> Board:
            keys.append(key)
            return board

        for key in (" ", "x", "R", "space", "r"):
            feed.push(KeyPress(key))
        make_input_system(feed, on_key)(board, _ctx())
        assert keys == [" ", "R", "space", "r"]

    def test_pointer_after_restart_lands_on_new_board(self) -> None:
        old, new = _board(), _board()
        feed = InputFeed()
        feed.push(KeyPress("r"))
        feed.push(PointerDown(10, 100))
        feed.push(PointerDrag(10, 100))
        make_input_system(feed, lambda key, ctx: new)(old, _ctx())
        assert len(old.ink) == 0
        assert len(new.ink) == 1
