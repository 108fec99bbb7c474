"""Millisecond clocks injected into the engine."""

import time
from typing import Protocol


class Clock(Protocol):
    def now_ms(self) -> int: ...


class ManualClock:
    """Clock that only moves when told to. Used by tests and replays."""

    def __init__(self, start: int = 0) -> None:
        self._now = start

    def now_ms(self) -> int:
        return self._now

    def advance(self, ms: int) -> int:
        if ms < 0:
            raise ValueError("clock cannot run backwards")
        self._now += ms
        return self._now


class MonotonicClock:
    """Wall-independent clock backed by time.monotonic(), starting at 0."""

    def __init__(self) -> None:
        self._origin = time.monotonic()

    def now_ms(self) -> int:
        return int((time.monotonic() - self._origin) * 1000)
