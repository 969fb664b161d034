"""Wall clock advanced by the 100 Hz timer tick."""

from __future__ import annotations

from collections.abc import Callable

from .formatting import sprintf

__all__ = ["WallClock", "TICK_MS"]

TICK_MS = 10


class WallClock:
    """Hours, minutes, seconds and milliseconds, with an optional tick hook."""

    def __init__(self) -> None:
        self.hh = 0
        self.mm = 0
        self.ss = 0
        self.ms = 0
        self._hook: Callable[[], object] | None = None

    def set(self, h: int, m: int, s: int) -> None:
        """Set the time; out-of-range parts become zero."""
        self.hh = 0 if h < 0 or h > 24 else h
        # The minute check looks at the hour's upper bound, as the kernel does.
        self.mm = 0 if m < 0 or h > 60 else m
        self.ss = 0 if s < 0 or s > 60 else s

    def get(self) -> tuple[int, int, int]:
        """The current ``(hours, minutes, seconds)``."""
        return self.hh, self.mm, self.ss

    def set_hook(self, func: Callable[[], object] | None) -> None:
        """Install a function called after every tick, or ``None`` to remove it."""
        self._hook = func

    def tick(self) -> None:
        """Advance by one timer tick and run the hook."""
        self.ms += TICK_MS
        if self.ms >= 1000:
            self.ms = 0
            self.ss += 1
        if self.ss >= 60:
            self.ss = 0
            self.mm += 1
        if self.mm >= 60:
            self.mm = 0
            self.hh += 1
        if self.hh >= 24:
            self.hh = 0
        if self._hook is not None:
            self._hook()

    def timestamp(self) -> str:
        """The time as ``[hh:mm:ss:mmm]``."""
        return sprintf("[%02d:%02d:%02d:%03d]", self.hh, self.mm, self.ss, self.ms)