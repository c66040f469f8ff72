"""Deadline clock for CruxTimer.

A running phase is represented by an absolute end timestamp on a
monotonic time source, never by a counter that is decremented each
tick.  Remaining time is derived on demand, so skipped or late ticks
cannot introduce drift.

Pausing snapshots the remaining time; resuming arms a brand-new
deadline from that snapshot.
"""

from __future__ import annotations

import math
import time
from typing import Callable


def monotonic_ms() -> float:
    """Milliseconds on a clock immune to wall-clock adjustments."""
    return time.monotonic() * 1000.0


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_mmss(ms: int) -> str:
    """``125_000`` → ``"02:05"``.  Minutes are not capped at 59."""
    ms = max(0, int(ms))
    minutes, rest = divmod(ms, 60_000)
    return f"{minutes:02d}:{rest // 1000:02d}"


class DeadlineClock:
    """Absolute-deadline countdown with drift-free pause/resume.

    Exactly one of ``deadline`` / ``remaining_on_pause`` is meaningful at
    a time; both are ``None`` while disarmed.
    """

    def __init__(self, now: Callable[[], float] = monotonic_ms) -> None:
        self._now = now
        self._deadline: float | None = None
        self._remaining_on_pause: float | None = None

    @property
    def deadline(self) -> float | None:
        return self._deadline

    @property
    def remaining_on_pause(self) -> float | None:
        return self._remaining_on_pause

    @property
    def is_armed(self) -> bool:
        return self._deadline is not None

    @property
    def is_frozen(self) -> bool:
        return self._remaining_on_pause is not None

    def now(self) -> float:
        return self._now()

    def arm(self, duration_ms: float) -> None:
        """Start counting *duration_ms* down from now."""
        self._deadline = self._now() + max(0.0, duration_ms)
        self._remaining_on_pause = None

    def freeze(self) -> float:
        """Snapshot the remaining time and drop the deadline.

        The snapshot is kept unrounded; rounding only happens when a
        value is reported.
        """
        if self._deadline is None:
            return self._remaining_on_pause or 0.0
        self._remaining_on_pause = max(0.0, self._deadline - self._now())
        self._deadline = None
        return self._remaining_on_pause

    def thaw(self) -> None:
        """Arm a fresh deadline from the paused snapshot."""
        if self._remaining_on_pause is None:
            return
        self._deadline = self._now() + self._remaining_on_pause
        self._remaining_on_pause = None

    def clear(self) -> None:
        self._deadline = None
        self._remaining_on_pause = None

    def remaining_ms(self) -> int:
        if self._deadline is not None:
            return max(0, round_half_up(self._deadline - self._now()))
        if self._remaining_on_pause is not None:
            return max(0, round_half_up(self._remaining_on_pause))
        return 0
