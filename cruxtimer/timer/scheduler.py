"""Frame schedulers that drive :class:`~cruxtimer.timer.engine.TimerEngine`.

The engine never sleeps or spawns threads.  It asks a scheduler to call
it back "on the next frame" and cancels that request when it stops.

``QtFrameScheduler``   Production: a single-shot ``QTimer`` at ~60 Hz.
``ManualScheduler``    Tests / simulation: a virtual clock that only
                       moves when told to.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol

from PyQt6.QtCore import QObject, Qt, QTimer

from .clock import monotonic_ms


FRAME_INTERVAL_MS = 16


class FrameScheduler(Protocol):
    def now(self) -> float: ...

    def schedule_next(self, callback: Callable[[], None]) -> Any: ...

    def cancel(self, handle: Any) -> None: ...


# ── Qt event loop ─────────────────────────────────────────────────────────


class QtFrameScheduler(QObject):
    """Runs one pending callback per frame on the Qt event loop.

    Handles are integers; a stale handle passed to :meth:`cancel` is
    ignored.
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        interval_ms: int = FRAME_INTERVAL_MS,
    ) -> None:
        super().__init__(parent)
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._on_timeout)
        self._callback: Callable[[], None] | None = None
        self._handle = 0

    def now(self) -> float:
        return monotonic_ms()

    def schedule_next(self, callback: Callable[[], None]) -> int:
        self._handle += 1
        self._callback = callback
        self._timer.start()
        return self._handle

    def cancel(self, handle: int) -> None:
        if handle != self._handle or self._callback is None:
            return
        self._timer.stop()
        self._callback = None

    @property
    def is_pending(self) -> bool:
        return self._callback is not None

    def _on_timeout(self) -> None:
        callback, self._callback = self._callback, None
        if callback is not None:
            callback()


# ── virtual clock ─────────────────────────────────────────────────────────


class ManualScheduler:
    """Deterministic scheduler with a hand-advanced clock.

    Usage::

        sched = ManualScheduler()
        engine = TimerEngine(callbacks, sched)
        engine.start(Mode.SESSION, 2000, 5)
        sched.advance_to(1500)   # runs the pending frame at t=1500
    """

    def __init__(self, start_ms: float = 0.0, frame_ms: float = FRAME_INTERVAL_MS) -> None:
        self._now = float(start_ms)
        self.frame_ms = frame_ms
        self._pending: dict[int, Callable[[], None]] = {}
        self._next_handle = 0

    def now(self) -> float:
        return self._now

    def schedule_next(self, callback: Callable[[], None]) -> int:
        self._next_handle += 1
        self._pending[self._next_handle] = callback
        return self._next_handle

    def cancel(self, handle: int) -> None:
        self._pending.pop(handle, None)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def set_time(self, t_ms: float) -> None:
        """Move the clock without running anything (a suspended host)."""
        if t_ms < self._now:
            raise ValueError("the clock cannot run backwards")
        self._now = float(t_ms)

    def advance_to(self, t_ms: float) -> int:
        """Move the clock to *t_ms* and run the frame that is due.

        Callbacks registered while running are left for the next frame.
        Returns the number of callbacks run.
        """
        self.set_time(t_ms)
        due, self._pending = self._pending, {}
        for callback in due.values():
            callback()
        return len(due)

    def advance(self, delta_ms: float) -> int:
        return self.advance_to(self._now + delta_ms)

    def run_for(self, duration_ms: float, step_ms: float | None = None) -> int:
        """Run frames every *step_ms* (default: one frame) for *duration_ms*."""
        step = step_ms or self.frame_ms
        end = self._now + duration_ms
        frames = 0
        while self._now + step <= end:
            frames += self.advance(step)
        if self._now < end:
            frames += self.advance_to(end)
        return frames
