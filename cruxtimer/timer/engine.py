"""Countdown engine for CruxTimer.

Phases
------
IDLE                 Not running.
RUNNING_CLIMB        Climb interval counting down.
PAUSED_CLIMB         Climb interval frozen.
RUNNING_TRANSITION   Transition interval counting down (rotation only).
PAUSED_TRANSITION    Transition interval frozen.

Transitions
-----------
IDLE → RUNNING_CLIMB                          (start)
RUNNING_x → PAUSED_x                          (pause)
PAUSED_x → RUNNING_x                          (resume)
RUNNING_CLIMB → IDLE                          (reaches 0, session mode)
RUNNING_CLIMB → RUNNING_TRANSITION            (reaches 0, rotation mode)
RUNNING_TRANSITION → RUNNING_CLIMB            (reaches 0, next round)
Any → IDLE                                    (stop)

The engine is driven by a :class:`~cruxtimer.timer.scheduler.FrameScheduler`
and reports through an :class:`EngineCallbacks` sink.  It holds no
threads and no global state; one instance owns one countdown.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from .clock import DeadlineClock
from .cues import (
    CLIMB_CUES,
    LEAD_WINDOW_MS,
    TRANSITION_CUES,
    Cue,
    CueKind,
    CuePlan,
    CueScheduler,
)
from .scheduler import FrameScheduler


logger = logging.getLogger(__name__)


# ── enums ─────────────────────────────────────────────────────────────────


class Mode(Enum):
    SESSION = "session"
    ROTATION = "rotation"


class PhaseKind(Enum):
    CLIMB = "climb"
    TRANSITION = "transition"


class Phase(Enum):
    IDLE = "idle"
    RUNNING_CLIMB = "running-climb"
    PAUSED_CLIMB = "paused-climb"
    RUNNING_TRANSITION = "running-transition"
    PAUSED_TRANSITION = "paused-transition"

    @property
    def is_running(self) -> bool:
        return self in (Phase.RUNNING_CLIMB, Phase.RUNNING_TRANSITION)

    @property
    def is_paused(self) -> bool:
        return self in (Phase.PAUSED_CLIMB, Phase.PAUSED_TRANSITION)

    @property
    def kind(self) -> PhaseKind | None:
        if self in (Phase.RUNNING_CLIMB, Phase.PAUSED_CLIMB):
            return PhaseKind.CLIMB
        if self in (Phase.RUNNING_TRANSITION, Phase.PAUSED_TRANSITION):
            return PhaseKind.TRANSITION
        return None


# ── constants ─────────────────────────────────────────────────────────────

MIN_CLIMB_MS = 1_000
DEFAULT_CLIMB_MS = 20 * 60_000
DEFAULT_TRANSITION_MS = 15 * 1_000

_RUNNING: dict[PhaseKind, Phase] = {
    PhaseKind.CLIMB: Phase.RUNNING_CLIMB,
    PhaseKind.TRANSITION: Phase.RUNNING_TRANSITION,
}

_PAUSED: dict[PhaseKind, Phase] = {
    PhaseKind.CLIMB: Phase.PAUSED_CLIMB,
    PhaseKind.TRANSITION: Phase.PAUSED_TRANSITION,
}

_CUE_PLANS: dict[PhaseKind, CuePlan] = {
    PhaseKind.CLIMB: CLIMB_CUES,
    PhaseKind.TRANSITION: TRANSITION_CUES,
}


# ── callback sink ─────────────────────────────────────────────────────────


def _ignore(*_args: Any, **_kwargs: Any) -> None:
    return None


@dataclass
class EngineCallbacks:
    """Where the engine reports.  Any slot left out is a no-op.

    on_tick(remaining_ms: int)
        Every tick while a phase is running.
    on_phase(phase: Phase)
        Every phase change, including the stop back to IDLE.
    on_round(round: int)
        Each time a climb begins.
    play_beep(frequency_hz=None, duration_ms=None, waveform=None)
        Countdown beep.  ``None`` means "use your default".
    play_buzz()
        End-of-phase and one-minute-warning buzz.
    """

    on_tick: Callable[[int], None] = _ignore
    on_phase: Callable[[Phase], None] = _ignore
    on_round: Callable[[int], None] = _ignore
    play_beep: Callable[..., None] = _ignore
    play_buzz: Callable[[], None] = _ignore


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine:
    """Single-countdown engine for session and rotation modes.

    Time comes from ``clock`` (defaults to ``scheduler.now``), a callable
    returning monotonic milliseconds.  ``lead_window_ms`` sets how early
    a cue may fire ahead of its mark.
    """

    def __init__(
        self,
        callbacks: EngineCallbacks,
        scheduler: FrameScheduler,
        *,
        clock: Callable[[], float] | None = None,
        lead_window_ms: int = LEAD_WINDOW_MS,
    ) -> None:
        self._callbacks = callbacks
        self._scheduler = scheduler
        self._clock = DeadlineClock(clock or scheduler.now)
        self._cues = CueScheduler(lead_window_ms=lead_window_ms)

        # ── configuration ─────────────────────────────────────────────
        self._mode: Mode = Mode.SESSION
        self._climb_ms: int = DEFAULT_CLIMB_MS
        self._transition_ms: int = DEFAULT_TRANSITION_MS

        # ── countdown state ───────────────────────────────────────────
        self._phase: Phase = Phase.IDLE
        self._round: int = 0
        self._last_remaining: int = 0

        # ── loop bookkeeping ──────────────────────────────────────────
        self._handle: Any = None
        self._ticking: bool = False
        self._epoch: int = 0  # bumped on every control-driven state change

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def round(self) -> int:
        """Climb phases entered since the last ``start``."""
        return self._round

    @property
    def climb_duration_ms(self) -> int:
        return self._climb_ms

    @property
    def transition_duration_ms(self) -> int:
        return self._transition_ms

    @property
    def lead_window_ms(self) -> int:
        return self._cues.lead_window_ms

    @property
    def is_running(self) -> bool:
        return self._phase.is_running

    @property
    def remaining_ms(self) -> int:
        """Time left in the current phase; 0 while idle."""
        return self._clock.remaining_ms()

    @property
    def phase_duration_ms(self) -> int:
        """Configured length of the current phase kind; 0 while idle."""
        kind = self._phase.kind
        if kind is PhaseKind.CLIMB:
            return self._climb_ms
        if kind is PhaseKind.TRANSITION:
            return self._transition_ms
        return 0

    @property
    def percent_complete(self) -> float:
        """0.0 → 1.0 through the current phase."""
        total = self.phase_duration_ms
        if total <= 0:
            return 0.0
        elapsed = total - self.remaining_ms
        return max(0.0, min(1.0, elapsed / total))

    @property
    def fired_cues(self) -> frozenset[int]:
        """Marks already triggered in the current phase instance."""
        return self._cues.fired

    @property
    def has_pending_tick(self) -> bool:
        return self._handle is not None

    def is_paused(self) -> bool:
        return self._phase.is_paused

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(
        self,
        mode: Mode,
        climb_duration_ms: int,
        transition_seconds: float,
    ) -> None:
        """Begin a fresh countdown, stopping any run in progress.

        The climb duration is floored at one second and a negative
        transition is treated as zero.
        """
        if self._phase is not Phase.IDLE:
            self.stop()
        else:
            self._cancel_pending()
        self._mode = Mode(mode)
        self._climb_ms = max(MIN_CLIMB_MS, int(climb_duration_ms))
        self._transition_ms = max(0, int(round(transition_seconds * 1000)))
        self._round = 0
        logger.info(
            "countdown started: mode=%s climb=%dms transition=%dms",
            self._mode.value, self._climb_ms, self._transition_ms,
            extra={
                "_json_mode": self._mode.value,
                "_json_climb_ms": self._climb_ms,
                "_json_transition_ms": self._transition_ms,
            },
        )
        self._enter(PhaseKind.CLIMB)
        self._kick()

    def pause(self) -> None:
        """Freeze the running phase.  No-op unless running."""
        kind = self._phase.kind
        if not self._phase.is_running or kind is None:
            return
        self._cancel_pending()
        self._clock.freeze()
        self._epoch += 1
        self._set_phase(_PAUSED[kind])

    def resume(self) -> None:
        """Continue a paused phase from a fresh deadline.  No-op unless paused."""
        kind = self._phase.kind
        if not self._phase.is_paused or kind is None:
            return
        self._clock.thaw()
        self._epoch += 1
        self._set_phase(_RUNNING[kind])
        self._kick()

    def stop(self) -> None:
        """Return to IDLE from any state."""
        self._cancel_pending()
        self._clock.clear()
        self._cues.reset()
        self._last_remaining = 0
        self._epoch += 1
        if self._phase is not Phase.IDLE:
            logger.info(
                "countdown stopped at round %d", self._round,
                extra={"_json_round": self._round, "_json_phase": self._phase.value},
            )
        self._set_phase(Phase.IDLE)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: phases
    # ══════════════════════════════════════════════════════════════════

    def _enter(self, kind: PhaseKind) -> None:
        duration = self._climb_ms if kind is PhaseKind.CLIMB else self._transition_ms
        if kind is PhaseKind.CLIMB:
            self._round += 1
        self._clock.arm(duration)
        self._cues.reset(_CUE_PLANS[kind], duration)
        self._last_remaining = duration
        self._epoch += 1
        epoch = self._epoch
        self._set_phase(_RUNNING[kind])
        # on_round sees the new phase already live
        if kind is PhaseKind.CLIMB and epoch == self._epoch:
            self._callbacks.on_round(self._round)

    def _end_phase(self) -> None:
        if self._cues.claim(0):
            self._play(Cue(0, CueKind.BUZZ))

        if self._mode is Mode.SESSION:
            self.stop()
        elif self._phase.kind is PhaseKind.CLIMB:
            self._enter(PhaseKind.TRANSITION)
        else:
            self._enter(PhaseKind.CLIMB)

    def _set_phase(self, phase: Phase) -> None:
        self._phase = phase
        logger.debug("phase → %s (round %d)", phase.value, self._round)
        self._callbacks.on_phase(phase)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: loop
    # ══════════════════════════════════════════════════════════════════

    def _kick(self) -> None:
        # From inside a tick the running loop picks the new phase up; a
        # start made from a callback may already have registered a frame.
        if not self._ticking and self._handle is None:
            self._tick()

    def _tick(self) -> None:
        self._handle = None
        self._ticking = True
        try:
            while self._phase.is_running:
                epoch = self._epoch
                remaining = self._clock.remaining_ms()
                prev = self._last_remaining
                self._last_remaining = remaining

                for cue in self._cues.due(prev, remaining):
                    self._play(cue)
                if epoch != self._epoch:
                    continue
                self._callbacks.on_tick(remaining)
                if epoch != self._epoch:
                    continue

                if remaining > 0:
                    self._handle = self._scheduler.schedule_next(self._tick)
                    return
                self._end_phase()
        finally:
            self._ticking = False

    def _cancel_pending(self) -> None:
        if self._handle is not None:
            self._scheduler.cancel(self._handle)
            self._handle = None

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: cues
    # ══════════════════════════════════════════════════════════════════

    def _play(self, cue: Cue) -> None:
        """Best-effort: a failing sound sink must not stop the countdown."""
        try:
            if cue.kind is CueKind.BUZZ:
                self._callbacks.play_buzz()
            elif cue.frequency_hz is None:
                self._callbacks.play_beep()
            else:
                self._callbacks.play_beep(cue.frequency_hz, cue.duration_ms)
        except Exception:
            logger.exception(
                "cue at %dms failed", cue.mark,
                extra={"_json_mark": cue.mark, "_json_phase": self._phase.value},
            )
