"""Audio cue scheduling.

Each phase kind has a fixed list of marks, expressed as milliseconds
before the end of the phase.  A mark fires when either

- the previous tick was inside the lead window just above it
  (``m < prev <= m + lead``), which lets the cue start a little early to
  absorb frame jitter, or
- the current tick is at or below it (``cur <= m``), which catches marks
  whose lead window was skipped entirely, e.g. while the host was
  suspended.

Fired marks are remembered until the next phase entry, so every mark
fires at most once per phase instance.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


LEAD_WINDOW_MS = 1_000

CLIMB_MARKS: tuple[int, ...] = (60_000, 5_000, 4_000, 3_000, 2_000, 1_000, 0)
TRANSITION_MARKS: tuple[int, ...] = (5_000, 4_000, 3_000, 2_000, 1_000, 0)


class CueKind(Enum):
    BEEP = "beep"
    BUZZ = "buzz"


@dataclass(frozen=True)
class Cue:
    mark: int
    kind: CueKind
    frequency_hz: float | None = None
    duration_ms: int | None = None


@dataclass(frozen=True)
class CuePlan:
    """Marks for one phase kind and how each one sounds."""

    marks: tuple[int, ...]
    buzz_marks: frozenset[int]
    beep_frequency_hz: float | None = None
    beep_duration_ms: int | None = None

    def cue_for(self, mark: int) -> Cue:
        if mark in self.buzz_marks:
            return Cue(mark, CueKind.BUZZ)
        return Cue(
            mark, CueKind.BEEP, self.beep_frequency_hz, self.beep_duration_ms,
        )


# Climb: the one-minute warning shares the end-of-phase buzz.
CLIMB_CUES = CuePlan(CLIMB_MARKS, frozenset({60_000, 0}))
TRANSITION_CUES = CuePlan(
    TRANSITION_MARKS, frozenset({0}),
    beep_frequency_hz=900, beep_duration_ms=150,
)


@dataclass
class CueScheduler:
    """Per-phase cue bookkeeping.  Call :meth:`reset` on every phase entry."""

    lead_window_ms: int = LEAD_WINDOW_MS
    _plan: CuePlan | None = field(default=None, init=False, repr=False)
    _reachable: tuple[int, ...] = field(default=(), init=False, repr=False)
    _fired: set[int] = field(default_factory=set, init=False, repr=False)

    @property
    def fired(self) -> frozenset[int]:
        return frozenset(self._fired)

    @property
    def reachable_marks(self) -> tuple[int, ...]:
        return self._reachable

    def reset(self, plan: CuePlan | None = None, phase_duration_ms: int = 0) -> None:
        """Arm *plan* for a phase lasting *phase_duration_ms*.

        Marks above the phase duration can never be crossed and are
        dropped.  With no plan the scheduler is disarmed.
        """
        self._plan = plan
        self._fired.clear()
        if plan is None:
            self._reachable = ()
        else:
            self._reachable = tuple(
                m for m in plan.marks if m <= phase_duration_ms
            )

    def has_fired(self, mark: int) -> bool:
        return mark in self._fired

    def claim(self, mark: int) -> bool:
        """Mark *mark* fired.  Returns False if it already was."""
        if mark in self._fired:
            return False
        self._fired.add(mark)
        return True

    def due(self, prev_ms: int, cur_ms: int) -> list[Cue]:
        """Cues to play for a tick that moved from *prev_ms* to *cur_ms*."""
        if self._plan is None:
            return []
        cues: list[Cue] = []
        for mark in self._reachable:
            if mark in self._fired:
                continue
            within_lead = mark < prev_ms <= mark + self.lead_window_ms
            crossed = cur_ms <= mark
            if within_lead or crossed:
                self._fired.add(mark)
                cues.append(self._plan.cue_for(mark))
        return cues
