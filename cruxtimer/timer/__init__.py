"""Timer package."""

from .clock import DeadlineClock, format_mmss, monotonic_ms
from .cues import (
    CLIMB_MARKS,
    TRANSITION_MARKS,
    LEAD_WINDOW_MS,
    Cue,
    CueKind,
    CueScheduler,
)
from .engine import (
    TimerEngine,
    EngineCallbacks,
    Mode,
    Phase,
    PhaseKind,
    MIN_CLIMB_MS,
)
from .scheduler import FrameScheduler, ManualScheduler, QtFrameScheduler

__all__ = [
    "TimerEngine",
    "EngineCallbacks",
    "Mode",
    "Phase",
    "PhaseKind",
    "MIN_CLIMB_MS",
    "DeadlineClock",
    "format_mmss",
    "monotonic_ms",
    "CLIMB_MARKS",
    "TRANSITION_MARKS",
    "LEAD_WINDOW_MS",
    "Cue",
    "CueKind",
    "CueScheduler",
    "FrameScheduler",
    "ManualScheduler",
    "QtFrameScheduler",
]
