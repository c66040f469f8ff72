"""Shared test helpers for CruxTimer."""

from __future__ import annotations

from cruxtimer.timer.engine import EngineCallbacks, Phase


class CallRecorder:
    """Records every engine callback as ``(name, args)`` in call order."""

    def __init__(self):
        self.calls: list[tuple[str, tuple]] = []

    def callbacks(self, **overrides) -> EngineCallbacks:
        slots = dict(
            on_tick=self._recorder("on_tick"),
            on_phase=self._recorder("on_phase"),
            on_round=self._recorder("on_round"),
            play_beep=self._recorder("play_beep"),
            play_buzz=self._recorder("play_buzz"),
        )
        slots.update(overrides)
        return EngineCallbacks(**slots)

    def _recorder(self, name: str):
        def record(*args):
            self.calls.append((name, args))
        return record

    def __len__(self):
        return len(self.calls)

    def args_of(self, name: str) -> list[tuple]:
        return [args for n, args in self.calls if n == name]

    def values_of(self, name: str) -> list:
        """First positional argument of each call to *name*."""
        return [args[0] for args in self.args_of(name)]

    def count(self, name: str) -> int:
        return len(self.args_of(name))

    @property
    def ticks(self) -> list[int]:
        return self.values_of("on_tick")

    @property
    def phases(self) -> list[Phase]:
        return self.values_of("on_phase")

    @property
    def rounds(self) -> list[int]:
        return self.values_of("on_round")

    def clear(self):
        self.calls.clear()


class FakeSoundManager:
    """Stands in for SoundManager in window tests; records what was played."""

    def __init__(self):
        self.enabled = True
        self.volume = 70
        self.played: list[tuple] = []

    def set_volume(self, level: int) -> None:
        self.volume = level

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled

    def beep(self, frequency_hz=None, duration_ms=None, waveform=None) -> None:
        if self.enabled:
            self.played.append(("beep", frequency_hz, duration_ms))

    def buzz(self) -> None:
        if self.enabled:
            self.played.append(("buzz",))


def run_until(scheduler, engine, t_ms: float, step_ms: float = 16) -> None:
    """Advance *scheduler* frame by frame until *t_ms* (or the engine idles)."""
    while scheduler.now() + step_ms <= t_ms and engine.has_pending_tick:
        scheduler.advance(step_ms)
    if engine.has_pending_tick and scheduler.now() < t_ms:
        scheduler.advance_to(t_ms)
