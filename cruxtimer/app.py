"""Main application window for CruxTimer."""

from __future__ import annotations

import logging

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QMainWindow, QWidget, QVBoxLayout

from .audio.sounds import SoundManager
from .settings import MIN_WINDOW_SIZE, Settings, load_settings, save_settings
from .timer.clock import format_mmss
from .timer.engine import EngineCallbacks, Mode, Phase, PhaseKind, TimerEngine
from .timer.scheduler import FrameScheduler, QtFrameScheduler
from .ui.settings_bar import SettingsBar
from .ui.styles import build_stylesheet
from .ui.timer_widget import TimerWidget


logger = logging.getLogger(__name__)


def rotation_hint(mode: str, phase: Phase, climb_ms: int, transition_ms: int) -> str:
    """Text of the "Next: …" line shown under the clock in rotation mode."""
    if mode != Mode.ROTATION.value:
        return ""
    if phase.kind is PhaseKind.TRANSITION:
        return f"Next: Climb {format_mmss(climb_ms)}"
    return f"Next: Transition {format_mmss(transition_ms)}"


class CruxTimerApp(QMainWindow):
    """Main window: settings bar on top, countdown card below.

    ``scheduler`` and ``sound_manager`` may be injected (tests); by
    default a Qt frame scheduler and a real sound manager are created.
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        scheduler: FrameScheduler | None = None,
        sound_manager: SoundManager | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("CruxTimer")
        self.setMinimumSize(*MIN_WINDOW_SIZE)

        # ── settings ──────────────────────────────────────────────────
        self._settings: Settings = settings or load_settings()
        self.resize(self._settings.window_width, self._settings.window_height)

        # ── sound manager ─────────────────────────────────────────────
        self._sound_manager = sound_manager or SoundManager(parent=self)
        self._sound_manager.set_volume(self._settings.sound_volume)
        self._sound_manager.set_enabled(self._settings.sound_enabled)

        # ── engine ────────────────────────────────────────────────────
        self._scheduler = scheduler or QtFrameScheduler(self)
        self._engine = TimerEngine(
            EngineCallbacks(
                on_tick=self._on_tick,
                on_phase=self._on_phase,
                on_round=self._on_round,
                play_beep=self._sound_manager.beep,
                play_buzz=self._sound_manager.buzz,
            ),
            self._scheduler,
        )

        # ── widgets ───────────────────────────────────────────────────
        self.setStyleSheet(build_stylesheet())
        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(16, 12, 16, 12)
        layout.setSpacing(12)

        self._settings_bar = SettingsBar(self._settings, central)
        layout.addWidget(self._settings_bar)

        self._timer_widget = TimerWidget(central)
        self._timer_widget.set_flash_enabled(self._settings.flash_enabled)
        layout.addWidget(self._timer_widget, stretch=1)

        # ── wire signals ──────────────────────────────────────────────
        self._timer_widget.start_requested.connect(self.start)
        self._timer_widget.pause_resume_requested.connect(self.pause_resume)
        self._timer_widget.stop_requested.connect(self.stop)
        self._timer_widget.test_sound_requested.connect(self._test_sound)
        self._settings_bar.mode_changed.connect(self._on_mode_changed)
        self._settings_bar.durations_changed.connect(self._reflect_idle)
        self._settings_bar.toggles_changed.connect(self._on_toggles_changed)
        self._settings_bar.fullscreen_requested.connect(self.toggle_fullscreen)

        self._reflect_idle()

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC
    # ══════════════════════════════════════════════════════════════════

    @property
    def engine(self) -> TimerEngine:
        return self._engine

    @property
    def timer_widget(self) -> TimerWidget:
        return self._timer_widget

    @property
    def settings_bar(self) -> SettingsBar:
        return self._settings_bar

    def start(self) -> None:
        s = self._settings
        self._engine.start(Mode(s.mode), s.climb_duration_ms, s.transition_seconds)

    def pause_resume(self) -> None:
        if self._engine.is_paused():
            self._engine.resume()
        else:
            self._engine.pause()

    def stop(self) -> None:
        self._engine.stop()
        self._reflect_idle()

    def toggle_fullscreen(self) -> None:
        if self.isFullScreen():
            self.showNormal()
        else:
            self.showFullScreen()
        self._settings_bar.set_fullscreen(self.isFullScreen())

    # ══════════════════════════════════════════════════════════════════
    #  ENGINE CALLBACKS
    # ══════════════════════════════════════════════════════════════════

    def _on_tick(self, remaining_ms: int) -> None:
        self._timer_widget.set_remaining(remaining_ms)

    def _on_phase(self, phase: Phase) -> None:
        self._timer_widget.set_phase(phase)
        self._settings_bar.set_inputs_locked(phase.is_running)
        if phase is Phase.IDLE:
            self._reflect_idle()
        else:
            self._refresh_hint()

    def _on_round(self, round_number: int) -> None:
        self._timer_widget.set_round(round_number)

    # ══════════════════════════════════════════════════════════════════
    #  SETTINGS BAR
    # ══════════════════════════════════════════════════════════════════

    def _on_mode_changed(self, mode: str) -> None:
        logger.info("mode switched to %s", mode)
        self.stop()

    def _on_toggles_changed(self) -> None:
        self._sound_manager.set_enabled(self._settings.sound_enabled)
        self._timer_widget.set_flash_enabled(self._settings.flash_enabled)

    def _test_sound(self) -> None:
        """Test button plays even when cues are muted."""
        enabled = self._sound_manager.enabled
        self._sound_manager.set_enabled(True)
        self._sound_manager.beep()
        self._sound_manager.set_enabled(enabled)

    # ══════════════════════════════════════════════════════════════════
    #  DISPLAY
    # ══════════════════════════════════════════════════════════════════

    def _reflect_idle(self) -> None:
        """While idle the card previews the configured climb."""
        if self._engine.phase is not Phase.IDLE:
            return
        self._timer_widget.set_remaining(self._settings.climb_duration_ms)
        self._timer_widget.set_round(0)
        self._refresh_hint()

    def _refresh_hint(self) -> None:
        self._timer_widget.set_hint(rotation_hint(
            self._settings.mode,
            self._engine.phase,
            self._settings.climb_duration_ms,
            self._settings.transition_seconds * 1000,
        ))

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW EVENTS
    # ══════════════════════════════════════════════════════════════════

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._engine.stop()
        if not self.isFullScreen():
            self._settings.window_width = self.width()
            self._settings.window_height = self.height()
        save_settings(self._settings)
        event.accept()

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        """Space start/pause/resume, S stop, F fullscreen, Escape leaves fullscreen."""
        if event.isAutoRepeat():
            event.accept()
            return
        key = event.key()
        if key == Qt.Key.Key_Space and not event.modifiers():
            if self._engine.phase is Phase.IDLE:
                self.start()
            else:
                self.pause_resume()
            event.accept()
            return
        if key == Qt.Key.Key_S:
            self.stop()
            event.accept()
            return
        if key == Qt.Key.Key_F:
            self.toggle_fullscreen()
            event.accept()
            return
        if key == Qt.Key.Key_Escape and self.isFullScreen():
            self.toggle_fullscreen()
            event.accept()
            return
        super().keyPressEvent(event)
