"""Main countdown card.

Layout (top → bottom):
    - Phase pill (CLIMB / TRANSITION / READY, tinted per phase)
    - Large MM:SS display
    - Rotation hint ("Next: Transition 00:15") and round counter
    - Control row: Stop, Start/Pause/Resume, Test sound
"""

from __future__ import annotations

from PyQt6.QtCore import Qt, QTimer, pyqtSignal
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QFrame,
)

from ..timer.clock import format_mmss
from ..timer.engine import Phase
from .styles import PALETTE, PHASE_LABELS, phase_colors


FLASH_THRESHOLD_MS = 5_000
FLASH_INTERVAL_MS = 250


class TimerWidget(QWidget):
    """The countdown card.  Holds no timing logic; the app pushes state in."""

    start_requested = pyqtSignal()
    pause_resume_requested = pyqtSignal()
    stop_requested = pyqtSignal()
    test_sound_requested = pyqtSignal()

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._phase: Phase = Phase.IDLE
        self._remaining_ms: int = 0
        self._flash_enabled: bool = True
        self._flash_on: bool = False

        self._flash_timer = QTimer(self)
        self._flash_timer.setInterval(FLASH_INTERVAL_MS)
        self._flash_timer.timeout.connect(self._toggle_flash)

        self._build_ui()
        self._connect_signals()
        self.set_phase(Phase.IDLE)

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        self._card = QFrame(self)
        self._card.setObjectName("card")
        root.addWidget(self._card)

        layout = QVBoxLayout(self._card)
        layout.setContentsMargins(32, 24, 32, 28)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        pill_row = QHBoxLayout()
        pill_row.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._pill = QLabel("READY", self._card)
        self._pill.setObjectName("phasePill")
        pill_row.addWidget(self._pill)
        layout.addLayout(pill_row)

        self._time_label = QLabel("00:00", self._card)
        self._time_label.setObjectName("timeLabel")
        self._time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._time_label)

        self._hint_label = QLabel("", self._card)
        self._hint_label.setObjectName("hintLabel")
        self._hint_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._hint_label)

        self._round_label = QLabel("Round: 0", self._card)
        self._round_label.setObjectName("roundLabel")
        self._round_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._round_label)

        layout.addSpacing(24)

        # ── controls ─────────────────────────────────────────────────
        btn_row = QHBoxLayout()
        btn_row.setSpacing(12)
        btn_row.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._stop_btn = QPushButton("Stop", self._card)
        self._stop_btn.setObjectName("dangerButton")

        self._start_btn = QPushButton("Start", self._card)
        self._start_btn.setObjectName("primaryButton")

        self._pause_btn = QPushButton("Pause", self._card)

        self._test_btn = QPushButton("Test sound", self._card)
        self._test_btn.setObjectName("secondaryButton")

        for btn in (self._stop_btn, self._start_btn, self._pause_btn, self._test_btn):
            btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)  # Space belongs to the window
            btn_row.addWidget(btn)
        layout.addLayout(btn_row)

    def _connect_signals(self) -> None:
        self._start_btn.clicked.connect(lambda: self.start_requested.emit())
        self._pause_btn.clicked.connect(lambda: self.pause_resume_requested.emit())
        self._stop_btn.clicked.connect(lambda: self.stop_requested.emit())
        self._test_btn.clicked.connect(lambda: self.test_sound_requested.emit())

    # ── state in ──────────────────────────────────────────────────────────

    def set_phase(self, phase: Phase) -> None:
        self._phase = phase
        self._pill.setText(PHASE_LABELS[phase])

        is_idle = phase is Phase.IDLE
        self._start_btn.setVisible(is_idle)
        self._pause_btn.setVisible(not is_idle)
        self._pause_btn.setText("Resume" if phase.is_paused else "Pause")
        self._stop_btn.setEnabled(not is_idle)

        self._apply_colors()
        self._update_flash()

    def set_remaining(self, remaining_ms: int) -> None:
        self._remaining_ms = remaining_ms
        self._time_label.setText(format_mmss(remaining_ms))
        self._update_flash()

    def set_round(self, round_number: int) -> None:
        self._round_label.setText(f"Round: {round_number}")

    def set_hint(self, text: str) -> None:
        """Rotation hint; an empty string hides the rotation rows."""
        self._hint_label.setText(text)
        self._hint_label.setVisible(bool(text))
        self._round_label.setVisible(bool(text))

    def set_flash_enabled(self, enabled: bool) -> None:
        self._flash_enabled = enabled
        self._update_flash()

    # ── read-back (tests, app) ────────────────────────────────────────────

    @property
    def time_text(self) -> str:
        return self._time_label.text()

    @property
    def is_flashing(self) -> bool:
        return self._flash_timer.isActive()

    # ── internal ──────────────────────────────────────────────────────────

    def _should_flash(self) -> bool:
        return (
            self._flash_enabled
            and self._phase.kind is not None
            and self._remaining_ms <= FLASH_THRESHOLD_MS
        )

    def _update_flash(self) -> None:
        if self._should_flash():
            if not self._flash_timer.isActive():
                self._flash_timer.start()
        elif self._flash_timer.isActive():
            self._flash_timer.stop()
            self._flash_on = False
            self._apply_colors()

    def _toggle_flash(self) -> None:
        self._flash_on = not self._flash_on
        self._apply_colors()

    def _apply_colors(self) -> None:
        accent, tint = phase_colors(self._phase)
        self._card.setStyleSheet(f"QFrame#card {{ background-color: {tint}; }}")
        self._pill.setStyleSheet(
            f"background-color: {accent}; color: {PALETTE['bg']};"
        )
        digits = PALETTE["text_muted"] if self._flash_on else PALETTE["text"]
        if self._phase.is_paused:
            digits = PALETTE["text_muted"]
        self._time_label.setStyleSheet(f"color: {digits};")
