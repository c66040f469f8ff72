"""Top bar with mode, durations, and toggles.

Edits are written straight into the shared :class:`Settings` object and
saved to disk.  Duration inputs lock while a phase is counting down and
unlock when paused or idle.
"""

from __future__ import annotations

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QWidget, QHBoxLayout, QLabel, QComboBox, QSpinBox, QCheckBox, QPushButton,
)

from ..settings import (
    CLIMB_MINUTES_RANGE,
    TRANSITION_SECONDS_RANGE,
    Settings,
    save_settings,
)


class SettingsBar(QWidget):
    """Mode selector, X/Y inputs, sound/flash toggles, fullscreen button."""

    mode_changed = pyqtSignal(str)
    durations_changed = pyqtSignal()
    toggles_changed = pyqtSignal()
    fullscreen_requested = pyqtSignal()

    def __init__(self, settings: Settings, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._settings = settings
        self._populating = False
        self._build_ui()
        self._populate()

    def _build_ui(self) -> None:
        row = QHBoxLayout(self)
        row.setContentsMargins(0, 0, 0, 0)
        row.setSpacing(10)

        row.addWidget(QLabel("Mode"))
        self._mode_combo = QComboBox()
        self._mode_combo.addItem("Session", "session")
        self._mode_combo.addItem("Rotation", "rotation")
        self._mode_combo.currentIndexChanged.connect(self._on_mode_changed)
        row.addWidget(self._mode_combo)

        row.addWidget(QLabel("X (min)"))
        self._climb_spin = QSpinBox()
        self._climb_spin.setRange(*CLIMB_MINUTES_RANGE)
        self._climb_spin.valueChanged.connect(self._on_duration_changed)
        row.addWidget(self._climb_spin)

        self._transition_label = QLabel("Y (sec)")
        row.addWidget(self._transition_label)
        self._transition_spin = QSpinBox()
        self._transition_spin.setRange(*TRANSITION_SECONDS_RANGE)
        self._transition_spin.setSingleStep(5)
        self._transition_spin.valueChanged.connect(self._on_duration_changed)
        row.addWidget(self._transition_spin)

        row.addStretch()

        self._sound_cb = QCheckBox("Sound")
        self._sound_cb.toggled.connect(self._on_toggle_changed)
        row.addWidget(self._sound_cb)

        self._flash_cb = QCheckBox("Flash")
        self._flash_cb.toggled.connect(self._on_toggle_changed)
        row.addWidget(self._flash_cb)

        self._fullscreen_btn = QPushButton("Fullscreen")
        self._fullscreen_btn.setObjectName("secondaryButton")
        self._fullscreen_btn.clicked.connect(lambda: self.fullscreen_requested.emit())
        row.addWidget(self._fullscreen_btn)

    def _populate(self) -> None:
        s = self._settings
        self._populating = True
        try:
            self._mode_combo.setCurrentIndex(self._mode_combo.findData(s.mode))
            self._climb_spin.setValue(s.climb_minutes)
            self._transition_spin.setValue(s.transition_seconds)
            self._sound_cb.setChecked(s.sound_enabled)
            self._flash_cb.setChecked(s.flash_enabled)
        finally:
            self._populating = False
        self._sync_transition_visibility()

    # ── public ────────────────────────────────────────────────────────

    def set_inputs_locked(self, locked: bool) -> None:
        self._climb_spin.setEnabled(not locked)
        self._transition_spin.setEnabled(not locked)

    def set_fullscreen(self, fullscreen: bool) -> None:
        self._fullscreen_btn.setText("Exit Fullscreen" if fullscreen else "Fullscreen")

    @property
    def settings(self) -> Settings:
        return self._settings

    # ── change handlers, saved immediately ───────────────────────────

    def _on_mode_changed(self) -> None:
        if self._populating:
            return
        self._settings.mode = self._mode_combo.currentData()
        self._sync_transition_visibility()
        self._save()
        self.mode_changed.emit(self._settings.mode)

    def _on_duration_changed(self) -> None:
        if self._populating:
            return
        self._settings.climb_minutes = self._climb_spin.value()
        self._settings.transition_seconds = self._transition_spin.value()
        self._save()
        self.durations_changed.emit()

    def _on_toggle_changed(self) -> None:
        if self._populating:
            return
        self._settings.sound_enabled = self._sound_cb.isChecked()
        self._settings.flash_enabled = self._flash_cb.isChecked()
        self._save()
        self.toggles_changed.emit()

    def _sync_transition_visibility(self) -> None:
        rotation = self._settings.mode == "rotation"
        self._transition_label.setVisible(rotation)
        self._transition_spin.setVisible(rotation)

    def _save(self) -> None:
        save_settings(self._settings)
