"""QSS stylesheet and phase colours for CruxTimer."""

from __future__ import annotations

from ..timer.engine import Phase, PhaseKind

# ── phase colours (accent, background tint) ─────────────────────────────

KIND_COLORS: dict[PhaseKind | None, tuple[str, str]] = {
    PhaseKind.CLIMB:      ("#2DD4BF", "#10262A"),   # teal
    PhaseKind.TRANSITION: ("#FBBF24", "#2A2210"),   # amber
    None:                 ("#94A3B8", "#0B1120"),   # idle slate
}

PHASE_LABELS: dict[Phase, str] = {
    Phase.IDLE:               "READY",
    Phase.RUNNING_CLIMB:      "CLIMB",
    Phase.PAUSED_CLIMB:       "CLIMB · PAUSED",
    Phase.RUNNING_TRANSITION: "TRANSITION",
    Phase.PAUSED_TRANSITION:  "TRANSITION · PAUSED",
}

PALETTE: dict[str, str] = {
    "bg":           "#0B1120",
    "bg_secondary": "#0F172A",
    "surface":      "#1E293B",
    "accent":       "#2DD4BF",
    "text":         "#E2E8F0",
    "text_muted":   "#94A3B8",
    "danger":       "#F87171",
    "border":       "#334155",
}


def phase_colors(phase: Phase) -> tuple[str, str]:
    return KIND_COLORS[phase.kind]


# ── font resolution ───────────────────────────────────────────────────

_resolved_font: str | None = None


def resolve_font_family() -> str:
    """Pick a monospaced-digit friendly font.  Must be called after
    QApplication is created (font database needs the app context)."""
    global _resolved_font
    if _resolved_font is None:
        from PyQt6.QtGui import QFontDatabase
        families = set(QFontDatabase.families())
        for candidate in ("SF Pro", ".AppleSystemUIFont", "Inter", "DejaVu Sans"):
            if candidate in families:
                _resolved_font = candidate
                break
        else:
            _resolved_font = "Helvetica Neue"
    return _resolved_font


# ── QSS builder ───────────────────────────────────────────────────────


def build_stylesheet(palette: dict[str, str] = PALETTE) -> str:
    p = palette
    font = resolve_font_family()
    return f"""
    /* ── global ─────────────────────────────────── */
    QWidget {{
        background-color: {p['bg']};
        color: {p['text']};
        font-family: "{font}", "Helvetica Neue", Arial;
        font-size: 14px;
    }}

    QMainWindow {{
        background-color: {p['bg']};
    }}

    /* ── buttons ─────────────────────────────────── */
    QPushButton {{
        background-color: {p['bg_secondary']};
        color: {p['text']};
        border: 1px solid {p['border']};
        border-radius: 10px;
        padding: 10px 24px;
        font-size: 14px;
        font-weight: 600;
    }}

    QPushButton:hover {{
        background-color: {p['surface']};
        border-color: {p['accent']};
    }}

    QPushButton:disabled {{
        color: {p['text_muted']};
        border-color: {p['bg_secondary']};
    }}

    QPushButton#primaryButton {{
        background-color: {p['accent']};
        color: {p['bg']};
        border: none;
        font-size: 17px;
        padding: 14px 40px;
        border-radius: 12px;
        font-weight: 700;
    }}

    QPushButton#dangerButton {{
        background-color: transparent;
        color: {p['danger']};
        border: 1px solid {p['border']};
    }}

    QPushButton#dangerButton:hover {{
        background-color: {p['danger']};
        color: {p['bg']};
        border-color: {p['danger']};
    }}

    QPushButton#secondaryButton {{
        background-color: transparent;
        color: {p['text_muted']};
        border: 1px solid {p['border']};
        font-size: 13px;
        padding: 8px 16px;
        border-radius: 8px;
    }}

    /* ── inputs ──────────────────────────────────── */
    QComboBox, QSpinBox {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 8px;
        padding: 6px 10px;
    }}

    QComboBox:disabled, QSpinBox:disabled {{
        color: {p['text_muted']};
    }}

    /* ── timer card ──────────────────────────────── */
    QFrame#card {{
        border-radius: 16px;
    }}

    QLabel#phasePill {{
        border-radius: 12px;
        padding: 4px 14px;
        font-size: 13px;
        font-weight: 700;
        letter-spacing: 2px;
    }}

    QLabel#timeLabel {{
        font-size: 160px;
        font-weight: 800;
        background-color: transparent;
    }}

    QLabel#hintLabel, QLabel#roundLabel {{
        color: {p['text_muted']};
        background-color: transparent;
    }}
    """
