"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/CruxTimer/settings.json

Set ``CRUXTIMER_HOME`` to use another directory.

Usage::

    settings = load_settings()
    settings.climb_minutes = 4
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path


logger = logging.getLogger(__name__)


def _app_support_dir() -> Path:
    override = os.environ.get("CRUXTIMER_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / "Library" / "Application Support" / "CruxTimer"


APP_SUPPORT_DIR = _app_support_dir()
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"

MODES = ("session", "rotation")
CLIMB_MINUTES_RANGE = (1, 180)
TRANSITION_SECONDS_RANGE = (5, 600)
VOLUME_RANGE = (0, 100)
MIN_WINDOW_SIZE = (720, 480)


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── timer ─────────────────────────────────────────────────────────
    mode: str = "session"
    climb_minutes: int = 20
    transition_seconds: int = 15

    # ── cues ──────────────────────────────────────────────────────────
    sound_enabled: bool = True
    sound_volume: int = 70                 # 0-100
    flash_enabled: bool = True

    # ── window ────────────────────────────────────────────────────────
    window_width: int = 960
    window_height: int = 640

    @property
    def climb_duration_ms(self) -> int:
        return self.climb_minutes * 60_000

    def normalize(self) -> "Settings":
        """Clamp every field into its valid range, in place."""
        if self.mode not in MODES:
            self.mode = "session"
        self.climb_minutes = clamp(int(self.climb_minutes), *CLIMB_MINUTES_RANGE)
        self.transition_seconds = clamp(
            int(self.transition_seconds), *TRANSITION_SECONDS_RANGE,
        )
        self.sound_volume = clamp(int(self.sound_volume), *VOLUME_RANGE)
        self.window_width = max(MIN_WINDOW_SIZE[0], int(self.window_width))
        self.window_height = max(MIN_WINDOW_SIZE[1], int(self.window_height))
        self.sound_enabled = bool(self.sound_enabled)
        self.flash_enabled = bool(self.flash_enabled)
        return self


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            return Settings(**filtered).normalize()
    except (OSError, ValueError, TypeError, AttributeError, OverflowError) as exc:
        logger.warning("ignoring unreadable settings at %s: %s", SETTINGS_PATH, exc)
    return Settings()


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
