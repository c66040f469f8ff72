"""Tone synthesis and playback using numpy + QSoundEffect.

Competition cues are plain oscillator tones: a fixed waveform at a
fixed frequency, shaped by a short exponential attack and an
exponential release.  Each distinct tone is rendered once to a WAV file
in the cache directory and reused afterwards.

Tones
-----
- ``beep``  — countdown beep, 1000 Hz square, 180 ms by default
- ``buzz``  — end-of-phase horn, 400 Hz sawtooth, 1200 ms
"""

from __future__ import annotations

import io
import logging
import wave
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from ..settings import APP_SUPPORT_DIR


logger = logging.getLogger(__name__)


# ── paths & constants ────────────────────────────────────────────────────

SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"

SAMPLE_RATE = 44100
WAVEFORMS = ("sine", "square", "sawtooth", "triangle")

_FLOOR_GAIN = 0.0001  # exponential ramps cannot start from true silence
_ATTACK_S = 0.01


@dataclass(frozen=True)
class Tone:
    frequency_hz: float
    duration_ms: int
    waveform: str = "square"
    level: float = 0.9

    @property
    def cache_name(self) -> str:
        return (
            f"{self.waveform}_{self.frequency_hz:g}hz_"
            f"{self.duration_ms}ms_{round(self.level * 100)}.wav"
        )


BEEP = Tone(1000.0, 180, "square")
BUZZ = Tone(400.0, 1200, "sawtooth")


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def _oscillator(waveform: str, freq: float, duration_s: float) -> np.ndarray:
    """Unit-amplitude periodic wave at *freq* Hz for *duration_s* seconds."""
    t = np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)
    phase = (t * freq) % 1.0
    if waveform == "sine":
        return np.sin(2 * np.pi * freq * t)
    if waveform == "square":
        return np.where(phase < 0.5, 1.0, -1.0)
    if waveform == "sawtooth":
        return 2.0 * phase - 1.0
    if waveform == "triangle":
        return 1.0 - 4.0 * np.abs(phase - 0.5)
    raise ValueError(f"unknown waveform {waveform!r}")


def _gain_envelope(length: int, level: float) -> np.ndarray:
    """Exponential rise to *level* over 10 ms, then exponential fall to silence."""
    env = np.empty(length, dtype=np.float64)
    if length == 0:
        return env
    attack = max(1, min(length, int(SAMPLE_RATE * _ATTACK_S)))
    env[:attack] = np.geomspace(_FLOOR_GAIN, level, attack)
    if length > attack:
        env[attack:] = np.geomspace(level, _FLOOR_GAIN, length - attack)
    return env


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Convert a float64 numpy array (-1..1) to 16-bit PCM WAV bytes."""
    samples = np.clip(samples, -1.0, 1.0)
    int_samples = (samples * 32767).astype(np.int16)

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(int_samples.tobytes())
    return buf.getvalue()


def render_tone(tone: Tone) -> bytes:
    """Render *tone* to WAV bytes, with a short silent tail."""
    wave_ = _oscillator(tone.waveform, tone.frequency_hz, tone.duration_ms / 1000)
    shaped = wave_ * _gain_envelope(len(wave_), tone.level)
    # QSoundEffect clips the last few ms of a buffer
    tail = np.zeros(int(SAMPLE_RATE * 0.05))
    return _to_wav_bytes(np.concatenate([shaped, tail]))


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Renders, caches, and plays cue tones.

    Usage::

        mgr = SoundManager(parent=self)
        mgr.set_volume(70)
        mgr.beep()
        mgr.beep(900, 150)
        mgr.buzz()

    Playback problems are logged, never raised.
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._volume = 0.7  # 0.0–1.0
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effects: dict[Tone, QSoundEffect] = {}

        for tone in (BEEP, BUZZ):
            self._effect_for(tone)

    # ── public API ────────────────────────────────────────────────────

    def set_volume(self, level: int) -> None:
        """Set volume (0-100).  Updates all loaded effects."""
        self._volume = max(0, min(level, 100)) / 100.0
        for effect in self._effects.values():
            effect.setVolume(self._volume)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def beep(
        self,
        frequency_hz: float | None = None,
        duration_ms: int | None = None,
        waveform: str | None = None,
    ) -> None:
        """Play a beep; unspecified parameters fall back to :data:`BEEP`."""
        self.play(Tone(
            frequency_hz if frequency_hz is not None else BEEP.frequency_hz,
            duration_ms if duration_ms is not None else BEEP.duration_ms,
            waveform or BEEP.waveform,
            BEEP.level,
        ))

    def buzz(self) -> None:
        self.play(BUZZ)

    def play(self, tone: Tone) -> None:
        """Play *tone*.  No-op if disabled."""
        if not self._enabled:
            return
        effect = self._effect_for(tone)
        if effect is not None:
            effect.play()

    @property
    def volume(self) -> int:
        """Current volume as 0-100 integer."""
        return round(self._volume * 100)

    @property
    def enabled(self) -> bool:
        return self._enabled

    # ── internal ──────────────────────────────────────────────────────

    def _effect_for(self, tone: Tone) -> QSoundEffect | None:
        effect = self._effects.get(tone)
        if effect is not None:
            return effect
        try:
            path = self._ensure_wav(tone)
        except (OSError, ValueError):
            logger.exception("could not render tone %s", tone)
            return None
        effect = QSoundEffect(self)
        effect.setSource(QUrl.fromLocalFile(str(path)))
        effect.setVolume(self._volume)
        self._effects[tone] = effect
        return effect

    def _ensure_wav(self, tone: Tone) -> Path:
        """Render *tone* into the cache directory unless already there."""
        self._sounds_dir.mkdir(parents=True, exist_ok=True)
        path = self._sounds_dir / tone.cache_name
        if not path.exists():
            path.write_bytes(render_tone(tone))
            logger.debug("rendered %s", path.name)
        return path
