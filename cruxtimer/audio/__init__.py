"""Audio cue package."""

from .sounds import SoundManager, Tone, BEEP, BUZZ, WAVEFORMS, render_tone

__all__ = ["SoundManager", "Tone", "BEEP", "BUZZ", "WAVEFORMS", "render_tone"]
