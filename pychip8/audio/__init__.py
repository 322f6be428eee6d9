"""Audio output for the CHIP-8 interpreter."""

from .beeper import DEFAULT_TONE_HZ, SquareWaveBeeper, build_square_wave

__all__ = ["SquareWaveBeeper", "build_square_wave", "DEFAULT_TONE_HZ"]
