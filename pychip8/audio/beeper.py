"""Square-wave buzzer driven by the sound timer."""

from __future__ import annotations

from array import array
from typing import Optional

DEFAULT_TONE_HZ = 440.0


class SquareWaveBeeper:
    """Loop a single square-wave tone through pygame's mixer while enabled."""

    def __init__(
        self,
        *,
        sample_rate: int = 44_100,
        frequency: float = DEFAULT_TONE_HZ,
        volume: float = 0.25,
    ) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required for audio output") from exc

        if pygame.mixer.get_init() is None:
            raise RuntimeError("pygame mixer must be initialised before creating SquareWaveBeeper")
        if frequency <= 0.0:
            raise ValueError("frequency must be positive")

        self._pygame = pygame
        self._sample_rate = max(1, sample_rate)
        self._frequency = frequency
        self._volume = max(0.0, min(1.0, volume))
        self._channel: Optional["pygame.mixer.Channel"] = None
        self._sound: Optional["pygame.mixer.Sound"] = None
        self._playing = False

    @property
    def playing(self) -> bool:
        return self._playing

    # ------------------------------------------------------------------
    # Public API

    def update(self, sound_timer: int) -> None:
        """Play while ``sound_timer`` is non-zero, stay silent otherwise."""

        self.set_state(sound_timer > 0)

    def set_state(self, enabled: bool) -> None:
        if enabled == self._playing:
            return
        if not enabled:
            self._stop()
            return

        if self._sound is None:
            self._sound = self._pygame.mixer.Sound(buffer=build_square_wave(self._sample_rate, self._frequency))
        if self._channel is None:
            self._channel = self._pygame.mixer.find_channel(True)
            if self._channel is None:
                return
        self._channel.play(self._sound, loops=-1)
        self._channel.set_volume(self._volume)
        self._playing = True

    def shutdown(self) -> None:
        """Stop any active tone and release resources."""

        self._stop()
        self._channel = None
        self._sound = None

    # ------------------------------------------------------------------
    # Internals

    def _stop(self) -> None:
        if self._channel is not None:
            self._channel.stop()
        self._playing = False


def build_square_wave(sample_rate: int, frequency: float, *, amplitude: int = 8_000) -> bytes:
    """Return one period of a signed 16-bit mono square wave."""

    period_samples = max(2, int(round(sample_rate / frequency)))
    half = period_samples // 2
    buffer = array("h", [amplitude] * half + [-amplitude] * (period_samples - half))
    return buffer.tobytes()


__all__ = ["SquareWaveBeeper", "build_square_wave", "DEFAULT_TONE_HZ"]
