"""Framebuffer to RGB conversion for CHIP-8 display output."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from pychip8.state import DISPLAY_HEIGHT, DISPLAY_WIDTH

from .palette import MONOCHROME, Palette, RGBColor, validate_palette


@dataclass
class RenderResult:
    """Scaled RGB image of one framebuffer snapshot."""

    width: int
    height: int
    pixels: bytearray

    def get_pixel(self, x: int, y: int) -> RGBColor:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height}")
        offset = (y * self.width + x) * 3
        return (self.pixels[offset], self.pixels[offset + 1], self.pixels[offset + 2])

    def to_surface(self):
        """Convert into a ``pygame.Surface`` (requires pygame)."""

        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to build surfaces") from exc
        return pygame.image.frombuffer(bytes(self.pixels), (self.width, self.height), "RGB")


class Renderer:
    """Turns the 64x32 one-byte-per-pixel framebuffer into RGB rows."""

    def __init__(self, palette: Sequence[RGBColor] = MONOCHROME) -> None:
        self._palette: Palette = validate_palette(palette)

    @property
    def palette(self) -> Palette:
        return self._palette

    def render(self, framebuffer: Sequence[int], *, scale: int = 1) -> RenderResult:
        if scale <= 0:
            raise ValueError("scale must be positive")
        if len(framebuffer) != DISPLAY_WIDTH * DISPLAY_HEIGHT:
            raise ValueError(
                f"framebuffer must hold {DISPLAY_WIDTH * DISPLAY_HEIGHT} pixels, got {len(framebuffer)}"
            )

        background = bytes(self._palette[0])
        foreground = bytes(self._palette[1])
        width = DISPLAY_WIDTH * scale
        height = DISPLAY_HEIGHT * scale
        pixels = bytearray()

        for row in range(DISPLAY_HEIGHT):
            line = bytearray()
            start = row * DISPLAY_WIDTH
            for value in framebuffer[start : start + DISPLAY_WIDTH]:
                line += (foreground if value else background) * scale
            pixels += bytes(line) * scale

        return RenderResult(width, height, pixels)


__all__ = ["Renderer", "RenderResult"]
