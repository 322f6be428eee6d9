"""Video rendering helpers for the CHIP-8 interpreter."""

from __future__ import annotations

from .palette import AMBER, MONOCHROME, NAMED_PALETTES, PHOSPHOR, palette_by_name, validate_palette
from .renderer import RenderResult, Renderer

__all__ = [
    "Renderer",
    "RenderResult",
    "MONOCHROME",
    "PHOSPHOR",
    "AMBER",
    "NAMED_PALETTES",
    "palette_by_name",
    "validate_palette",
]
