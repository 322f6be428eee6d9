"""Python CHIP-8 interpreter.

The core (``state``, ``cpu`` and ``system``) holds machine state, decodes and
executes instructions and paces cycles. The remaining packages are thin I/O
adapters used by ``run.py``.
"""

from __future__ import annotations

from . import audio, cpu, io, loader, state, system, ui, utils, video

__all__: list[str] = [
    "state",
    "cpu",
    "system",
    "video",
    "audio",
    "io",
    "loader",
    "ui",
    "utils",
]
