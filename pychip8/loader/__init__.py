"""Loaders for CHIP-8 program images."""

from __future__ import annotations

from pychip8.state import ProgramTooLargeError, RomLoadError

from .rom import ProgramImage, load_rom_from_path, read_rom, read_rom_from_path

__all__ = [
    "ProgramImage",
    "RomLoadError",
    "ProgramTooLargeError",
    "read_rom",
    "read_rom_from_path",
    "load_rom_from_path",
]
