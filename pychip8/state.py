"""CHIP-8 machine state and its lifecycle helpers.

The state is a plain mutable record. Only the execution engine and the cycle
scheduler's timer accounting mutate it; collaborators write ``key_state`` before
a cycle and read ``framebuffer`` and ``sound_timer`` afterwards.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Sequence

MEMORY_SIZE = 4096
ADDRESS_MASK = MEMORY_SIZE - 1
PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START
DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
DISPLAY_PIXELS = DISPLAY_WIDTH * DISPLAY_HEIGHT
REGISTER_COUNT = 16
FLAG_REGISTER = 0xF
STACK_DEPTH = 16
KEY_COUNT = 16

FONT_START = 0x050
FONT_GLYPH_BYTES = 5
FONT_SET = bytes(
    (
        0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
        0x20, 0x60, 0x20, 0x20, 0x70,  # 1
        0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
        0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
        0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
        0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
        0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
        0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
        0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
        0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
        0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
        0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
        0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
        0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
        0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
        0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
    )
)


class RomLoadError(RuntimeError):
    """Raised when a program image cannot be placed into memory."""


class ProgramTooLargeError(RomLoadError):
    """Raised when a program image does not fit above ``PROGRAM_START``."""

    def __init__(self, size: int) -> None:
        super().__init__(f"program too large: {size} bytes, max {MAX_PROGRAM_SIZE}")
        self.size = size


@dataclass
class MachineState:
    """Complete mutable state of one CHIP-8 machine."""

    memory: bytearray = field(default_factory=lambda: bytearray(MEMORY_SIZE))
    program_counter: int = PROGRAM_START
    index_register: int = 0x000
    call_stack: list[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    stack_pointer: int = 0
    delay_timer: int = 0
    sound_timer: int = 0
    registers: bytearray = field(default_factory=lambda: bytearray(REGISTER_COUNT))
    framebuffer: bytearray = field(default_factory=lambda: bytearray(DISPLAY_PIXELS))
    key_state: list[bool] = field(default_factory=lambda: [False] * KEY_COUNT)
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    def read_word(self, address: int) -> int:
        """Big-endian 16-bit read; both byte addresses wrap at 4 KiB."""

        high = self.memory[address & ADDRESS_MASK]
        low = self.memory[(address + 1) & ADDRESS_MASK]
        return (high << 8) | low

    def pixel(self, x: int, y: int) -> int:
        return self.framebuffer[y * DISPLAY_WIDTH + x]

    def sound_active(self) -> bool:
        return self.sound_timer > 0

    def set_keys(self, keys: Sequence[bool]) -> None:
        """Replace the key bitmap with a 16-entry snapshot from the input side."""

        if len(keys) != KEY_COUNT:
            raise ValueError(f"key snapshot must have {KEY_COUNT} entries, got {len(keys)}")
        self.key_state[:] = [bool(pressed) for pressed in keys]

    def pressed_keys(self) -> list[int]:
        return [key for key, pressed in enumerate(self.key_state) if pressed]

    def framebuffer_rows(self) -> list[bytes]:
        return [
            bytes(self.framebuffer[row * DISPLAY_WIDTH : (row + 1) * DISPLAY_WIDTH])
            for row in range(DISPLAY_HEIGHT)
        ]


def install_font(state: MachineState) -> None:
    """Copy the built-in hexadecimal glyphs into the reserved low memory."""

    state.memory[FONT_START : FONT_START + len(FONT_SET)] = FONT_SET


def font_address(digit: int) -> int:
    return FONT_START + (digit & 0x0F) * FONT_GLYPH_BYTES


def initialize(*, seed: int | None = None, install_font_set: bool = False) -> MachineState:
    """Return a zeroed machine with ``program_counter`` at ``PROGRAM_START``.

    The random generator used by ``CXNN`` is created and seeded here, once.
    ``install_font_set`` additionally places the hexadecimal font at
    ``FONT_START`` so that ``FX29`` has glyphs to point at.
    """

    state = MachineState(rng=random.Random(seed))
    if install_font_set:
        install_font(state)
    return state


def load_program(state: MachineState, data: bytes) -> None:
    """Copy ``data`` verbatim into memory starting at ``PROGRAM_START``.

    Oversized images are rejected before memory is touched.
    """

    size = len(data)
    if size > MAX_PROGRAM_SIZE:
        raise ProgramTooLargeError(size)
    state.memory[PROGRAM_START : PROGRAM_START + size] = bytes(data)


__all__ = [
    "MachineState",
    "RomLoadError",
    "ProgramTooLargeError",
    "initialize",
    "load_program",
    "install_font",
    "font_address",
    "MEMORY_SIZE",
    "ADDRESS_MASK",
    "PROGRAM_START",
    "MAX_PROGRAM_SIZE",
    "DISPLAY_WIDTH",
    "DISPLAY_HEIGHT",
    "DISPLAY_PIXELS",
    "REGISTER_COUNT",
    "FLAG_REGISTER",
    "STACK_DEPTH",
    "KEY_COUNT",
    "FONT_START",
    "FONT_GLYPH_BYTES",
    "FONT_SET",
]
