"""Raw CHIP-8 program image loading."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from pychip8.state import MAX_PROGRAM_SIZE, PROGRAM_START, MachineState, ProgramTooLargeError, load_program


@dataclass
class ProgramImage:
    """A program image read from disk, plus where it came from."""

    data: bytes
    name: str = ""

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def end_address(self) -> int:
        return PROGRAM_START + len(self.data) - 1

    @property
    def odd_length(self) -> bool:
        return len(self.data) % 2 == 1


def read_rom(stream: BinaryIO, *, name: str = "") -> ProgramImage:
    """Read a complete program image from ``stream`` and check its size."""

    data = stream.read(MAX_PROGRAM_SIZE + 1)
    if len(data) > MAX_PROGRAM_SIZE:
        remaining = stream.read()
        raise ProgramTooLargeError(len(data) + len(remaining))
    return ProgramImage(bytes(data), name)


def read_rom_from_path(path: Path) -> ProgramImage:
    with path.open("rb") as handle:
        return read_rom(handle, name=path.name)


def load_rom_from_path(path: Path, state: MachineState) -> ProgramImage:
    """Read ``path`` and copy it into ``state`` at ``PROGRAM_START``."""

    image = read_rom_from_path(path)
    load_program(state, image.data)
    return image
