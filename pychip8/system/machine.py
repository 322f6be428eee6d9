"""CHIP-8 machine assembly."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

from pychip8.cpu import Chip8CPU
from pychip8.state import MachineState, initialize, load_program

from .scheduler import DEFAULT_INSTRUCTIONS_PER_SECOND, Clock, CycleOutcome, CycleScheduler, Sleeper


@dataclass
class MachineConfig:
    """Runtime configuration for a CHIP-8 machine."""

    instructions_per_second: int = DEFAULT_INSTRUCTIONS_PER_SECOND
    seed: Optional[int] = None
    install_font: bool = True
    strict_opcodes: bool = False
    rom_image: Optional[bytes] = None


@dataclass
class Machine:
    """Aggregates the state, execution engine and scheduler of one machine."""

    state: MachineState
    cpu: Chip8CPU
    scheduler: CycleScheduler

    def run_cycle(self) -> CycleOutcome:
        return self.scheduler.run_cycle(self.state)

    def load_program(self, data: bytes) -> None:
        load_program(self.state, data)

    def press_keys(self, keys) -> None:
        self.state.set_keys(keys)


def create_machine(
    config: MachineConfig,
    *,
    clock: Clock = time.perf_counter,
    sleep: Sleeper = time.sleep,
) -> Machine:
    """Instantiate a machine with the requested configuration."""

    state = initialize(seed=config.seed, install_font_set=config.install_font)
    if config.rom_image is not None:
        load_program(state, config.rom_image)

    cpu = Chip8CPU(strict=config.strict_opcodes)
    scheduler = CycleScheduler(
        cpu,
        instructions_per_second=config.instructions_per_second,
        clock=clock,
        sleep=sleep,
    )
    return Machine(state=state, cpu=cpu, scheduler=scheduler)
