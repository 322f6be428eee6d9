"""CHIP-8 system assembly helpers."""

from __future__ import annotations

from .machine import Machine, MachineConfig, create_machine
from .scheduler import (
    DEFAULT_INSTRUCTIONS_PER_SECOND,
    TIMER_FREQUENCY,
    TIMER_PERIOD,
    CycleOutcome,
    CycleScheduler,
    decrement_timers,
)

__all__ = [
    "MachineConfig",
    "Machine",
    "create_machine",
    "CycleScheduler",
    "CycleOutcome",
    "decrement_timers",
    "DEFAULT_INSTRUCTIONS_PER_SECOND",
    "TIMER_FREQUENCY",
    "TIMER_PERIOD",
]
