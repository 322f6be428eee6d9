"""Cycle pacing and 60 Hz countdown-timer accounting."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from pychip8.cpu import Chip8CPU, Instruction
from pychip8.state import MachineState
from pychip8.utils import debug_enabled, debug_log

DEFAULT_INSTRUCTIONS_PER_SECOND = 700
TIMER_FREQUENCY = 60  # Hz, fixed by the architecture
TIMER_PERIOD = 1.0 / TIMER_FREQUENCY

Clock = Callable[[], float]
Sleeper = Callable[[float], None]


@dataclass(frozen=True)
class CycleOutcome:
    """Result of one fetch-decode-execute-pace cycle."""

    executed_opcode: int
    pc_before: int
    instruction: Instruction | None = None
    fault: str | None = None
    timer_ticks: int = 0
    slept: float = 0.0

    @property
    def mnemonic(self) -> str:
        if self.instruction is None:
            return ""
        return self.instruction.mnemonic.name


def decrement_timers(state: MachineState) -> None:
    """Count both timers down by one, stopping at zero."""

    if state.delay_timer > 0:
        state.delay_timer -= 1
    if state.sound_timer > 0:
        state.sound_timer -= 1


class CycleScheduler:
    """Drive one machine at a target instruction rate.

    Timer bookkeeping lives on the instance, and the clock and sleep
    functions are injectable so several machines can run side by side and
    tests can substitute a fake clock.
    """

    def __init__(
        self,
        cpu: Chip8CPU | None = None,
        *,
        instructions_per_second: int = DEFAULT_INSTRUCTIONS_PER_SECOND,
        clock: Clock = time.perf_counter,
        sleep: Sleeper = time.sleep,
    ) -> None:
        if instructions_per_second <= 0:
            raise ValueError("instructions_per_second must be positive")
        self.cpu = cpu if cpu is not None else Chip8CPU()
        self._instructions_per_second = instructions_per_second
        self._cycle_interval = 1.0 / instructions_per_second
        self._clock = clock
        self._sleep = sleep
        self._timer_remainder = 0.0
        self._last_mark: float | None = None
        self.cycle_count = 0

    @property
    def instructions_per_second(self) -> int:
        return self._instructions_per_second

    @property
    def cycle_interval(self) -> float:
        return self._cycle_interval

    @property
    def timer_remainder(self) -> float:
        return self._timer_remainder

    def reset(self) -> None:
        """Forget accumulated timing so the next cycle starts fresh."""

        self._timer_remainder = 0.0
        self._last_mark = None
        self.cycle_count = 0

    def run_cycle(self, state: MachineState) -> CycleOutcome:
        start = self._clock()
        if self._last_mark is None:
            self._last_mark = start

        step = self.cpu.step(state)

        end = self._clock()
        elapsed = max(0.0, end - start)
        # Wall time since the previous cycle's mark includes the pacing sleep,
        # which keeps timer cadence independent of the instruction rate.
        ticks = self.account_time(state, end - self._last_mark)
        self._last_mark = end

        remaining = self._cycle_interval - elapsed
        slept = 0.0
        if remaining > 0:
            self._sleep(remaining)
            slept = remaining

        self.cycle_count += 1
        return CycleOutcome(
            executed_opcode=step.word,
            pc_before=step.pc_before,
            instruction=step.instruction,
            fault=step.fault,
            timer_ticks=ticks,
            slept=slept,
        )

    def account_time(self, state: MachineState, elapsed: float) -> int:
        """Add ``elapsed`` seconds to the timer remainder and tick as needed."""

        self._timer_remainder += max(0.0, elapsed)
        ticks = 0
        while self._timer_remainder >= TIMER_PERIOD:
            decrement_timers(state)
            self._timer_remainder -= TIMER_PERIOD
            ticks += 1
        if ticks and debug_enabled("timer"):
            debug_log(
                "timer",
                "ticks=%d delay=%d sound=%d remainder=%.6f",
                ticks,
                state.delay_timer,
                state.sound_timer,
                self._timer_remainder,
            )
        return ticks

    def run_for(self, state: MachineState, duration: float) -> list[CycleOutcome]:
        """Run cycles until ``duration`` seconds of clock time have passed."""

        outcomes: list[CycleOutcome] = []
        deadline = self._clock() + duration
        while self._clock() < deadline:
            outcomes.append(self.run_cycle(state))
        return outcomes


__all__ = [
    "CycleScheduler",
    "CycleOutcome",
    "decrement_timers",
    "DEFAULT_INSTRUCTIONS_PER_SECOND",
    "TIMER_FREQUENCY",
    "TIMER_PERIOD",
]
