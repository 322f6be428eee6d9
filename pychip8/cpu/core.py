"""CHIP-8 execution engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from pychip8.state import (
    ADDRESS_MASK,
    DISPLAY_HEIGHT,
    DISPLAY_WIDTH,
    FLAG_REGISTER,
    KEY_COUNT,
    STACK_DEPTH,
    MachineState,
    font_address,
)
from pychip8.utils import debug_enabled, debug_log

from .opcodes import OPCODE_TABLE, Instruction, OpcodeBucket, resolve, decode


class CPUError(Exception):
    """Base error for CPU-related failures."""


class IllegalOpcodeError(CPUError):
    """Raised in strict mode when a word does not decode to any instruction."""

    def __init__(self, word: int, pc: int) -> None:
        super().__init__(f"unknown opcode {word:04X} at {pc:03X}")
        self.word = word
        self.pc = pc


FAULT_STACK_OVERFLOW = "stack-overflow"
FAULT_STACK_UNDERFLOW = "stack-underflow"
FAULT_UNKNOWN_OPCODE = "unknown-opcode"


@dataclass(frozen=True)
class StepResult:
    """What a single fetch-decode-execute step did."""

    word: int
    pc_before: int
    instruction: Instruction | None
    fault: str | None = None


@dataclass
class Chip8CPU:
    """Fetches, decodes and executes instructions against a ``MachineState``."""

    strict: bool = False
    instruction_table: Sequence[OpcodeBucket] = field(default=OPCODE_TABLE)
    instructions_executed: int = 0

    def step(self, state: MachineState) -> StepResult:
        """Execute one instruction.

        ``program_counter`` is advanced past the fetched word before the
        handler runs, so control-flow handlers simply overwrite it.
        """

        pc_before = state.program_counter
        word = state.read_word(pc_before)
        state.program_counter = (pc_before + 2) & 0xFFFF
        instruction = resolve(decode(word), self.instruction_table)
        fault = self.execute(state, instruction, word=word, pc=pc_before)
        self.instructions_executed += 1
        return StepResult(word, pc_before, instruction, fault)

    def execute(
        self,
        state: MachineState,
        instruction: Instruction | None,
        *,
        word: int,
        pc: int,
    ) -> str | None:
        """Run ``instruction`` and return a fault tag for non-fatal conditions."""

        if instruction is None:
            if self.strict:
                raise IllegalOpcodeError(word, pc)
            if debug_enabled("cpu"):
                debug_log("cpu", "unknown opcode %04x at pc=%03x", word, pc)
            return FAULT_UNKNOWN_OPCODE

        if debug_enabled("cpu"):
            debug_log("cpu", "pc=%03x opcode=%04x %s", pc, word, instruction.disassemble())

        handler = getattr(self, instruction.handler, None)
        if handler is None:
            raise CPUError(f"handler '{instruction.handler}' not implemented")
        fault = handler(state, *instruction.operands)
        if fault is not None and debug_enabled("cpu"):
            debug_log("cpu", "%s at pc=%03x opcode=%04x sp=%d", fault, pc, word, state.stack_pointer)
        return fault

    # ------------------------------------------------------------------
    # Flow control

    def op_cls(self, state: MachineState) -> None:
        state.framebuffer[:] = bytes(len(state.framebuffer))

    def op_ret(self, state: MachineState) -> str | None:
        if state.stack_pointer == 0:
            return FAULT_STACK_UNDERFLOW
        state.stack_pointer -= 1
        state.program_counter = state.call_stack[state.stack_pointer]
        return None

    def op_jp(self, state: MachineState, nnn: int) -> None:
        state.program_counter = nnn

    def op_call(self, state: MachineState, nnn: int) -> str | None:
        if state.stack_pointer >= STACK_DEPTH:
            return FAULT_STACK_OVERFLOW
        state.call_stack[state.stack_pointer] = state.program_counter
        state.stack_pointer += 1
        state.program_counter = nnn
        return None

    def op_jp_v0(self, state: MachineState, nnn: int) -> None:
        state.program_counter = (state.registers[0] + nnn) & 0xFFFF

    # ------------------------------------------------------------------
    # Conditional skips

    def op_se_byte(self, state: MachineState, x: int, nn: int) -> None:
        self._skip_if(state, state.registers[x] == nn)

    def op_sne_byte(self, state: MachineState, x: int, nn: int) -> None:
        self._skip_if(state, state.registers[x] != nn)

    def op_se_reg(self, state: MachineState, x: int, y: int) -> None:
        self._skip_if(state, state.registers[x] == state.registers[y])

    def op_sne_reg(self, state: MachineState, x: int, y: int) -> None:
        self._skip_if(state, state.registers[x] != state.registers[y])

    def op_skp(self, state: MachineState, x: int) -> None:
        self._skip_if(state, self._key_pressed(state, state.registers[x]))

    def op_sknp(self, state: MachineState, x: int) -> None:
        self._skip_if(state, not self._key_pressed(state, state.registers[x]))

    # ------------------------------------------------------------------
    # Register loads and arithmetic

    def op_ld_byte(self, state: MachineState, x: int, nn: int) -> None:
        state.registers[x] = nn

    def op_add_byte(self, state: MachineState, x: int, nn: int) -> None:
        state.registers[x] = (state.registers[x] + nn) & 0xFF

    def op_ld_reg(self, state: MachineState, x: int, y: int) -> None:
        state.registers[x] = state.registers[y]

    def op_or(self, state: MachineState, x: int, y: int) -> None:
        state.registers[x] |= state.registers[y]

    def op_and(self, state: MachineState, x: int, y: int) -> None:
        state.registers[x] &= state.registers[y]

    def op_xor(self, state: MachineState, x: int, y: int) -> None:
        state.registers[x] ^= state.registers[y]

    def op_add_reg(self, state: MachineState, x: int, y: int) -> None:
        total = state.registers[x] + state.registers[y]
        self._write_with_flag(state, x, total & 0xFF, total > 0xFF)

    def op_sub(self, state: MachineState, x: int, y: int) -> None:
        vx, vy = state.registers[x], state.registers[y]
        self._write_with_flag(state, x, (vx - vy) & 0xFF, vx >= vy)

    def op_subn(self, state: MachineState, x: int, y: int) -> None:
        vx, vy = state.registers[x], state.registers[y]
        self._write_with_flag(state, x, (vy - vx) & 0xFF, vy >= vx)

    def op_shr(self, state: MachineState, x: int, y: int) -> None:
        value = state.registers[y]
        self._write_with_flag(state, x, value >> 1, value & 0x01)

    def op_shl(self, state: MachineState, x: int, y: int) -> None:
        value = state.registers[y]
        self._write_with_flag(state, x, (value << 1) & 0xFF, (value >> 7) & 0x01)

    def op_rnd(self, state: MachineState, x: int, nn: int) -> None:
        state.registers[x] = state.rng.randrange(0x100) & nn

    # ------------------------------------------------------------------
    # Index register and memory

    def op_ld_i(self, state: MachineState, nnn: int) -> None:
        state.index_register = nnn

    def op_add_i(self, state: MachineState, x: int) -> None:
        state.index_register = (state.index_register + state.registers[x]) & 0xFFFF

    def op_ld_f(self, state: MachineState, x: int) -> None:
        state.index_register = font_address(state.registers[x])

    def op_ld_b(self, state: MachineState, x: int) -> None:
        value = state.registers[x]
        base = state.index_register
        for offset, digit in enumerate((value // 100, (value // 10) % 10, value % 10)):
            state.memory[(base + offset) & ADDRESS_MASK] = digit

    def op_ld_mem_vx(self, state: MachineState, x: int) -> None:
        base = state.index_register
        for register in range(x + 1):
            state.memory[(base + register) & ADDRESS_MASK] = state.registers[register]

    def op_ld_vx_mem(self, state: MachineState, x: int) -> None:
        base = state.index_register
        for register in range(x + 1):
            state.registers[register] = state.memory[(base + register) & ADDRESS_MASK]

    # ------------------------------------------------------------------
    # Display

    def op_drw(self, state: MachineState, x: int, y: int, n: int) -> None:
        origin_x = state.registers[x] % DISPLAY_WIDTH
        origin_y = state.registers[y] % DISPLAY_HEIGHT
        framebuffer = state.framebuffer
        collision = False

        for row in range(n):
            py = origin_y + row
            if py >= DISPLAY_HEIGHT:
                break
            sprite = state.memory[(state.index_register + row) & ADDRESS_MASK]
            for col in range(8):
                px = origin_x + col
                if px >= DISPLAY_WIDTH:
                    break
                if not (sprite >> (7 - col)) & 0x01:
                    continue
                offset = py * DISPLAY_WIDTH + px
                if framebuffer[offset]:
                    collision = True
                    framebuffer[offset] = 0
                else:
                    framebuffer[offset] = 1

        state.registers[FLAG_REGISTER] = 1 if collision else 0

    # ------------------------------------------------------------------
    # Timers and keypad

    def op_ld_vx_dt(self, state: MachineState, x: int) -> None:
        state.registers[x] = state.delay_timer & 0xFF

    def op_ld_dt_vx(self, state: MachineState, x: int) -> None:
        state.delay_timer = state.registers[x]

    def op_ld_st_vx(self, state: MachineState, x: int) -> None:
        state.sound_timer = state.registers[x]

    def op_ld_vx_k(self, state: MachineState, x: int) -> None:
        for key, pressed in enumerate(state.key_state):
            if pressed:
                state.registers[x] = key
                return
        # Nothing pressed: rewind so the same instruction runs next cycle.
        state.program_counter = (state.program_counter - 2) & 0xFFFF

    # ------------------------------------------------------------------
    # Internals

    @staticmethod
    def _skip_if(state: MachineState, condition: bool) -> None:
        if condition:
            state.program_counter = (state.program_counter + 2) & 0xFFFF

    @staticmethod
    def _key_pressed(state: MachineState, key: int) -> bool:
        return bool(state.key_state[key % KEY_COUNT])

    @staticmethod
    def _write_with_flag(state: MachineState, x: int, value: int, flag: bool | int) -> None:
        state.registers[x] = value
        state.registers[FLAG_REGISTER] = 1 if flag else 0


__all__ = [
    "Chip8CPU",
    "StepResult",
    "CPUError",
    "IllegalOpcodeError",
    "FAULT_STACK_OVERFLOW",
    "FAULT_STACK_UNDERFLOW",
    "FAULT_UNKNOWN_OPCODE",
]
