"""CPU package for the CHIP-8 interpreter."""

from .core import (
    FAULT_STACK_OVERFLOW,
    FAULT_STACK_UNDERFLOW,
    FAULT_UNKNOWN_OPCODE,
    Chip8CPU,
    CPUError,
    IllegalOpcodeError,
    StepResult,
)
from .opcodes import Fields, Instruction, Mnemonic, decode, decode_instruction, disassemble, resolve
from . import opcodes

__all__ = [
    "Chip8CPU",
    "StepResult",
    "CPUError",
    "IllegalOpcodeError",
    "FAULT_STACK_OVERFLOW",
    "FAULT_STACK_UNDERFLOW",
    "FAULT_UNKNOWN_OPCODE",
    "Fields",
    "Instruction",
    "Mnemonic",
    "decode",
    "decode_instruction",
    "disassemble",
    "resolve",
    "opcodes",
]
