"""Instruction decoding and opcode metadata for the CHIP-8 instruction set."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Final, Iterable, List, Mapping, Sequence


@dataclass(frozen=True)
class Fields:
    """Bit-slices of a single 16-bit instruction word."""

    word: int
    opcode_class: int
    x: int
    y: int
    n: int
    nn: int
    nnn: int


def decode(word: int) -> Fields:
    """Split ``word`` into its opcode fields. Total over every 16-bit value."""

    word &= 0xFFFF
    return Fields(
        word=word,
        opcode_class=(word >> 12) & 0x0F,
        x=(word >> 8) & 0x0F,
        y=(word >> 4) & 0x0F,
        n=word & 0x000F,
        nn=word & 0x00FF,
        nnn=word & 0x0FFF,
    )


class Mnemonic(Enum):
    """Every concrete instruction the interpreter executes."""

    CLS = auto()
    RET = auto()
    JP = auto()
    CALL = auto()
    SE_BYTE = auto()
    SNE_BYTE = auto()
    SE_REG = auto()
    LD_BYTE = auto()
    ADD_BYTE = auto()
    LD_REG = auto()
    OR = auto()
    AND = auto()
    XOR = auto()
    ADD_REG = auto()
    SUB = auto()
    SHR = auto()
    SUBN = auto()
    SHL = auto()
    SNE_REG = auto()
    LD_I = auto()
    JP_V0 = auto()
    RND = auto()
    DRW = auto()
    SKP = auto()
    SKNP = auto()
    LD_VX_DT = auto()
    LD_VX_K = auto()
    LD_DT_VX = auto()
    LD_ST_VX = auto()
    ADD_I = auto()
    LD_F = auto()
    LD_B = auto()
    LD_MEM_VX = auto()
    LD_VX_MEM = auto()


# Field used to pick an instruction within a class. Classes not listed map to
# a single instruction regardless of their low bits.
SUBKEY_FIELD: Final[Mapping[int, str]] = {
    0x0: "nn",
    0x8: "n",
    0xE: "nn",
    0xF: "nn",
}

_OPERAND_NAMES: Final[frozenset[str]] = frozenset({"x", "y", "n", "nn", "nnn"})


@dataclass(frozen=True)
class OpcodeSpec:
    """Metadata describing one instruction pattern such as ``8XY4``."""

    pattern: str
    mnemonic: Mnemonic
    handler: str
    operands: tuple[str, ...]
    syntax: str

    def __post_init__(self) -> None:
        if len(self.pattern) != 4:
            raise ValueError(f"pattern must have four nibbles: {self.pattern!r}")
        int(self.pattern[0], 16)
        unknown = set(self.operands) - _OPERAND_NAMES
        if unknown:
            raise ValueError(f"unknown operand fields {sorted(unknown)} in {self.pattern}")

    @property
    def opcode_class(self) -> int:
        return int(self.pattern[0], 16)

    def subkey(self) -> int | None:
        field_name = SUBKEY_FIELD.get(self.opcode_class)
        if field_name == "nn":
            return int(self.pattern[2:], 16)
        if field_name == "n":
            return int(self.pattern[3], 16)
        return None


@dataclass(frozen=True)
class Instruction:
    """A decoded instruction carrying only the operands its handler needs."""

    word: int
    spec: OpcodeSpec
    operands: tuple[int, ...]

    @property
    def mnemonic(self) -> Mnemonic:
        return self.spec.mnemonic

    @property
    def handler(self) -> str:
        return self.spec.handler

    def operand(self, name: str) -> int:
        return self.operands[self.spec.operands.index(name)]

    def disassemble(self) -> str:
        return self.spec.syntax.format(**dict(zip(self.spec.operands, self.operands)))


OpcodeBucket = Mapping[int | None, OpcodeSpec]


class OpcodeTable:
    """Mutable builder for the two-level (class, sub-key) dispatch table."""

    _CLASS_COUNT: Final[int] = 0x10

    def __init__(self) -> None:
        self._table: List[Dict[int | None, OpcodeSpec]] = [{} for _ in range(self._CLASS_COUNT)]

    def register(self, spec: OpcodeSpec) -> None:
        bucket = self._table[spec.opcode_class]
        key = spec.subkey()
        if key in bucket:
            existing = bucket[key]
            raise ValueError(f"pattern {spec.pattern} already registered as {existing.pattern}")
        bucket[key] = spec

    def register_all(self, specs: Iterable[OpcodeSpec]) -> None:
        for spec in specs:
            self.register(spec)

    def freeze(self) -> Sequence[OpcodeBucket]:
        return tuple(dict(bucket) for bucket in self._table)


def build_opcode_table(specs: Iterable[OpcodeSpec]) -> Sequence[OpcodeBucket]:
    """Build the 16-class dispatch table from ``specs``."""

    table = OpcodeTable()
    table.register_all(specs)
    return table.freeze()


DEFAULT_OPCODES: Sequence[OpcodeSpec] = (
    OpcodeSpec("00E0", Mnemonic.CLS, "op_cls", (), "CLS"),
    OpcodeSpec("00EE", Mnemonic.RET, "op_ret", (), "RET"),
    OpcodeSpec("1NNN", Mnemonic.JP, "op_jp", ("nnn",), "JP 0x{nnn:03X}"),
    OpcodeSpec("2NNN", Mnemonic.CALL, "op_call", ("nnn",), "CALL 0x{nnn:03X}"),
    OpcodeSpec("3XNN", Mnemonic.SE_BYTE, "op_se_byte", ("x", "nn"), "SE V{x:X}, 0x{nn:02X}"),
    OpcodeSpec("4XNN", Mnemonic.SNE_BYTE, "op_sne_byte", ("x", "nn"), "SNE V{x:X}, 0x{nn:02X}"),
    OpcodeSpec("5XY0", Mnemonic.SE_REG, "op_se_reg", ("x", "y"), "SE V{x:X}, V{y:X}"),
    OpcodeSpec("6XNN", Mnemonic.LD_BYTE, "op_ld_byte", ("x", "nn"), "LD V{x:X}, 0x{nn:02X}"),
    OpcodeSpec("7XNN", Mnemonic.ADD_BYTE, "op_add_byte", ("x", "nn"), "ADD V{x:X}, 0x{nn:02X}"),
    OpcodeSpec("8XY0", Mnemonic.LD_REG, "op_ld_reg", ("x", "y"), "LD V{x:X}, V{y:X}"),
    OpcodeSpec("8XY1", Mnemonic.OR, "op_or", ("x", "y"), "OR V{x:X}, V{y:X}"),
    OpcodeSpec("8XY2", Mnemonic.AND, "op_and", ("x", "y"), "AND V{x:X}, V{y:X}"),
    OpcodeSpec("8XY3", Mnemonic.XOR, "op_xor", ("x", "y"), "XOR V{x:X}, V{y:X}"),
    OpcodeSpec("8XY4", Mnemonic.ADD_REG, "op_add_reg", ("x", "y"), "ADD V{x:X}, V{y:X}"),
    OpcodeSpec("8XY5", Mnemonic.SUB, "op_sub", ("x", "y"), "SUB V{x:X}, V{y:X}"),
    OpcodeSpec("8XY6", Mnemonic.SHR, "op_shr", ("x", "y"), "SHR V{x:X}, V{y:X}"),
    OpcodeSpec("8XY7", Mnemonic.SUBN, "op_subn", ("x", "y"), "SUBN V{x:X}, V{y:X}"),
    OpcodeSpec("8XYE", Mnemonic.SHL, "op_shl", ("x", "y"), "SHL V{x:X}, V{y:X}"),
    OpcodeSpec("9XY0", Mnemonic.SNE_REG, "op_sne_reg", ("x", "y"), "SNE V{x:X}, V{y:X}"),
    OpcodeSpec("ANNN", Mnemonic.LD_I, "op_ld_i", ("nnn",), "LD I, 0x{nnn:03X}"),
    OpcodeSpec("BNNN", Mnemonic.JP_V0, "op_jp_v0", ("nnn",), "JP V0, 0x{nnn:03X}"),
    OpcodeSpec("CXNN", Mnemonic.RND, "op_rnd", ("x", "nn"), "RND V{x:X}, 0x{nn:02X}"),
    OpcodeSpec("DXYN", Mnemonic.DRW, "op_drw", ("x", "y", "n"), "DRW V{x:X}, V{y:X}, {n}"),
    OpcodeSpec("EX9E", Mnemonic.SKP, "op_skp", ("x",), "SKP V{x:X}"),
    OpcodeSpec("EXA1", Mnemonic.SKNP, "op_sknp", ("x",), "SKNP V{x:X}"),
    OpcodeSpec("FX07", Mnemonic.LD_VX_DT, "op_ld_vx_dt", ("x",), "LD V{x:X}, DT"),
    OpcodeSpec("FX0A", Mnemonic.LD_VX_K, "op_ld_vx_k", ("x",), "LD V{x:X}, K"),
    OpcodeSpec("FX15", Mnemonic.LD_DT_VX, "op_ld_dt_vx", ("x",), "LD DT, V{x:X}"),
    OpcodeSpec("FX18", Mnemonic.LD_ST_VX, "op_ld_st_vx", ("x",), "LD ST, V{x:X}"),
    OpcodeSpec("FX1E", Mnemonic.ADD_I, "op_add_i", ("x",), "ADD I, V{x:X}"),
    OpcodeSpec("FX29", Mnemonic.LD_F, "op_ld_f", ("x",), "LD F, V{x:X}"),
    OpcodeSpec("FX33", Mnemonic.LD_B, "op_ld_b", ("x",), "LD B, V{x:X}"),
    OpcodeSpec("FX55", Mnemonic.LD_MEM_VX, "op_ld_mem_vx", ("x",), "LD [I], V{x:X}"),
    OpcodeSpec("FX65", Mnemonic.LD_VX_MEM, "op_ld_vx_mem", ("x",), "LD V{x:X}, [I]"),
)


OPCODE_TABLE: Sequence[OpcodeBucket] = build_opcode_table(DEFAULT_OPCODES)


def resolve(fields: Fields, table: Sequence[OpcodeBucket] = OPCODE_TABLE) -> Instruction | None:
    """Select the concrete instruction for ``fields`` or ``None`` if unknown."""

    bucket = table[fields.opcode_class]
    field_name = SUBKEY_FIELD.get(fields.opcode_class)
    key = None if field_name is None else getattr(fields, field_name)
    spec = bucket.get(key)
    if spec is None:
        return None
    operands = tuple(getattr(fields, name) for name in spec.operands)
    return Instruction(fields.word, spec, operands)


def decode_instruction(word: int, table: Sequence[OpcodeBucket] = OPCODE_TABLE) -> Instruction | None:
    return resolve(decode(word), table)


def disassemble(word: int) -> str:
    """Render ``word`` as assembly text, or a data directive when unknown."""

    instruction = decode_instruction(word)
    if instruction is None:
        return f"DW 0x{word & 0xFFFF:04X}"
    return instruction.disassemble()


__all__ = [
    "Fields",
    "Mnemonic",
    "OpcodeSpec",
    "Instruction",
    "OpcodeTable",
    "OPCODE_TABLE",
    "DEFAULT_OPCODES",
    "build_opcode_table",
    "decode",
    "resolve",
    "decode_instruction",
    "disassemble",
]
