"""Tests for instruction decoding and the opcode table."""

from __future__ import annotations

import pytest

from pychip8.cpu.opcodes import (
    DEFAULT_OPCODES,
    OPCODE_TABLE,
    Mnemonic,
    OpcodeSpec,
    OpcodeTable,
    decode,
    decode_instruction,
    disassemble,
)


def test_decode_splits_nibbles() -> None:
    fields = decode(0xD2A7)

    assert fields.word == 0xD2A7
    assert fields.opcode_class == 0xD
    assert fields.x == 0x2
    assert fields.y == 0xA
    assert fields.n == 0x7
    assert fields.nn == 0xA7
    assert fields.nnn == 0x2A7


@pytest.mark.parametrize("word", [0x0000, 0x00E0, 0x1ABC, 0x8F3E, 0xFFFF])
def test_decode_fields_are_consistent_slices(word: int) -> None:
    fields = decode(word)

    assert fields.nnn == ((fields.x << 8) | (fields.y << 4) | fields.n) & 0xFFF
    assert fields.nn == (fields.y << 4) | fields.n
    assert (fields.opcode_class << 12) | fields.nnn == word


def test_decode_masks_to_sixteen_bits() -> None:
    assert decode(0x1_2345).word == 0x2345


def test_every_default_pattern_resolves_to_itself() -> None:
    for spec in DEFAULT_OPCODES:
        word = int(spec.pattern.replace("X", "1").replace("Y", "2").replace("N", "3"), 16)
        instruction = decode_instruction(word)
        assert instruction is not None, spec.pattern
        assert instruction.spec is spec


def test_instruction_carries_only_needed_operands() -> None:
    draw = decode_instruction(0xD125)
    assert draw is not None
    assert draw.mnemonic is Mnemonic.DRW
    assert draw.operands == (0x1, 0x2, 0x5)

    jump = decode_instruction(0x1234)
    assert jump is not None
    assert jump.operands == (0x234,)
    assert jump.operand("nnn") == 0x234

    cls = decode_instruction(0x00E0)
    assert cls is not None
    assert cls.operands == ()


def test_sub_dispatch_uses_low_nibble_for_class_eight() -> None:
    instruction = decode_instruction(0x8AB6)
    assert instruction is not None
    assert instruction.mnemonic is Mnemonic.SHR
    assert instruction.operands == (0xA, 0xB)


@pytest.mark.parametrize("word", [0x0123, 0x00E1, 0x8AB8, 0xE19F, 0xF0FF, 0xF129 + 1])
def test_unknown_words_resolve_to_none(word: int) -> None:
    assert decode_instruction(word) is None


def test_disassemble_formats_operands() -> None:
    assert disassemble(0x7102) == "ADD V1, 0x02"
    assert disassemble(0xA2F0) == "LD I, 0x2F0"
    assert disassemble(0xDAB3) == "DRW VA, VB, 3"
    assert disassemble(0xF355) == "LD [I], V3"
    assert disassemble(0x0123) == "DW 0x0123"


def test_table_has_sixteen_classes() -> None:
    assert len(OPCODE_TABLE) == 16
    assert set(OPCODE_TABLE[0x8]) == {0x0, 0x1, 0x2, 0x3, 0x4, 0x5, 0x6, 0x7, 0xE}
    assert set(OPCODE_TABLE[0x1]) == {None}


def test_duplicate_registration_is_rejected() -> None:
    table = OpcodeTable()
    table.register(OpcodeSpec("00E0", Mnemonic.CLS, "op_cls", (), "CLS"))

    with pytest.raises(ValueError):
        table.register(OpcodeSpec("00E0", Mnemonic.CLS, "op_cls", (), "CLS"))


def test_opcode_pattern_validation() -> None:
    with pytest.raises(ValueError):
        OpcodeSpec("123", Mnemonic.JP, "op_jp", ("nnn",), "JP")
    with pytest.raises(ValueError):
        OpcodeSpec("1NNN", Mnemonic.JP, "op_jp", ("addr",), "JP")
