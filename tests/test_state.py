"""Tests for machine state initialisation and program loading."""

from __future__ import annotations

import pytest

from pychip8.state import (
    DISPLAY_PIXELS,
    FONT_SET,
    FONT_START,
    KEY_COUNT,
    MAX_PROGRAM_SIZE,
    MEMORY_SIZE,
    PROGRAM_START,
    ProgramTooLargeError,
    RomLoadError,
    font_address,
    initialize,
    load_program,
)


def test_initialize_zeroes_everything() -> None:
    state = initialize()

    assert len(state.memory) == MEMORY_SIZE
    assert not any(state.memory)
    assert state.program_counter == PROGRAM_START
    assert state.index_register == 0
    assert state.stack_pointer == 0
    assert state.call_stack == [0] * 16
    assert state.delay_timer == 0
    assert state.sound_timer == 0
    assert list(state.registers) == [0] * 16
    assert len(state.framebuffer) == DISPLAY_PIXELS
    assert not any(state.framebuffer)
    assert state.key_state == [False] * KEY_COUNT


def test_initialize_can_install_font() -> None:
    state = initialize(install_font_set=True)

    assert bytes(state.memory[FONT_START : FONT_START + len(FONT_SET)]) == FONT_SET
    assert not any(state.memory[PROGRAM_START:])
    assert font_address(0x1F) == FONT_START + 0xF * 5


def test_seeded_generators_repeat() -> None:
    first = initialize(seed=7)
    second = initialize(seed=7)
    assert [first.rng.randrange(256) for _ in range(4)] == [second.rng.randrange(256) for _ in range(4)]


def test_load_program_copies_at_program_start() -> None:
    state = initialize()
    load_program(state, b"\x12\x34\x56")

    assert bytes(state.memory[PROGRAM_START : PROGRAM_START + 3]) == b"\x12\x34\x56"
    assert state.memory[PROGRAM_START - 1] == 0
    assert state.memory[PROGRAM_START + 3] == 0


def test_load_program_accepts_largest_image() -> None:
    state = initialize()
    load_program(state, b"\xAB" * MAX_PROGRAM_SIZE)
    assert state.memory[MEMORY_SIZE - 1] == 0xAB
    assert len(state.memory) == MEMORY_SIZE


def test_load_program_rejects_oversized_image_without_mutation() -> None:
    state = initialize()

    with pytest.raises(ProgramTooLargeError) as info:
        load_program(state, b"\xFF" * (MAX_PROGRAM_SIZE + 1))

    assert isinstance(info.value, RomLoadError)
    assert info.value.size == MAX_PROGRAM_SIZE + 1
    assert not any(state.memory)


def test_read_word_is_big_endian_and_wraps() -> None:
    state = initialize()
    state.memory[0xFFF] = 0xAB
    state.memory[0x000] = 0xCD
    state.memory[0x200:0x202] = b"\x12\x34"

    assert state.read_word(0x200) == 0x1234
    assert state.read_word(0xFFF) == 0xABCD


def test_set_keys_requires_full_snapshot() -> None:
    state = initialize()
    keys = [False] * KEY_COUNT
    keys[3] = True

    state.set_keys(keys)
    assert state.pressed_keys() == [3]

    with pytest.raises(ValueError):
        state.set_keys([True] * 4)


def test_framebuffer_rows_are_row_major() -> None:
    state = initialize()
    state.framebuffer[1 * 64 + 2] = 1

    rows = state.framebuffer_rows()

    assert len(rows) == 32
    assert rows[1][2] == 1
    assert state.pixel(2, 1) == 1
