"""Tests for the command-line entry point."""

from __future__ import annotations

import pytest

import run
from pychip8.video import AMBER, MONOCHROME


def test_parser_defaults(tmp_path) -> None:
    args = run.build_arg_parser().parse_args(["--rom", str(tmp_path / "game.ch8")])

    assert args.scale == 12
    assert args.ips == 700
    assert args.palette == "mono"
    assert not args.fullscreen
    assert not args.mute
    assert not args.strict
    assert args.seed is None


def test_build_config_maps_options(tmp_path) -> None:
    rom_path = tmp_path / "game.ch8"
    args = run.build_arg_parser().parse_args(
        ["--rom", str(rom_path), "--palette", "amber", "--ips", "1000", "--seed", "9", "--strict", "--mute"]
    )

    config = run.build_config(args)

    assert config.rom_path == rom_path
    assert config.palette == AMBER
    assert config.instructions_per_second == 1000
    assert config.seed == 9
    assert config.strict_opcodes
    assert config.mute
    assert run.build_config(run.build_arg_parser().parse_args(["--rom", "x"])).palette == MONOCHROME


def test_rom_is_required() -> None:
    with pytest.raises(SystemExit) as info:
        run.main([])
    assert info.value.code == 2


def test_missing_rom_file_is_rejected(tmp_path) -> None:
    with pytest.raises(SystemExit) as info:
        run.main(["--rom", str(tmp_path / "missing.ch8")])
    assert info.value.code == 2


@pytest.mark.parametrize("option", ["--scale", "--ips"])
def test_non_positive_rates_are_rejected(tmp_path, option) -> None:
    rom_path = tmp_path / "game.ch8"
    rom_path.write_bytes(b"\x12\x00")
    with pytest.raises(SystemExit) as info:
        run.main(["--rom", str(rom_path), option, "0"])
    assert info.value.code == 2
