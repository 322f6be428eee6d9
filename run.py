"""Command-line entry point for the Python CHIP-8 interpreter."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pychip8.system import DEFAULT_INSTRUCTIONS_PER_SECOND
from pychip8.ui.app import AppConfig, Chip8App
from pychip8.video import NAMED_PALETTES, palette_by_name


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="run.py",
        description="CHIP-8 interpreter",
    )
    parser.add_argument(
        "--rom",
        type=Path,
        required=True,
        help="Path to the CHIP-8 program image",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=12,
        help="Integer window scale factor (default: 12)",
    )
    parser.add_argument(
        "--ips",
        type=int,
        default=DEFAULT_INSTRUCTIONS_PER_SECOND,
        help=f"Target instructions per second (default: {DEFAULT_INSTRUCTIONS_PER_SECOND})",
    )
    parser.add_argument(
        "--palette",
        choices=sorted(NAMED_PALETTES),
        default="mono",
        help="Display colours (default: mono)",
    )
    parser.add_argument(
        "--fullscreen",
        action="store_true",
        help="Launch in fullscreen mode",
    )
    parser.add_argument(
        "--mute",
        action="store_true",
        help="Disable the buzzer",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the random number generator used by CXNN",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Stop on unknown opcodes instead of skipping them",
    )
    return parser


def build_config(args: argparse.Namespace) -> AppConfig:
    return AppConfig(
        rom_path=args.rom,
        scale=args.scale,
        fullscreen=args.fullscreen,
        instructions_per_second=args.ips,
        palette=palette_by_name(args.palette),
        mute=args.mute,
        seed=args.seed,
        strict_opcodes=args.strict,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not args.rom.exists():
        parser.error(f"ROM file not found: {args.rom}")
    if args.scale <= 0:
        parser.error("--scale must be positive")
    if args.ips <= 0:
        parser.error("--ips must be positive")

    app = Chip8App(build_config(args))
    try:
        app.run()
    except RuntimeError as exc:
        parser.exit(1, f"run.py: {exc}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
