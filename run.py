"""Command-line entry point for the 6502 emulator monitor.

Without ``--steps`` the pygame monitor window opens; with ``--steps N`` the
program runs headless for up to N instructions and the register, disassembly
and memory panels are printed to stdout.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from py6502.ui.app import AppConfig, MonitorApp


def _hex_address(text: str) -> int:
    value = int(text.removeprefix("$"), 16)
    if not 0 <= value <= 0xFFFF:
        raise argparse.ArgumentTypeError(f"address out of range: {text}")
    return value


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="run.py",
        description="6502 emulator monitor",
    )
    parser.add_argument(
        "--program",
        type=Path,
        help="Program to load (.asm, .hex, .txt hex byte list, or raw binary)",
    )
    parser.add_argument(
        "--origin",
        type=_hex_address,
        default=0x0000,
        help="Load address in hex for binary and hex programs (default: 0000)",
    )
    parser.add_argument(
        "--memory",
        type=_hex_address,
        default=0x0000,
        help="Start address in hex of the memory panel, aligned down to 16 bytes (default: 0000)",
    )
    parser.add_argument(
        "--steps",
        type=int,
        help="Run headless for up to N instructions and print the machine state",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=2,
        help="Integer window scale factor (default: 2)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat unknown opcodes as a hard fault instead of stalling",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.program and not args.program.exists():
        parser.error(f"Program file not found: {args.program}")

    config = AppConfig(
        program_path=args.program,
        origin=args.origin,
        scale=args.scale,
        strict_illegal=args.strict,
        memory_start=args.memory,
    )
    try:
        app = MonitorApp(config)
        if args.steps is not None:
            for line in app.run_headless(args.steps):
                print(line)
        else:
            app.run()
    except RuntimeError as exc:
        parser.exit(1, f"run.py: {exc}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
