"""Reduced 6502 emulator: memory, CPU core, disassembler, loaders and monitor."""

from __future__ import annotations

from . import bus, cpu, loader, system, ui, utils

__all__: list[str] = [
    "bus",
    "cpu",
    "loader",
    "system",
    "ui",
    "utils",
]
