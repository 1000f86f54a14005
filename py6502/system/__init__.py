"""6502 system assembly helpers."""

from __future__ import annotations

from .machine import SAMPLE_PROGRAM, Machine, MachineConfig, create_machine

__all__ = [
    "SAMPLE_PROGRAM",
    "MachineConfig",
    "Machine",
    "create_machine",
]
