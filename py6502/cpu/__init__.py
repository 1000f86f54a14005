"""CPU package for the 6502 emulator."""

from .core import CPU6502, CPUError, CPUState, IllegalOpcodeError
from .disassembler import DisassembledInstruction, disassemble, disassemble_range
from . import opcodes

__all__ = [
    "CPU6502",
    "CPUState",
    "CPUError",
    "IllegalOpcodeError",
    "DisassembledInstruction",
    "disassemble",
    "disassemble_range",
    "opcodes",
]
