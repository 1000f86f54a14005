"""Loaders for 6502 program formats."""

from __future__ import annotations

from .assembler import Assembler, AssemblyError, AssemblyResult, SourceLine, assemble
from .files import (
    load_assembly_text,
    load_binary,
    load_hex_bytes_text,
    load_hex_text,
    load_program_from_path,
)
from .hex_records import HexFormatError, parse_hex_bytes, parse_hex_records
from .program import AddressRegion, LoaderError, ProgramImage

__all__ = [
    "AddressRegion",
    "ProgramImage",
    "LoaderError",
    "HexFormatError",
    "AssemblyError",
    "Assembler",
    "AssemblyResult",
    "SourceLine",
    "assemble",
    "parse_hex_records",
    "parse_hex_bytes",
    "load_binary",
    "load_hex_text",
    "load_hex_bytes_text",
    "load_assembly_text",
    "load_program_from_path",
]
