"""Turn files and text buffers into :class:`ProgramImage` objects."""

from __future__ import annotations

from pathlib import Path

from py6502.utils import debug_enabled, debug_log

from .assembler import Assembler
from .hex_records import parse_hex_bytes, parse_hex_records
from .program import ProgramImage

ASSEMBLY_SUFFIXES = frozenset({".asm", ".s"})
HEX_RECORD_SUFFIXES = frozenset({".hex", ".ihx"})
HEX_BYTE_SUFFIXES = frozenset({".txt"})


def load_binary(data: bytes, origin: int = 0x0000, *, source: str = "binary") -> ProgramImage:
    return ProgramImage(bytes(data), origin, source)


def load_hex_text(text: str, origin: int = 0x0000, *, source: str = "hex") -> ProgramImage:
    return ProgramImage(parse_hex_records(text), origin, source)


def load_hex_bytes_text(text: str, origin: int = 0x0000, *, source: str = "hex bytes") -> ProgramImage:
    return ProgramImage(parse_hex_bytes(text), origin, source)


def load_assembly_text(text: str, *, source: str = "assembly") -> ProgramImage:
    """Assemble ``text``; the origin comes from its ``.ORG`` directive."""

    result = Assembler().assemble_or_raise(text)
    return ProgramImage(result.data, result.origin, source)


def load_program_from_path(path: Path, origin: int = 0x0000, *, encoding: str = "utf-8") -> ProgramImage:
    """Load ``path`` choosing the format from its suffix.

    Assembly sources carry their own origin and ignore ``origin``.
    """

    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in ASSEMBLY_SUFFIXES:
        image = load_assembly_text(path.read_text(encoding=encoding), source=path.name)
    elif suffix in HEX_RECORD_SUFFIXES:
        image = load_hex_text(path.read_text(encoding=encoding), origin, source=path.name)
    elif suffix in HEX_BYTE_SUFFIXES:
        image = load_hex_bytes_text(path.read_text(encoding=encoding), origin, source=path.name)
    else:
        image = load_binary(path.read_bytes(), origin, source=path.name)

    if debug_enabled("loader"):
        debug_log("loader", "path=%s origin=%04x bytes=%d", path, image.origin, len(image.data))
    return image
