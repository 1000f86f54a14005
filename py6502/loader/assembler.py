"""Two-pass assembler for the supported 6502 instruction subset.

The mnemonic/mode table is derived from the CPU opcode table, so anything the
assembler emits is something the CPU can execute. Operands are written in hex
(``#$hh``, ``$hh``, ``$hhhh`` with optional ``,X``/``,Y``) or as a label name,
which always resolves to an absolute address.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from py6502.cpu.opcodes import AddressingMode, Instruction, OPCODE_TABLE, find_opcode, mnemonics
from py6502.utils import debug_enabled, debug_log

from .program import LoaderError


class AssemblyError(LoaderError):
    """Raised when assembly source contains errors."""


_ORG = re.compile(r"^\.ORG\s+\$([0-9A-F]{1,4})$", re.IGNORECASE)
_LABEL = re.compile(r"^([A-Za-z_]\w*):")
_IMMEDIATE = re.compile(r"^#\$([0-9A-F]{1,2})$", re.IGNORECASE)
_ADDRESS = re.compile(r"^\$([0-9A-F]{1,4})(?:\s*,\s*([XY]))?$", re.IGNORECASE)
_LABEL_OPERAND = re.compile(r"^([A-Za-z_]\w*)(?:\s*,\s*([XY]))?$", re.IGNORECASE)

_ZERO_PAGE_MODES = {None: AddressingMode.ZP, "X": AddressingMode.ZPX, "Y": AddressingMode.ZPY}
_ABSOLUTE_MODES = {None: AddressingMode.ABS, "X": AddressingMode.ABX, "Y": AddressingMode.ABY}
_WIDEN = {
    AddressingMode.ZP: AddressingMode.ABS,
    AddressingMode.ZPX: AddressingMode.ABX,
    AddressingMode.ZPY: AddressingMode.ABY,
}


@dataclass
class SourceLine:
    """One line of source with the address and bytes assigned to it."""

    line_number: int
    text: str
    address: int
    data: List[int] = field(default_factory=list)
    mnemonic: str = ""
    error: str = ""
    label_ref: Optional[str] = None


@dataclass
class AssemblyResult:
    data: bytes
    origin: int
    lines: List[SourceLine]
    labels: dict[str, int] = field(default_factory=dict)

    @property
    def errors(self) -> List[str]:
        return [f"line {line.line_number}: {line.error}" for line in self.lines if line.error]

    @property
    def ok(self) -> bool:
        return not self.errors


class Assembler:
    """Assembles source text into a byte image plus origin."""

    def __init__(self, table: Sequence[Instruction | None] = OPCODE_TABLE) -> None:
        self._table = table
        self._mnemonics = mnemonics(table)

    def assemble(self, source: str) -> AssemblyResult:
        origin = 0x0000
        address = origin
        labels: dict[str, int] = {}
        lines: List[SourceLine] = []
        emitted = False

        for line_number, raw in enumerate(source.splitlines(), start=1):
            text = raw.split(";", 1)[0].strip()
            line = SourceLine(line_number, raw.rstrip(), address)
            lines.append(line)
            if not text:
                continue

            org = _ORG.match(text)
            if org:
                line.mnemonic = ".ORG"
                if emitted:
                    line.error = ".ORG must precede the first instruction"
                    continue
                origin = int(org.group(1), 16)
                address = origin
                # Nothing emitted yet, so earlier labels mark the new origin.
                for name in labels:
                    labels[name] = origin
                for earlier in lines:
                    earlier.address = origin
                continue

            label = _LABEL.match(text)
            if label:
                name = label.group(1)
                if name in labels:
                    line.error = f"Duplicate label: {name}"
                else:
                    labels[name] = address
                text = text[label.end():].strip()
                if not text:
                    continue

            self._parse_instruction(text, line)
            if line.data:
                emitted = True
            address += len(line.data)

        self._resolve_labels(lines, labels)

        image = bytearray()
        for line in lines:
            if not line.error:
                image.extend(value & 0xFF for value in line.data)

        result = AssemblyResult(bytes(image), origin, lines, labels)
        if debug_enabled("asm"):
            debug_log("asm", "origin=%04x bytes=%d errors=%d", origin, len(image), len(result.errors))
        return result

    def assemble_or_raise(self, source: str) -> AssemblyResult:
        result = self.assemble(source)
        if not result.ok:
            raise AssemblyError("; ".join(result.errors))
        return result

    def _parse_instruction(self, text: str, line: SourceLine) -> None:
        parts = text.split(None, 1)
        mnemonic = parts[0].upper()
        operand = parts[1].strip() if len(parts) > 1 else ""
        line.mnemonic = mnemonic

        if mnemonic not in self._mnemonics:
            line.error = f"Unknown instruction: {mnemonic}"
            return

        if not operand:
            self._emit(line, mnemonic, AddressingMode.IMP)
            return

        immediate = _IMMEDIATE.match(operand)
        if immediate:
            self._emit(line, mnemonic, AddressingMode.IMM, int(immediate.group(1), 16))
            return

        address = _ADDRESS.match(operand)
        if address:
            digits = address.group(1)
            index = address.group(2).upper() if address.group(2) else None
            value = int(digits, 16)
            if len(digits) <= 2:
                mode = _ZERO_PAGE_MODES[index]
                if self._lookup(mnemonic, mode) is None:
                    mode = _WIDEN[mode]
            else:
                mode = _ABSOLUTE_MODES[index]
            self._emit(line, mnemonic, mode, value)
            return

        label = _LABEL_OPERAND.match(operand)
        if label:
            index = label.group(2).upper() if label.group(2) else None
            line.label_ref = label.group(1)
            self._emit(line, mnemonic, _ABSOLUTE_MODES[index], 0x0000)
            return

        line.error = f"Invalid addressing mode for {mnemonic} {operand}"

    def _emit(self, line: SourceLine, mnemonic: str, mode: AddressingMode, value: int = 0) -> None:
        instruction = self._lookup(mnemonic, mode)
        if instruction is None:
            line.error = f"Invalid addressing mode for {mnemonic} ({mode.value})"
            return
        data = [instruction.opcode]
        if mode.operand_length == 1:
            data.append(value & 0xFF)
        elif mode.operand_length == 2:
            data.extend((value & 0xFF, (value >> 8) & 0xFF))
        line.data = data

    def _lookup(self, mnemonic: str, mode: AddressingMode) -> Instruction | None:
        return find_opcode(mnemonic, mode, self._table)

    def _resolve_labels(self, lines: List[SourceLine], labels: dict[str, int]) -> None:
        for line in lines:
            if line.label_ref is None or not line.data:
                continue
            target = labels.get(line.label_ref)
            if target is None:
                line.error = f"Undefined label: {line.label_ref}"
                continue
            line.data[1] = target & 0xFF
            line.data[2] = (target >> 8) & 0xFF


def assemble(source: str) -> AssemblyResult:
    """Assemble ``source`` with the default opcode table."""

    return Assembler().assemble(source)
