"""Disassembly of instructions held in memory."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Protocol, Sequence

from .opcodes import AddressingMode, Instruction, OPCODE_TABLE

UNKNOWN_MNEMONIC = "???"


class ByteReader(Protocol):
    def read_byte(self, address: int) -> int: ...


@dataclass(frozen=True)
class DisassembledInstruction:
    """One decoded instruction as rendered for display."""

    address: int
    bytes: tuple[int, ...]
    mnemonic: str
    operand: str
    comment: str

    @property
    def size(self) -> int:
        return len(self.bytes)

    @property
    def is_unknown(self) -> bool:
        return self.mnemonic == UNKNOWN_MNEMONIC

    def format(self) -> str:
        raw = " ".join(f"{value:02X}" for value in self.bytes)
        text = f"{self.mnemonic} {self.operand}".rstrip()
        return f"${self.address:04X}  {raw:<8}  {text:<12} ; {self.comment}"


def disassemble(
    memory: ByteReader,
    address: int,
    table: Sequence[Instruction | None] = OPCODE_TABLE,
) -> DisassembledInstruction:
    """Decode the instruction at ``address`` without touching CPU state."""

    opcode = memory.read_byte(address)
    instruction = table[opcode]
    if instruction is None:
        return DisassembledInstruction(address, (opcode,), UNKNOWN_MNEMONIC, "", "Unknown opcode")

    mode = instruction.mode
    raw = [opcode]
    raw.extend(memory.read_byte(address + offset) for offset in range(1, mode.operand_length + 1))
    operand, comment = _render_operand(mode, raw)
    return DisassembledInstruction(address, tuple(raw), instruction.mnemonic, operand, comment)


def disassemble_range(
    memory: ByteReader,
    start: int,
    count: int,
    *,
    table: Sequence[Instruction | None] = OPCODE_TABLE,
    stop_at_brk: bool = True,
) -> Iterator[DisassembledInstruction]:
    """Yield up to ``count`` consecutive instructions starting at ``start``.

    The listing ends at the top of the address space, and after the first BRK
    when ``stop_at_brk`` is set.
    """

    address = start
    for _ in range(count):
        if address > 0xFFFF:
            return
        record = disassemble(memory, address, table)
        yield record
        if stop_at_brk and record.mnemonic == "BRK":
            return
        address += record.size


def _render_operand(mode: AddressingMode, raw: list[int]) -> tuple[str, str]:
    if mode is AddressingMode.IMP:
        return "", "Implied addressing"
    if mode is AddressingMode.IMM:
        return f"#${raw[1]:02X}", f"Load immediate {raw[1]}"
    if mode is AddressingMode.ZP:
        return f"${raw[1]:02X}", f"Zero page address ${raw[1]:02X}"
    if mode is AddressingMode.ZPX:
        return f"${raw[1]:02X},X", "Zero page X indexed"
    if mode is AddressingMode.ZPY:
        return f"${raw[1]:02X},Y", "Zero page Y indexed"

    word = raw[1] | (raw[2] << 8)
    if mode is AddressingMode.ABS:
        return f"${word:04X}", f"Absolute address ${word:04X}"
    if mode is AddressingMode.ABX:
        return f"${word:04X},X", "Absolute X indexed"
    if mode is AddressingMode.ABY:
        return f"${word:04X},Y", "Absolute Y indexed"
    raise ValueError(f"unsupported addressing mode: {mode}")
