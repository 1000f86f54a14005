"""Opcode metadata for the reduced 6502 instruction set."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, Iterable, List, Sequence


class AddressingMode(Enum):
    """Supported addressing modes, valued by their operand length in bytes."""

    IMM = "IMM"
    ZP = "ZP"
    ZPX = "ZPX"
    ZPY = "ZPY"
    ABS = "ABS"
    ABX = "ABX"
    ABY = "ABY"
    IMP = "IMP"

    @property
    def operand_length(self) -> int:
        return _OPERAND_LENGTHS[self]


_OPERAND_LENGTHS: Final = {
    AddressingMode.IMM: 1,
    AddressingMode.ZP: 1,
    AddressingMode.ZPX: 1,
    AddressingMode.ZPY: 1,
    AddressingMode.ABS: 2,
    AddressingMode.ABX: 2,
    AddressingMode.ABY: 2,
    AddressingMode.IMP: 0,
}


@dataclass(frozen=True)
class Instruction:
    """Metadata describing a single opcode."""

    opcode: int
    mnemonic: str
    mode: AddressingMode
    cycles: int
    handler: str

    def __post_init__(self) -> None:
        if not 0 <= self.opcode <= 0xFF:
            raise ValueError(f"opcode out of range: {self.opcode}")
        if self.cycles <= 0:
            raise ValueError("cycles must be positive")

    @property
    def size(self) -> int:
        return 1 + self.mode.operand_length


class OpcodeTable:
    """Mutable builder for the 256-entry instruction table."""

    _TABLE_SIZE: Final[int] = 0x100

    def __init__(self) -> None:
        self._table: List[Instruction | None] = [None] * self._TABLE_SIZE

    def register(self, instruction: Instruction) -> None:
        opcode = instruction.opcode
        if self._table[opcode] is not None:
            existing = self._table[opcode]
            raise ValueError(
                f"opcode {opcode:#04x} already registered as {existing.mnemonic}")
        self._table[opcode] = instruction

    def register_all(self, instructions: Iterable[Instruction]) -> None:
        for instruction in instructions:
            self.register(instruction)

    def freeze(self) -> Sequence[Instruction | None]:
        return tuple(self._table)


def build_instruction_table(instructions: Iterable[Instruction]) -> Sequence[Instruction | None]:
    """Build a 256-entry instruction lookup table."""

    table = OpcodeTable()
    table.register_all(instructions)
    return table.freeze()


IMM = AddressingMode.IMM
ZP = AddressingMode.ZP
ZPX = AddressingMode.ZPX
ZPY = AddressingMode.ZPY
ABS = AddressingMode.ABS
ABX = AddressingMode.ABX
ABY = AddressingMode.ABY
IMP = AddressingMode.IMP

DEFAULT_INSTRUCTIONS: Sequence[Instruction] = (
    # ADC
    Instruction(0x69, "ADC", IMM, 2, "op_adc"),
    Instruction(0x65, "ADC", ZP, 3, "op_adc"),
    Instruction(0x75, "ADC", ZPX, 4, "op_adc"),
    # AND
    Instruction(0x29, "AND", IMM, 2, "op_and"),
    Instruction(0x25, "AND", ZP, 3, "op_and"),
    Instruction(0x35, "AND", ZPX, 4, "op_and"),
    # LDA
    Instruction(0xA9, "LDA", IMM, 2, "op_lda"),
    Instruction(0xA5, "LDA", ZP, 3, "op_lda"),
    Instruction(0xB5, "LDA", ZPX, 4, "op_lda"),
    Instruction(0xAD, "LDA", ABS, 4, "op_lda"),
    Instruction(0xBD, "LDA", ABX, 4, "op_lda"),
    Instruction(0xB9, "LDA", ABY, 4, "op_lda"),
    # LDX
    Instruction(0xA2, "LDX", IMM, 2, "op_ldx"),
    Instruction(0xA6, "LDX", ZP, 3, "op_ldx"),
    Instruction(0xB6, "LDX", ZPY, 4, "op_ldx"),
    Instruction(0xAE, "LDX", ABS, 4, "op_ldx"),
    Instruction(0xBE, "LDX", ABY, 4, "op_ldx"),
    # LDY
    Instruction(0xA0, "LDY", IMM, 2, "op_ldy"),
    Instruction(0xA4, "LDY", ZP, 3, "op_ldy"),
    Instruction(0xB4, "LDY", ZPX, 4, "op_ldy"),
    Instruction(0xAC, "LDY", ABS, 4, "op_ldy"),
    Instruction(0xBC, "LDY", ABX, 4, "op_ldy"),
    # STA
    Instruction(0x85, "STA", ZP, 3, "op_sta"),
    Instruction(0x95, "STA", ZPX, 4, "op_sta"),
    Instruction(0x8D, "STA", ABS, 4, "op_sta"),
    Instruction(0x9D, "STA", ABX, 5, "op_sta"),
    Instruction(0x99, "STA", ABY, 5, "op_sta"),
    # STX
    Instruction(0x86, "STX", ZP, 3, "op_stx"),
    Instruction(0x96, "STX", ZPY, 4, "op_stx"),
    Instruction(0x8E, "STX", ABS, 4, "op_stx"),
    # STY
    Instruction(0x84, "STY", ZP, 3, "op_sty"),
    Instruction(0x94, "STY", ZPX, 4, "op_sty"),
    Instruction(0x8C, "STY", ABS, 4, "op_sty"),
    # Transfers
    Instruction(0xAA, "TAX", IMP, 2, "op_tax"),
    Instruction(0xA8, "TAY", IMP, 2, "op_tay"),
    Instruction(0x8A, "TXA", IMP, 2, "op_txa"),
    Instruction(0x98, "TYA", IMP, 2, "op_tya"),
    # Increment/Decrement
    Instruction(0xE8, "INX", IMP, 2, "op_inx"),
    Instruction(0xC8, "INY", IMP, 2, "op_iny"),
    Instruction(0xCA, "DEX", IMP, 2, "op_dex"),
    Instruction(0x88, "DEY", IMP, 2, "op_dey"),
    # Jump and subroutine
    Instruction(0x4C, "JMP", ABS, 3, "op_jmp"),
    Instruction(0x20, "JSR", ABS, 6, "op_jsr"),
    Instruction(0x60, "RTS", IMP, 6, "op_rts"),
    # Stack operations
    Instruction(0x48, "PHA", IMP, 3, "op_pha"),
    Instruction(0x68, "PLA", IMP, 4, "op_pla"),
    # Software break
    Instruction(0x00, "BRK", IMP, 7, "op_brk"),
)


OPCODE_TABLE: Sequence[Instruction | None] = build_instruction_table(DEFAULT_INSTRUCTIONS)


def find_opcode(mnemonic: str, mode: AddressingMode,
                table: Sequence[Instruction | None] = OPCODE_TABLE) -> Instruction | None:
    """Reverse lookup used by the assembler."""

    wanted = mnemonic.upper()
    for instruction in table:
        if instruction is not None and instruction.mnemonic == wanted and instruction.mode is mode:
            return instruction
    return None


def mnemonics(table: Sequence[Instruction | None] = OPCODE_TABLE) -> frozenset[str]:
    return frozenset(instruction.mnemonic for instruction in table if instruction is not None)
