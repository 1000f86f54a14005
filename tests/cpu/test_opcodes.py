from __future__ import annotations

import pytest

from py6502.cpu.core import CPU6502
from py6502.cpu.opcodes import (
    AddressingMode,
    Instruction,
    OPCODE_TABLE,
    OpcodeTable,
    build_instruction_table,
    find_opcode,
    mnemonics,
)


EXPECTED_OPCODES = {
    0x69: ("ADC", AddressingMode.IMM, 2),
    0x65: ("ADC", AddressingMode.ZP, 3),
    0x75: ("ADC", AddressingMode.ZPX, 4),
    0x29: ("AND", AddressingMode.IMM, 2),
    0x25: ("AND", AddressingMode.ZP, 3),
    0x35: ("AND", AddressingMode.ZPX, 4),
    0xA9: ("LDA", AddressingMode.IMM, 2),
    0xA5: ("LDA", AddressingMode.ZP, 3),
    0xB5: ("LDA", AddressingMode.ZPX, 4),
    0xAD: ("LDA", AddressingMode.ABS, 4),
    0xBD: ("LDA", AddressingMode.ABX, 4),
    0xB9: ("LDA", AddressingMode.ABY, 4),
    0xA2: ("LDX", AddressingMode.IMM, 2),
    0xA6: ("LDX", AddressingMode.ZP, 3),
    0xB6: ("LDX", AddressingMode.ZPY, 4),
    0xAE: ("LDX", AddressingMode.ABS, 4),
    0xBE: ("LDX", AddressingMode.ABY, 4),
    0xA0: ("LDY", AddressingMode.IMM, 2),
    0xA4: ("LDY", AddressingMode.ZP, 3),
    0xB4: ("LDY", AddressingMode.ZPX, 4),
    0xAC: ("LDY", AddressingMode.ABS, 4),
    0xBC: ("LDY", AddressingMode.ABX, 4),
    0x85: ("STA", AddressingMode.ZP, 3),
    0x95: ("STA", AddressingMode.ZPX, 4),
    0x8D: ("STA", AddressingMode.ABS, 4),
    0x9D: ("STA", AddressingMode.ABX, 5),
    0x99: ("STA", AddressingMode.ABY, 5),
    0x86: ("STX", AddressingMode.ZP, 3),
    0x96: ("STX", AddressingMode.ZPY, 4),
    0x8E: ("STX", AddressingMode.ABS, 4),
    0x84: ("STY", AddressingMode.ZP, 3),
    0x94: ("STY", AddressingMode.ZPX, 4),
    0x8C: ("STY", AddressingMode.ABS, 4),
    0xAA: ("TAX", AddressingMode.IMP, 2),
    0xA8: ("TAY", AddressingMode.IMP, 2),
    0x8A: ("TXA", AddressingMode.IMP, 2),
    0x98: ("TYA", AddressingMode.IMP, 2),
    0xE8: ("INX", AddressingMode.IMP, 2),
    0xC8: ("INY", AddressingMode.IMP, 2),
    0xCA: ("DEX", AddressingMode.IMP, 2),
    0x88: ("DEY", AddressingMode.IMP, 2),
    0x4C: ("JMP", AddressingMode.ABS, 3),
    0x20: ("JSR", AddressingMode.ABS, 6),
    0x60: ("RTS", AddressingMode.IMP, 6),
    0x48: ("PHA", AddressingMode.IMP, 3),
    0x68: ("PLA", AddressingMode.IMP, 4),
    0x00: ("BRK", AddressingMode.IMP, 7),
}


def test_table_has_256_entries() -> None:
    assert len(OPCODE_TABLE) == 0x100


def test_table_matches_expected_opcodes() -> None:
    registered = {
        opcode: (entry.mnemonic, entry.mode, entry.cycles)
        for opcode, entry in enumerate(OPCODE_TABLE)
        if entry is not None
    }
    assert registered == EXPECTED_OPCODES


def test_entries_are_indexed_by_their_opcode() -> None:
    for opcode, entry in enumerate(OPCODE_TABLE):
        if entry is not None:
            assert entry.opcode == opcode


def test_every_handler_exists_on_cpu() -> None:
    for entry in OPCODE_TABLE:
        if entry is not None:
            assert callable(getattr(CPU6502, entry.handler, None)), entry.handler


@pytest.mark.parametrize(
    "mode, size",
    [
        (AddressingMode.IMP, 1),
        (AddressingMode.IMM, 2),
        (AddressingMode.ZP, 2),
        (AddressingMode.ZPX, 2),
        (AddressingMode.ZPY, 2),
        (AddressingMode.ABS, 3),
        (AddressingMode.ABX, 3),
        (AddressingMode.ABY, 3),
    ],
)
def test_instruction_size_follows_mode(mode: AddressingMode, size: int) -> None:
    assert Instruction(0xEA, "NOP", mode, 2, "op_nop").size == size


def test_instruction_validates_fields() -> None:
    with pytest.raises(ValueError):
        Instruction(0x100, "BAD", AddressingMode.IMP, 2, "op_bad")
    with pytest.raises(ValueError):
        Instruction(0xEA, "BAD", AddressingMode.IMP, 0, "op_bad")


def test_duplicate_registration_is_rejected() -> None:
    table = OpcodeTable()
    table.register(Instruction(0xEA, "NOP", AddressingMode.IMP, 2, "op_nop"))
    with pytest.raises(ValueError):
        table.register(Instruction(0xEA, "XXX", AddressingMode.IMP, 2, "op_xxx"))


def test_build_instruction_table_leaves_gaps_empty() -> None:
    table = build_instruction_table([Instruction(0xEA, "NOP", AddressingMode.IMP, 2, "op_nop")])
    assert table[0xEA] is not None
    assert sum(1 for entry in table if entry is not None) == 1


def test_find_opcode_is_case_insensitive() -> None:
    entry = find_opcode("sta", AddressingMode.ABX)
    assert entry is not None
    assert entry.opcode == 0x9D
    assert find_opcode("STX", AddressingMode.ZPX) is None


def test_mnemonics_lists_supported_instructions() -> None:
    names = mnemonics()
    assert "LDA" in names
    assert "BRK" in names
    assert "SBC" not in names
    assert len(names) == 22
