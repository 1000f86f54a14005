"""Text renderings of the machine state shared by the window and the console."""

from __future__ import annotations

from typing import List

from py6502.bus import STACK_PAGE, Memory
from py6502.cpu import CPU6502, CPUState, disassemble_range

FLAG_LETTERS = "NV-BDIZC"
DISASSEMBLY_LOOKBEHIND = 0x20


def format_flags(p: int) -> str:
    return "".join(
        letter if p & (0x80 >> bit) else "."
        for bit, letter in enumerate(FLAG_LETTERS)
    )


def format_registers(state: CPUState) -> List[str]:
    return [
        f"PC ${state.pc:04X}   SP ${state.sp:02X}",
        f"A  ${state.a:02X}     X  ${state.x:02X}     Y  ${state.y:02X}",
        f"P  ${state.p:02X}     {FLAG_LETTERS}",
        f"          {format_flags(state.p)}",
    ]


def format_memory_rows(memory: Memory, start: int, length: int, width: int = 16) -> List[str]:
    if width <= 0:
        raise ValueError("width must be positive")
    data = memory.dump(start, length)
    lines: List[str] = []
    for offset in range(0, len(data), width):
        chunk = data[offset : offset + width]
        hex_part = " ".join(f"{value:02X}" for value in chunk)
        text_part = "".join(chr(value) if 32 <= value < 127 else "." for value in chunk)
        lines.append(f"${start + offset:04X}: {hex_part:<{width * 3 - 1}} | {text_part}")
    return lines


def format_stack(memory: Memory, sp: int, depth: int = 8) -> List[str]:
    """List the ``depth`` most recently pushed bytes, top of stack first."""

    lines: List[str] = []
    for index in range(1, depth + 1):
        offset = sp + index
        if offset > 0xFF:
            break
        address = STACK_PAGE + offset
        lines.append(f"${address:04X}: {memory.read_byte(address):02X}")
    return lines


def disassembly_window(cpu: CPU6502, rows: int = 20) -> List[str]:
    """Listing around PC, marking the current instruction.

    The listing starts a little before PC and ends after the first BRK at or
    past PC. When decoding from the look-behind start never lands on PC within
    ``rows`` instructions, the listing starts at PC instead.
    """

    pc = cpu.state.pc
    start = max(0, pc - DISASSEMBLY_LOOKBEHIND)
    records = _listing(cpu, start, pc, rows)
    if not any(record.address == pc for record in records):
        records = _listing(cpu, pc, pc, rows)
    lines: List[str] = []
    for record in records:
        marker = ">" if record.address == pc else " "
        lines.append(f"{marker} {record.format()}")
    return lines


def _listing(cpu: CPU6502, start: int, pc: int, rows: int) -> list:
    records = []
    for record in disassemble_range(cpu.memory, start, rows, table=cpu.instruction_table, stop_at_brk=False):
        records.append(record)
        if record.mnemonic == "BRK" and record.address >= pc:
            break
    return records
