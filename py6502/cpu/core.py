"""Core 6502 CPU implementation for the reduced instruction set."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from py6502.bus import STACK_PAGE, STACK_PAGE_SIZE, Memory
from py6502.utils import TraceRecorder, debug_enabled, debug_log, diagnostic_log

from .disassembler import DisassembledInstruction, disassemble
from .opcodes import AddressingMode, Instruction, OPCODE_TABLE


class CPUError(Exception):
    """Base error for CPU-related failures."""


class IllegalOpcodeError(CPUError):
    """Raised in strict mode when the CPU encounters an unmapped opcode."""


FLAG_C = 0x01
FLAG_Z = 0x02
FLAG_I = 0x04
FLAG_D = 0x08
FLAG_B = 0x10
FLAG_U = 0x20
FLAG_V = 0x40
FLAG_N = 0x80

RESET_STATUS = FLAG_I | FLAG_U
BRK_VECTOR = 0xFFFE


@dataclass
class CPUState:
    """Snapshot of the 6502 register file."""

    a: int = 0x00
    x: int = 0x00
    y: int = 0x00
    sp: int = 0xFF
    pc: int = 0x0000
    p: int = RESET_STATUS

    def clone(self) -> "CPUState":
        return CPUState(self.a, self.x, self.y, self.sp, self.pc, self.p)


@dataclass
class CPU6502:
    """Fetch-decode-execute engine over a flat 64KB :class:`Memory`."""

    memory: Memory = field(default_factory=Memory)
    instruction_table: Sequence[Instruction | None] = field(default=OPCODE_TABLE)
    strict_illegal: bool = False
    trace: TraceRecorder | None = None

    state: CPUState = field(default_factory=CPUState)
    cycle_count: int = 0
    last_instruction: Instruction | None = None

    def __post_init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        """Reset the register file and zero the stack page.

        Program memory outside the stack page is left untouched.
        """

        self.state = CPUState()
        self.cycle_count = 0
        self.last_instruction = None
        self.memory.clear_range(STACK_PAGE, STACK_PAGE_SIZE)

    def step(self) -> int:
        """Execute a single instruction and return its cycle count.

        An unmapped opcode is reported and leaves PC where it is, so the call
        returns 0 and stepping again stalls on the same byte.
        """

        pc_before = self.state.pc
        opcode = self._read_byte(pc_before)
        instruction = self.instruction_table[opcode]
        if instruction is None:
            return self._illegal_opcode(pc_before, opcode)

        state_before = self.state.clone() if self.trace is not None else None
        if debug_enabled("cpu"):
            debug_log("cpu", "pc=%04x opcode=%02x %s", pc_before, opcode, instruction.mnemonic)

        self.state.pc = (self.state.pc + 1) & 0xFFFF
        handler = getattr(self, instruction.handler, None)
        if handler is None:
            raise CPUError(f"handler '{instruction.handler}' not implemented")

        handler_cycles = handler(instruction) or 0
        cycles = instruction.cycles + handler_cycles
        self.cycle_count += cycles
        self.last_instruction = instruction

        if self.trace is not None and state_before is not None:
            self.trace.record_step(state_before, opcode, cycles, mnemonic=instruction.mnemonic)
        if debug_enabled("cpu"):
            debug_log(
                "cpu",
                "pc=%04x a=%02x x=%02x y=%02x sp=%02x p=%02x cycles=%d",
                self.state.pc,
                self.state.a,
                self.state.x,
                self.state.y,
                self.state.sp,
                self.state.p,
                cycles,
            )
        return cycles

    def run(self, max_instructions: int, *, stop_on_brk: bool = True) -> int:
        """Step up to ``max_instructions`` times and return the cycles consumed.

        Stops early when the engine stalls on an unknown opcode or, with
        ``stop_on_brk``, right after a BRK has been executed.
        """

        total = 0
        for _ in range(max(max_instructions, 0)):
            cycles = self.step()
            if cycles == 0:
                break
            total += cycles
            if stop_on_brk and self.last_instruction is not None and self.last_instruction.mnemonic == "BRK":
                break
        return total

    def disassemble(self, address: int) -> DisassembledInstruction:
        return disassemble(self.memory, address, self.instruction_table)

    # ------------------------------------------------------------------
    # Stack

    def push(self, value: int) -> None:
        self._write_byte(STACK_PAGE + self.state.sp, value)
        self.state.sp = (self.state.sp - 1) & 0xFF

    def pop(self) -> int:
        self.state.sp = (self.state.sp + 1) & 0xFF
        return self._read_byte(STACK_PAGE + self.state.sp)

    def _push_word(self, value: int) -> None:
        self.push((value >> 8) & 0xFF)
        self.push(value & 0xFF)

    def _pop_word(self) -> int:
        low = self.pop()
        high = self.pop()
        return (high << 8) | low

    # ------------------------------------------------------------------
    # Flag helpers

    def set_flag(self, flag: int, enabled: bool) -> None:
        if enabled:
            self.state.p |= flag
        else:
            self.state.p &= ~flag & 0xFF

    def get_flag(self, flag: int) -> bool:
        return (self.state.p & flag) != 0

    def update_nz(self, value: int) -> None:
        self.set_flag(FLAG_Z, value == 0)
        self.set_flag(FLAG_N, (value & 0x80) != 0)

    # ------------------------------------------------------------------
    # Instruction handlers

    def op_lda(self, instruction: Instruction) -> int:
        self.state.a = self._fetch_operand(instruction.mode)
        self.update_nz(self.state.a)
        return 0

    def op_ldx(self, instruction: Instruction) -> int:
        self.state.x = self._fetch_operand(instruction.mode)
        self.update_nz(self.state.x)
        return 0

    def op_ldy(self, instruction: Instruction) -> int:
        self.state.y = self._fetch_operand(instruction.mode)
        self.update_nz(self.state.y)
        return 0

    def op_sta(self, instruction: Instruction) -> int:
        self._write_byte(self._resolve_address(instruction.mode), self.state.a)
        return 0

    def op_stx(self, instruction: Instruction) -> int:
        self._write_byte(self._resolve_address(instruction.mode), self.state.x)
        return 0

    def op_sty(self, instruction: Instruction) -> int:
        self._write_byte(self._resolve_address(instruction.mode), self.state.y)
        return 0

    def op_adc(self, instruction: Instruction) -> int:
        operand = self._fetch_operand(instruction.mode)
        total = self.state.a + operand + (1 if self.get_flag(FLAG_C) else 0)
        self.set_flag(FLAG_C, total > 0xFF)
        # V mirrors bit 7 of the raw sum rather than signed overflow.
        self.set_flag(FLAG_V, (total & 0x80) != 0)
        result = total & 0xFF
        self.update_nz(result)
        self.state.a = result
        return 0

    def op_and(self, instruction: Instruction) -> int:
        self.state.a = (self.state.a & self._fetch_operand(instruction.mode)) & 0xFF
        self.update_nz(self.state.a)
        return 0

    def op_tax(self, _: Instruction) -> int:
        self.state.x = self.state.a
        self.update_nz(self.state.x)
        return 0

    def op_tay(self, _: Instruction) -> int:
        self.state.y = self.state.a
        self.update_nz(self.state.y)
        return 0

    def op_txa(self, _: Instruction) -> int:
        self.state.a = self.state.x
        self.update_nz(self.state.a)
        return 0

    def op_tya(self, _: Instruction) -> int:
        self.state.a = self.state.y
        self.update_nz(self.state.a)
        return 0

    def op_inx(self, _: Instruction) -> int:
        self.state.x = (self.state.x + 1) & 0xFF
        self.update_nz(self.state.x)
        return 0

    def op_iny(self, _: Instruction) -> int:
        self.state.y = (self.state.y + 1) & 0xFF
        self.update_nz(self.state.y)
        return 0

    def op_dex(self, _: Instruction) -> int:
        self.state.x = (self.state.x - 1) & 0xFF
        self.update_nz(self.state.x)
        return 0

    def op_dey(self, _: Instruction) -> int:
        self.state.y = (self.state.y - 1) & 0xFF
        self.update_nz(self.state.y)
        return 0

    def op_jmp(self, _: Instruction) -> int:
        self.state.pc = self._read_word(self.state.pc)
        return 0

    def op_jsr(self, _: Instruction) -> int:
        target = self._fetch_word()
        self._push_word((self.state.pc - 1) & 0xFFFF)
        self.state.pc = target
        return 0

    def op_rts(self, _: Instruction) -> int:
        self.state.pc = (self._pop_word() + 1) & 0xFFFF
        return 0

    def op_pha(self, _: Instruction) -> int:
        self.push(self.state.a)
        return 0

    def op_pla(self, _: Instruction) -> int:
        self.state.a = self.pop()
        self.update_nz(self.state.a)
        return 0

    def op_brk(self, _: Instruction) -> int:
        self._push_word((self.state.pc + 1) & 0xFFFF)
        self.push(self.state.p | FLAG_B | FLAG_U)
        self.set_flag(FLAG_I, True)
        self.state.pc = self._read_word(BRK_VECTOR)
        return 0

    # ------------------------------------------------------------------
    # Memory helpers

    def _read_byte(self, address: int) -> int:
        return self.memory.read_byte(address)

    def _read_word(self, address: int) -> int:
        return self.memory.read_word(address)

    def _write_byte(self, address: int, value: int) -> None:
        self.memory.write_byte(address, value)

    def _fetch_byte(self) -> int:
        value = self._read_byte(self.state.pc)
        self.state.pc = (self.state.pc + 1) & 0xFFFF
        return value

    def _fetch_word(self) -> int:
        value = self._read_word(self.state.pc)
        self.state.pc = (self.state.pc + 2) & 0xFFFF
        return value

    # ------------------------------------------------------------------
    # Addressing helpers

    def _fetch_operand(self, mode: AddressingMode) -> int:
        if mode is AddressingMode.IMM:
            return self._fetch_byte()
        return self._read_byte(self._resolve_address(mode))

    def _resolve_address(self, mode: AddressingMode) -> int:
        # Absolute indexed sums are left unmasked; Memory wraps them on access.
        if mode is AddressingMode.ZP:
            return self._fetch_byte()
        if mode is AddressingMode.ZPX:
            return (self._fetch_byte() + self.state.x) & 0xFF
        if mode is AddressingMode.ZPY:
            return (self._fetch_byte() + self.state.y) & 0xFF
        if mode is AddressingMode.ABS:
            return self._fetch_word()
        if mode is AddressingMode.ABX:
            return self._fetch_word() + self.state.x
        if mode is AddressingMode.ABY:
            return self._fetch_word() + self.state.y
        raise CPUError(f"addressing mode {mode.value} cannot be resolved to an address")

    def _illegal_opcode(self, pc: int, opcode: int) -> int:
        if self.strict_illegal:
            raise IllegalOpcodeError(f"illegal opcode {opcode:#04x} at {pc:#06x}")
        diagnostic_log("cpu", "Unknown opcode: $%02X at $%04X", opcode, pc)
        if self.trace is not None:
            self.trace.record_step(self.state, opcode, 0, note="illegal")
        return 0
