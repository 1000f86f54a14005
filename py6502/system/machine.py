"""6502 machine assembly: one memory store plus one CPU."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from py6502.bus import STACK_PAGE, STACK_PAGE_SIZE, Memory
from py6502.cpu import CPU6502
from py6502.cpu.core import BRK_VECTOR
from py6502.loader import ProgramImage, load_program_from_path
from py6502.utils import TraceRecorder, debug_enabled, debug_log

# LDA #$42 / STA $0002 / BRK
SAMPLE_PROGRAM = bytes((0xA9, 0x42, 0x8D, 0x02, 0x00, 0x00))


@dataclass
class MachineConfig:
    """Runtime configuration for the 6502 machine."""

    program: Optional[bytes] = None
    origin: int = 0x0000
    strict_illegal: bool = False
    brk_vector: Optional[int] = None
    trace_capacity: int = 0


@dataclass
class Machine:
    """Aggregates the core components of the emulator."""

    memory: Memory
    cpu: CPU6502
    trace: TraceRecorder | None = None
    entry_point: int = 0x0000

    def load_image(self, image: ProgramImage) -> int:
        """Load ``image``, clear the stack and point PC at its origin."""

        written = self.memory.load_program(image.data, image.origin)
        self.clear_stack()
        self.entry_point = image.origin
        self.cpu.state.pc = image.origin
        if debug_enabled("loader"):
            debug_log(
                "loader",
                "loaded source=%s origin=%04x bytes=%d",
                image.source or "-",
                image.origin,
                written,
            )
        return written

    def load_path(self, path: Path, origin: int = 0x0000) -> ProgramImage:
        image = load_program_from_path(path, origin)
        self.load_image(image)
        return image

    def clear_stack(self) -> None:
        self.memory.clear_range(STACK_PAGE, STACK_PAGE_SIZE)
        self.cpu.state.sp = 0xFF

    def reset(self) -> None:
        """Reset the CPU and restart from the last loaded program's origin."""

        self.cpu.reset()
        self.cpu.state.pc = self.entry_point
        if self.trace is not None:
            self.trace.clear()


def create_machine(config: MachineConfig) -> Machine:
    """Instantiate a machine with the requested configuration."""

    memory = Memory()
    trace: TraceRecorder | None = None
    if config.trace_capacity > 0:
        trace = TraceRecorder(config.trace_capacity)
    elif debug_enabled("trace"):
        trace = TraceRecorder(512)

    cpu = CPU6502(memory, strict_illegal=config.strict_illegal, trace=trace)
    machine = Machine(memory=memory, cpu=cpu, trace=trace)

    if config.brk_vector is not None:
        memory.write_word(BRK_VECTOR, config.brk_vector)
    if config.program:
        machine.load_image(ProgramImage(config.program, config.origin, "config"))
    return machine
