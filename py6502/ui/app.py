"""Pygame monitor window for the 6502 emulator."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from py6502.bus import STACK_PAGE
from py6502.cpu import IllegalOpcodeError
from py6502.loader import LoaderError
from py6502.system import SAMPLE_PROGRAM, Machine, MachineConfig, create_machine
from py6502.utils import debug_enabled, debug_log

from .views import disassembly_window, format_memory_rows, format_registers, format_stack

_FRAME_RATE = 30
_BACKGROUND = (16, 16, 32)
_FOREGROUND = (224, 224, 224)
_HIGHLIGHT = (255, 208, 64)

MEMORY_VIEW_SIZE = 0x100


@dataclass
class AppConfig:
    """Configuration for the monitor front-end."""

    program_path: Optional[Path] = None
    origin: int = 0x0000
    scale: int = 2
    strict_illegal: bool = False
    disassembly_rows: int = 20
    memory_start: int = 0x0000


class MonitorApp:
    """Steps the CPU on demand and renders registers, memory and disassembly."""

    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._running = False
        self._font = None
        self._status = ""
        self.memory_view_start = 0x0000
        self.goto_memory(config.memory_start)
        self.machine = self._create_machine()

    # ------------------------------------------------------------------
    # Machine control

    def _create_machine(self) -> Machine:
        program_path = self._config.program_path
        machine = create_machine(
            MachineConfig(
                program=SAMPLE_PROGRAM if program_path is None else None,
                strict_illegal=self._config.strict_illegal,
            )
        )
        if program_path is not None:
            self._load_program(machine, program_path)
        return machine

    def _load_program(self, machine: Machine, program_path: Path) -> None:
        try:
            image = machine.load_path(program_path, self._config.origin)
        except FileNotFoundError as exc:
            raise RuntimeError(f"Program file not found: {program_path}") from exc
        except LoaderError as exc:
            raise RuntimeError(f"Failed to load program {program_path}: {exc}") from exc
        self._status = f"loaded {image.source} ({len(image.data)} bytes @ ${image.origin:04X})"

    def step(self) -> int:
        try:
            cycles = self.machine.cpu.step()
        except IllegalOpcodeError as exc:
            self._status = str(exc)
            return 0
        if cycles == 0:
            opcode = self.machine.memory.read_byte(self.machine.cpu.state.pc)
            self._status = f"stalled on unknown opcode ${opcode:02X}"
        else:
            self._status = f"{self.machine.cpu.last_instruction.mnemonic} ({cycles} cycles)"
        if debug_enabled("ui"):
            debug_log("ui", "step status=%s", self._status)
        return cycles

    def reset(self) -> None:
        self.machine.reset()
        self._status = "reset"

    def goto_memory(self, address: int) -> None:
        """Move the memory view to the 16-byte row holding ``address``."""

        self.memory_view_start = address & 0xFFF0

    def page_memory(self, pages: int) -> None:
        self.goto_memory((self.memory_view_start + pages * MEMORY_VIEW_SIZE) & 0xFFFF)

    def run_headless(self, steps: int) -> List[str]:
        """Execute up to ``steps`` instructions and return the rendered panels."""

        for _ in range(max(steps, 0)):
            if self.step() == 0:
                break
        return self.render_lines()

    def render_lines(self) -> List[str]:
        machine = self.machine
        lines = ["REGISTERS"]
        lines.extend(format_registers(machine.cpu.state))
        lines.append(f"cycles {machine.cpu.cycle_count}")
        lines.append("")
        lines.append("DISASSEMBLY")
        lines.extend(disassembly_window(machine.cpu, self._config.disassembly_rows))
        lines.append("")
        end = min(self.memory_view_start + MEMORY_VIEW_SIZE, 0x10000) - 1
        lines.append(f"MEMORY ${self.memory_view_start:04X}-${end:04X}")
        lines.extend(format_memory_rows(machine.memory, self.memory_view_start, MEMORY_VIEW_SIZE))
        lines.append("")
        lines.append(f"STACK (page ${STACK_PAGE:04X})")
        lines.extend(format_stack(machine.memory, machine.cpu.state.sp) or ["(empty)"])
        if self._status:
            lines.append("")
            lines.append(self._status)
        return lines

    # ------------------------------------------------------------------
    # Window

    def run(self) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the UI") from exc

        pygame.init()
        pygame.display.set_caption("6502 Monitor")
        font_size = max(8, 7 * self._config.scale)
        font_name = pygame.font.match_font("menlo,dejavusansmono,couriernew,consolas,monospace")
        if not font_name:
            font_name = pygame.font.get_default_font()
        self._font = pygame.font.Font(font_name, font_size)
        line_height = font_size + 2

        width = 72 * (font_size * 6 // 10 + 1)
        height = 64 * line_height
        screen = pygame.display.set_mode((width, height))
        clock = pygame.time.Clock()
        self._running = True

        while self._running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self._running = False
                elif event.type == pygame.KEYDOWN:
                    self._handle_key(pygame, event.key)

            screen.fill(_BACKGROUND)
            y = 4
            for text in self.render_lines():
                color = _HIGHLIGHT if text.startswith(">") else _FOREGROUND
                rendered = self._font.render(text, False, color)
                screen.blit(rendered, (4, y))
                y += line_height
                if y > height:
                    break
            pygame.display.flip()
            clock.tick(_FRAME_RATE)

        pygame.quit()

    def _handle_key(self, pygame, key: int) -> None:
        if key == pygame.K_ESCAPE:
            self._running = False
        elif key in (pygame.K_SPACE, pygame.K_s):
            self.step()
        elif key == pygame.K_r:
            self.reset()
        elif key == pygame.K_PAGEUP:
            self.page_memory(-1)
        elif key == pygame.K_PAGEDOWN:
            self.page_memory(1)
        elif key == pygame.K_t and self.machine.trace is not None:
            self.machine.trace.dump("trace", 32)
