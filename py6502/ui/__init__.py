"""Monitor front-end for the 6502 emulator."""

from .app import AppConfig, MonitorApp
from .views import disassembly_window, format_flags, format_memory_rows, format_registers, format_stack

__all__ = [
    "AppConfig",
    "MonitorApp",
    "disassembly_window",
    "format_flags",
    "format_memory_rows",
    "format_registers",
    "format_stack",
]
