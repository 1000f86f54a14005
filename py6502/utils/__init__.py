"""Utility helpers for the 6502 emulator."""

from .debug import debug_enabled, debug_log, diagnostic_log, reload_categories
from .trace import TraceEntry, TraceRecorder

__all__ = [
    "debug_enabled",
    "debug_log",
    "diagnostic_log",
    "reload_categories",
    "TraceEntry",
    "TraceRecorder",
]
