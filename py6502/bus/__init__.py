"""Bus-related helpers for the 6502 emulator."""

from .memory import ADDRESS_SPACE_SIZE, STACK_PAGE, STACK_PAGE_SIZE, Memory

__all__ = [
    "ADDRESS_SPACE_SIZE",
    "Memory",
    "STACK_PAGE",
    "STACK_PAGE_SIZE",
]
