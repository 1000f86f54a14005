"""Program metadata structures for 6502 loaders."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


class LoaderError(RuntimeError):
    """Base class for program loading failures."""


@dataclass
class AddressRegion:
    """Represents a contiguous address range within the 6502 address space."""

    start: int
    end: int
    comment: str = ""

    def length(self) -> int:
        return self.end - self.start + 1


@dataclass
class ProgramImage:
    """Bytes to be loaded at ``origin`` plus where they came from."""

    data: bytes = b""
    origin: int = 0x0000
    source: str = ""
    regions: List[AddressRegion] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not 0 <= self.origin <= 0xFFFF:
            raise LoaderError(f"origin out of range: {self.origin:#x}")
        self.data = bytes(self.data)
        if self.data and not self.regions:
            self.add_region(self.origin, min(self.origin + len(self.data), 0x10000) - 1, self.source)

    def add_region(self, start: int, end: int, comment: str = "") -> None:
        self.regions.append(AddressRegion(start, end, comment))
