"""Flat 64KB memory store for the 6502 emulator.

Every address handed to :class:`Memory` is wrapped into the 16-bit address
space and every stored value is masked to a byte, so no access can fail. Word
accessors are little endian and read the high byte from ``address + 1`` without
any page-boundary special casing.
"""

from __future__ import annotations

from typing import Final, Iterable

ADDRESS_SPACE_SIZE: Final[int] = 0x10000
STACK_PAGE: Final[int] = 0x0100
STACK_PAGE_SIZE: Final[int] = 0x100


def _mask16(value: int) -> int:
    """Clamp ``value`` to the 16-bit address space."""

    return value & 0xFFFF


class Memory:
    """Byte-addressable store covering the whole 16-bit address space."""

    def __init__(self) -> None:
        self._data = bytearray(ADDRESS_SPACE_SIZE)

    def __len__(self) -> int:
        return ADDRESS_SPACE_SIZE

    def read_byte(self, address: int) -> int:
        return self._data[_mask16(address)]

    def write_byte(self, address: int, value: int) -> None:
        self._data[_mask16(address)] = value & 0xFF

    def read_word(self, address: int) -> int:
        low = self.read_byte(address)
        high = self.read_byte(address + 1)
        return low | (high << 8)

    def write_word(self, address: int, value: int) -> None:
        self.write_byte(address, value & 0xFF)
        self.write_byte(address + 1, (value >> 8) & 0xFF)

    def load_program(self, data: Iterable[int], origin: int = 0x0000) -> int:
        """Copy ``data`` into memory starting at ``origin``.

        Bytes that would land past ``0xFFFF`` are dropped. Returns the number of
        bytes actually written.
        """

        start = _mask16(origin)
        payload = bytes(data)
        length = min(len(payload), ADDRESS_SPACE_SIZE - start)
        self._data[start : start + length] = payload[:length]
        return length

    def dump(self, start: int = 0x0000, length: int = 256) -> bytes:
        """Return a read-only copy of ``length`` bytes clipped to the address range."""

        begin = min(max(start, 0), ADDRESS_SPACE_SIZE)
        end = min(begin + max(length, 0), ADDRESS_SPACE_SIZE)
        return bytes(self._data[begin:end])

    def clear(self) -> None:
        self._data[:] = bytes(ADDRESS_SPACE_SIZE)

    def clear_range(self, start: int, length: int) -> None:
        begin = _mask16(start)
        end = min(begin + max(length, 0), ADDRESS_SPACE_SIZE)
        self._data[begin:end] = bytes(end - begin)

    def snapshot(self) -> bytes:
        return bytes(self._data)
