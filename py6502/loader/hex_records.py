"""Parsers for the textual program encodings accepted by the loader.

Two formats are understood:

* hex records (``:LLAAAATT<data>CC``), where only data records (type ``00``)
  contribute bytes. Record addresses are read but ignored: every data
  record is appended to one buffer that is later loaded at a single origin.
* plain hex byte lists, one byte per line, with ``;`` comment lines.
"""

from __future__ import annotations

from .program import LoaderError

RECORD_DATA = 0x00


class HexFormatError(LoaderError):
    """Raised when a hex record cannot be decoded."""


def parse_hex_records(text: str, *, verify_checksum: bool = False) -> bytes:
    """Concatenate the payload of every data record in ``text``."""

    payload = bytearray()
    for line_number, raw_line in enumerate(text.strip().splitlines(), start=1):
        line = raw_line.strip()
        if not line.startswith(":"):
            continue
        record = line[1:]
        byte_count = _hex_field(record, 0, 2, line_number)
        _hex_field(record, 2, 6, line_number)  # load address, unused
        record_type = _hex_field(record, 6, 8, line_number)

        data = [
            _hex_field(record, 8 + index * 2, 10 + index * 2, line_number)
            for index in range(byte_count)
        ]
        if verify_checksum:
            _verify_checksum(record, byte_count, line_number)

        if record_type == RECORD_DATA:
            payload.extend(data)
    return bytes(payload)


def parse_hex_bytes(text: str) -> bytes:
    """Parse a list of hex bytes, one per line; unparsable lines are skipped."""

    payload = bytearray()
    for raw_line in text.strip().splitlines():
        line = raw_line.strip()
        if not line or line.startswith(";"):
            continue
        try:
            value = int(line, 16)
        except ValueError:
            continue
        if 0 <= value <= 0xFF:
            payload.append(value)
    return bytes(payload)


def _hex_field(record: str, start: int, end: int, line_number: int) -> int:
    chunk = record[start:end]
    if len(chunk) != end - start:
        raise HexFormatError(f"line {line_number}: record truncated")
    try:
        return int(chunk, 16)
    except ValueError as exc:
        raise HexFormatError(f"line {line_number}: invalid hex digits '{chunk}'") from exc


def _verify_checksum(record: str, byte_count: int, line_number: int) -> None:
    body_length = 4 + byte_count
    values = [_hex_field(record, index * 2, index * 2 + 2, line_number) for index in range(body_length)]
    expected = _hex_field(record, body_length * 2, body_length * 2 + 2, line_number)
    actual = (-sum(values)) & 0xFF
    if actual != expected:
        raise HexFormatError(
            f"line {line_number}: checksum mismatch (expected {expected:02X}, computed {actual:02X})")
