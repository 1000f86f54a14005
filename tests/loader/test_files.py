from __future__ import annotations

from pathlib import Path

import pytest

from py6502.loader import (
    AssemblyError,
    LoaderError,
    ProgramImage,
    load_binary,
    load_hex_bytes_text,
    load_program_from_path,
)

EXAMPLES_DIR = Path(__file__).resolve().parents[2] / "examples"


def test_binary_file_loads_at_requested_origin(tmp_path: Path) -> None:
    path = tmp_path / "prog.bin"
    path.write_bytes(bytes((0xA9, 0x42, 0x00)))

    image = load_program_from_path(path, 0x0600)

    assert image.data == bytes((0xA9, 0x42, 0x00))
    assert image.origin == 0x0600
    assert image.source == "prog.bin"
    assert [(region.start, region.end) for region in image.regions] == [(0x0600, 0x0602)]


def test_hex_record_file(tmp_path: Path) -> None:
    path = tmp_path / "prog.hex"
    path.write_text(":03000000A9420012\n:00000001FF\n")

    image = load_program_from_path(path, 0x0300)

    assert image.data == bytes((0xA9, 0x42, 0x00))
    assert image.origin == 0x0300


def test_hex_byte_file(tmp_path: Path) -> None:
    path = tmp_path / "prog.txt"
    path.write_text("; bytes\nE8\nC8\n00\n")

    image = load_program_from_path(path)

    assert image.data == bytes((0xE8, 0xC8, 0x00))
    assert image.origin == 0x0000


def test_assembly_file_uses_its_own_origin(tmp_path: Path) -> None:
    path = tmp_path / "prog.asm"
    path.write_text(".ORG $0400\nLDA #$01\nBRK\n")

    image = load_program_from_path(path, 0x1234)

    assert image.origin == 0x0400
    assert image.data == bytes((0xA9, 0x01, 0x00))


def test_assembly_errors_propagate(tmp_path: Path) -> None:
    path = tmp_path / "broken.s"
    path.write_text("FOO\n")

    with pytest.raises(AssemblyError):
        load_program_from_path(path)


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_program_from_path(tmp_path / "missing.bin")


def test_bundled_example_assembles() -> None:
    image = load_program_from_path(EXAMPLES_DIR / "hello.asm")

    assert image.origin == 0x0200
    assert image.data[:2] == bytes((0xA2, 0x00))
    assert image.data[-4:] == bytes((0x95, 0x10, 0xE8, 0x60))


def test_program_image_validates_origin() -> None:
    with pytest.raises(LoaderError):
        ProgramImage(b"\x00", 0x10000)


def test_program_image_region_is_clipped() -> None:
    image = load_binary(bytes(4), 0xFFFE)

    assert image.regions[0].end == 0xFFFF
    assert image.regions[0].length() == 2


def test_empty_image_has_no_regions() -> None:
    assert load_hex_bytes_text("").regions == []
