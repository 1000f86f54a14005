from types import SimpleNamespace

import pytest

from py6502.utils.trace import TraceRecorder


def test_trace_recorder_overwrites_old_entries():
    recorder = TraceRecorder(capacity=2)
    state = SimpleNamespace(pc=0x1000, a=0x11, x=0x22, y=0x33, sp=0xFF, p=0x24)

    recorder.record_step(state, 0xA9, 2, mnemonic="LDA")
    state2 = SimpleNamespace(pc=0x1002, a=0x42, x=0x22, y=0x33, sp=0xFF, p=0x24)
    recorder.record_step(state2, 0x8D, 4, mnemonic="STA")
    state3 = SimpleNamespace(pc=0x1005, a=0x42, x=0x22, y=0x33, sp=0xFC, p=0x34)
    recorder.record_step(state3, 0xFF, 0, note="illegal")

    lines = list(recorder.format_entries())
    assert len(recorder) == 2
    assert len(lines) == 2
    assert lines[0] == "pc=1002 opcode=8D STA cycles=4 A=42 X=22 Y=33 SP=FF P=24 note=-"
    assert "pc=1005" in lines[1]
    assert "opcode=FF ?" in lines[1]
    assert "note=illegal" in lines[1]
    assert recorder.last_entry().pc == 0x1005


def test_trace_recorder_handles_missing_opcode():
    recorder = TraceRecorder(1)
    state = SimpleNamespace(pc=0x2000, a=0, x=0, y=0, sp=0, p=0)
    recorder.record_step(state, None, 0, note="reset")
    lines = list(recorder.format_entries())
    assert len(lines) == 1
    assert "opcode=--" in lines[0]


def test_trace_recorder_limit_and_clear():
    recorder = TraceRecorder(4)
    for pc in range(3):
        recorder.record_step(SimpleNamespace(pc=pc, a=0, x=0, y=0, sp=0xFF, p=0x24), 0xE8, 2, mnemonic="INX")

    assert [entry.pc for entry in recorder.entries(2)] == [1, 2]
    assert list(recorder.entries(0)) == []

    recorder.clear()
    assert len(recorder) == 0
    assert recorder.last_entry() is None


def test_trace_recorder_rejects_empty_capacity():
    with pytest.raises(ValueError):
        TraceRecorder(0)
