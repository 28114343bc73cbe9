import pytest

from nescpu.cpu import CPU, Flag
from nescpu.disassembly import DebugLog
from nescpu.machine import main, run, step
from nescpu.memory import Memory
from nescpu.opcodes import lookup


@pytest.fixture
def cpu():
    return CPU(Memory())


def _poke(cpu, addr, data):
    for i, byte in enumerate(data):
        cpu.memory.write(addr + i, byte)


def test_step_runs_immediate_load(cpu):
    _poke(cpu, cpu.pc, [0xA9, 0x42])
    start_pc = cpu.pc
    start_cycle = cpu.cycle
    line = step(cpu)
    assert cpu.a == 0x42
    assert cpu.pc == start_pc + 2
    assert cpu.cycle - start_cycle == lookup(0xA9).cycles
    assert line.startswith(f"PC:{start_pc:04X}  A9 42")


def test_step_taken_branch_adds_a_cycle(cpu):
    _poke(cpu, 0xC000, [0xD0, 0x02])
    cpu.p &= ~Flag.Z
    start = cpu.cycle
    step(cpu)
    assert cpu.pc == 0xC004
    assert cpu.cycle - start == lookup(0xD0).cycles + 1
    assert cpu.page_crossed is False


def test_step_branch_not_taken(cpu):
    _poke(cpu, 0xC000, [0xD0, 0x02])
    cpu.p |= Flag.Z
    start = cpu.cycle
    step(cpu)
    assert cpu.pc == 0xC000 + 2
    assert cpu.cycle - start == lookup(0xD0).cycles


def test_step_page_cross_adds_a_cycle(cpu):
    _poke(cpu, 0xC000, [0xBD, 0xFF, 0x10])
    cpu.memory.write(0x1100, 0x77)
    cpu.x = 1
    start = cpu.cycle
    step(cpu)
    assert cpu.a == 0x77
    assert cpu.cycle - start == lookup(0xBD).cycles + 1


def test_step_services_pending_nmi_first(cpu):
    cpu.memory.write(0xFFFA, 0x00)
    cpu.memory.write(0xFFFB, 0x80)
    cpu.memory.write(0x8000, 0xEA)
    cpu.nmi_pending = True
    line = step(cpu)
    assert cpu.nmi_pending is False
    assert cpu.pc == 0x8000 + 1
    assert line.startswith("PC:8000")


def test_step_writes_trace_to_log(cpu, tmp_path):
    _poke(cpu, 0xC000, [0xEA])
    path = tmp_path / "trace.log"
    with DebugLog(path) as log:
        line = step(cpu, log)
    assert line + "\n" in path.read_text(encoding="utf-8")


def test_run_counts_and_prints_steps(cpu, capsys):
    _poke(cpu, 0xC000, [0xEA, 0xEA, 0xEA])
    start = cpu.pc
    assert run(cpu, 3) == 3
    assert cpu.pc == start + 3
    out = capsys.readouterr().out.splitlines()
    assert len(out) == 3
    assert all(line.startswith("PC:") for line in out)


def test_main_reports_missing_rom(tmp_path, capsys):
    missing = tmp_path / "none.nes"
    code = main([str(missing), "--steps", "1", "--log", str(tmp_path / "t.log")])
    assert code == 1
    assert f"failed to load rom: {missing}" in capsys.readouterr().out


def test_main_runs_rom(tmp_path, capsys):
    prg = bytearray(16 * 1024)
    prg[0:3] = bytes([0x4C, 0x00, 0xC0])
    rom = tmp_path / "loop.nes"
    rom.write_bytes(b"NES\x1a" + bytes([1, 0]) + bytes(10) + bytes(prg))
    log_path = tmp_path / "trace.log"
    code = main([str(rom), "--steps", "2", "--log", str(log_path)])
    assert code == 0
    out = capsys.readouterr().out
    assert out.count("PC:C000") == 2
    assert "JMP  $C000" in log_path.read_text(encoding="utf-8")