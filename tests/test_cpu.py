import pytest

from nescpu.cpu import CPU, Flag
from nescpu.memory import IRQ_VECTOR, NMI_VECTOR, Memory


@pytest.fixture
def cpu():
    return CPU(Memory())


def _set_vector(mem, addr, value):
    mem.write(addr, value & 0xFF)
    mem.write(addr + 1, value >> 8)


def test_initial_state(cpu):
    assert cpu.pc == 0xC000
    assert cpu.s == 0xFD
    assert cpu.p == Flag.U | Flag.I
    assert (cpu.a, cpu.x, cpu.y) == (0, 0, 0)
    assert cpu.cycle == 7
    assert not cpu.nmi_pending and not cpu.irq_pending


def test_registers_wrap(cpu):
    cpu.a = 0x1FF
    cpu.pc = 0x10001
    assert cpu.a == 0xFF
    assert cpu.pc == 0x0001


def test_push_writes_page_one(cpu):
    cpu.push(0x42)
    assert cpu.memory.read(0x1FD) == 0x42
    assert cpu.s == 0xFC


def test_push_pull_round_trip(cpu):
    start = cpu.s
    for value in (1, 2, 3):
        cpu.push(value)
    assert [cpu.pull() for _ in range(3)] == [3, 2, 1]
    assert cpu.s == start


def test_push16_pull16_round_trip(cpu):
    cpu.push16(0xBEEF)
    assert cpu.memory.read(0x1FD) == 0xBE
    assert cpu.pull16() == 0xBEEF


def test_stack_pointer_wraps(cpu):
    cpu.s = 0
    cpu.push(0x99)
    assert cpu.s == 0xFF
    assert cpu.memory.read(0x100) == 0x99
    assert cpu.pull() == 0x99


def test_fetch_advances_pc(cpu):
    cpu.memory.write(0xC000, 0xEA)
    assert cpu.fetch() == 0xEA
    assert cpu.pc == 0xC001


def test_set_flag(cpu):
    cpu.set_flag(Flag.C)
    assert cpu.p == Flag.U | Flag.I | Flag.C


@pytest.mark.parametrize(
    "value, zero, negative",
    [(0, True, False), (0x80, False, True), (0x01, False, False)],
)
def test_set_zn(cpu, value, zero, negative):
    cpu.set_zn(value)
    assert (cpu.p & Flag.Z) == (Flag.Z if zero else 0)
    assert (cpu.p & Flag.N) == (Flag.N if negative else 0)


def test_irq_masked_does_nothing(cpu):
    before = (cpu.pc, cpu.s, cpu.cycle)
    assert cpu.irq() is False
    assert (cpu.pc, cpu.s, cpu.cycle) == before


def test_irq_serviced(cpu):
    _set_vector(cpu.memory, IRQ_VECTOR, 0x8000)
    cpu.p = Flag.U | Flag.B
    cycle = cpu.cycle
    assert cpu.irq() is True
    assert cpu.pc == 0x8000
    assert cpu.cycle == cycle + 7
    assert (cpu.p & Flag.I) == Flag.I
    assert (cpu.p & Flag.B) == 0
    assert cpu.pull() == Flag.U
    assert cpu.pull16() == 0xC000


def test_nmi_ignores_mask(cpu):
    _set_vector(cpu.memory, NMI_VECTOR, 0x8000)
    cpu.nmi()
    assert cpu.pc == 0x8000
    assert cpu.s == 0xFD - 3


def test_check_interrupts_prefers_nmi(cpu):
    _set_vector(cpu.memory, NMI_VECTOR, 0x8000)
    _set_vector(cpu.memory, IRQ_VECTOR, 0xC000)
    cpu.p = Flag.U
    cpu.nmi_pending = True
    cpu.irq_pending = True
    cpu.check_interrupts()
    assert cpu.pc == 0x8000
    assert not cpu.nmi_pending
    assert cpu.irq_pending


def test_check_interrupts_keeps_masked_irq(cpu):
    cpu.irq_pending = True
    cpu.check_interrupts()
    assert cpu.irq_pending
    assert cpu.pc == 0xC000


def test_read_vector(cpu):
    _set_vector(cpu.memory, IRQ_VECTOR, 0x8000)
    assert cpu.read_vector(IRQ_VECTOR) == 0x8000