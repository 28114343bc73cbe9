"""6502 register state, stack helpers and interrupt handling."""

from __future__ import annotations

import enum
import logging

from .memory import IRQ_VECTOR, NMI_VECTOR, RESET_VECTOR, Memory

__all__ = ["Flag", "CPU", "NMI_VECTOR", "RESET_VECTOR", "IRQ_VECTOR"]

log = logging.getLogger(__name__)

STACK_BASE = 0x100
RESET_PC = 0xC000
INITIAL_SP = 0xFD
INTERRUPT_CYCLES = 7


class Flag(enum.IntFlag):
    """Bits of the processor status register."""

    C = 1 << 0
    Z = 1 << 1
    I = 1 << 2  # noqa: E741
    D = 1 << 3
    B = 1 << 4
    U = 1 << 5
    V = 1 << 6
    N = 1 << 7


class _Register:
    """An integer attribute that wraps to a fixed bit width."""

    def __init__(self, mask: int) -> None:
        self.mask = mask
        self.slot = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.slot = "_" + name

    def __get__(self, obj, objtype=None):
        if obj is None:
            return self
        return getattr(obj, self.slot)

    def __set__(self, obj, value) -> None:
        setattr(obj, self.slot, int(value) & self.mask)


class CPU:
    """The 6502 core state attached to a memory bus."""

    a = _Register(0xFF)
    x = _Register(0xFF)
    y = _Register(0xFF)
    s = _Register(0xFF)
    p = _Register(0xFF)
    pc = _Register(0xFFFF)
    operand_addr = _Register(0xFFFF)
    fetched = _Register(0xFF)

    def __init__(self, memory: Memory) -> None:
        self.memory = memory
        self.p = Flag.U
        self.a = 0
        self.x = 0
        self.y = 0
        self.s = INITIAL_SP
        self.pc = 0
        self.cycle = 0
        self.nmi_pending = False
        self.irq_pending = False
        self.operand_addr = 0
        self.fetched = 0
        self.page_crossed = False
        self.reset()

    def set_flag(self, flag: int) -> None:
        """Set the given status bits."""
        self.p |= flag

    def set_zn(self, value: int) -> None:
        """Update Z and N from an 8-bit result."""
        value &= 0xFF
        if value == 0:
            self.p |= Flag.Z
        else:
            self.p &= ~Flag.Z
        if value & 0x80:
            self.p |= Flag.N
        else:
            self.p &= ~Flag.N

    def push(self, value: int) -> None:
        """Push a byte onto the stack in page one."""
        self.memory.write(STACK_BASE + self.s, value)
        self.s -= 1

    def push16(self, value: int) -> None:
        """Push a word, high byte first."""
        self.push((value >> 8) & 0xFF)
        self.push(value & 0xFF)

    def pull(self) -> int:
        """Pull a byte from the stack."""
        self.s += 1
        return self.memory.read(STACK_BASE + self.s)

    def pull16(self) -> int:
        """Pull a word, low byte first."""
        lo = self.pull()
        hi = self.pull()
        return (hi << 8) | lo

    def fetch(self) -> int:
        """Read the byte at PC and advance PC."""
        value = self.memory.read(self.pc)
        self.pc += 1
        return value

    def read_vector(self, addr: int) -> int:
        """Read a little-endian word from a vector address."""
        return self.memory.read(addr) | (self.memory.read(addr + 1) << 8)

    def reset(self) -> None:
        """Bring the registers to their power-on state; PC starts at $C000."""
        self.pc = RESET_PC
        self.a = 0
        self.x = 0
        self.y = 0
        self.s = INITIAL_SP
        self.p = Flag.U | Flag.I
        self.nmi_pending = False
        self.irq_pending = False
        self.cycle += INTERRUPT_CYCLES

    def _interrupt(self, vector: int) -> None:
        self.push16(self.pc)
        self.push(self.p & ~Flag.B)
        self.p |= Flag.I | Flag.U
        self.p &= ~Flag.B
        self.pc = self.read_vector(vector)
        self.cycle += INTERRUPT_CYCLES

    def irq(self) -> bool:
        """Service a maskable interrupt; return False if I is set."""
        if self.p & Flag.I:
            log.debug("IRQ masked")
            return False
        self._interrupt(IRQ_VECTOR)
        return True

    def nmi(self) -> None:
        """Service a non-maskable interrupt."""
        self._interrupt(NMI_VECTOR)

    def check_interrupts(self) -> None:
        """Service a pending NMI, or else a pending unmasked IRQ."""
        if self.nmi_pending:
            self.nmi()
            self.nmi_pending = False
        elif self.irq_pending and not self.p & Flag.I:
            self.irq()
            self.irq_pending = False