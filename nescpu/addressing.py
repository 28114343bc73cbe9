"""Operand addressing modes of the 6502.

Each mode reads its operand bytes through the CPU's program counter, leaves
the effective address in ``cpu.operand_addr`` and the byte found there in
``cpu.fetched``, and returns whether indexing crossed a page boundary.
"""

from __future__ import annotations

import enum
from typing import Callable, Dict

from .cpu import CPU

__all__ = [
    "ACCUMULATOR",
    "AddrMode",
    "implied",
    "accumulator",
    "immediate",
    "absolute",
    "absolute_x",
    "absolute_y",
    "zero_page",
    "zero_page_x",
    "zero_page_y",
    "indirect",
    "indexed_indirect",
    "indirect_indexed",
    "relative",
    "resolve",
]

# Sentinel operand address meaning "the accumulator, not memory".
ACCUMULATOR = 0xFFFF


class AddrMode(enum.Enum):
    """The thirteen 6502 addressing modes."""

    ACC = enum.auto()   # A
    ABS = enum.auto()   # absolute
    ABX = enum.auto()   # absolute,X
    ABY = enum.auto()   # absolute,Y
    IMM = enum.auto()   # #immediate
    IMPL = enum.auto()  # implied
    IND = enum.auto()   # (absolute)
    INDX = enum.auto()  # (zero page,X)
    INDY = enum.auto()  # (zero page),Y
    REL = enum.auto()   # relative
    ZP = enum.auto()    # zero page
    ZPX = enum.auto()   # zero page,X
    ZPY = enum.auto()   # zero page,Y


def _fetch_word(cpu: CPU) -> int:
    lo = cpu.fetch()
    hi = cpu.fetch()
    return (hi << 8) | lo


def _load(cpu: CPU, addr: int) -> None:
    cpu.operand_addr = addr
    cpu.fetched = cpu.memory.read(cpu.operand_addr)


def _indexed(cpu: CPU, base: int, index: int) -> bool:
    final = (base + index) & 0xFFFF
    _load(cpu, final)
    crossed = (final & 0xFF00) != (base & 0xFF00)
    cpu.page_crossed = crossed
    return crossed


def _direct(cpu: CPU, addr: int) -> bool:
    _load(cpu, addr)
    cpu.page_crossed = False
    return False


def implied(cpu: CPU) -> bool:
    """No operand."""
    cpu.operand_addr = 0
    cpu.fetched = 0
    return False


def accumulator(cpu: CPU) -> bool:
    """Operate on A; the operand address is the accumulator sentinel."""
    cpu.fetched = cpu.a
    cpu.operand_addr = ACCUMULATOR
    return False


def immediate(cpu: CPU) -> bool:
    """The operand is the byte following the opcode."""
    cpu.operand_addr = cpu.pc
    cpu.fetched = cpu.fetch()
    return False


def absolute(cpu: CPU) -> bool:
    """A full 16-bit address follows the opcode."""
    return _direct(cpu, _fetch_word(cpu))


def absolute_x(cpu: CPU) -> bool:
    """Absolute address plus X."""
    return _indexed(cpu, _fetch_word(cpu), cpu.x)


def absolute_y(cpu: CPU) -> bool:
    """Absolute address plus Y."""
    return _indexed(cpu, _fetch_word(cpu), cpu.y)


def zero_page(cpu: CPU) -> bool:
    """A one-byte address in page zero."""
    return _direct(cpu, cpu.fetch())


def zero_page_x(cpu: CPU) -> bool:
    """Zero-page address plus X, wrapping within page zero."""
    return _direct(cpu, (cpu.fetch() + cpu.x) & 0xFF)


def zero_page_y(cpu: CPU) -> bool:
    """Zero-page address plus Y, wrapping within page zero."""
    return _direct(cpu, (cpu.fetch() + cpu.y) & 0xFF)


def indirect(cpu: CPU) -> bool:
    """Address read from a pointer, with the 6502 page-wrap quirk."""
    ptr = _fetch_word(cpu)
    lo = cpu.memory.read(ptr)
    hi_addr = ptr & 0xFF00 if ptr & 0x00FF == 0x00FF else ptr + 1
    hi = cpu.memory.read(hi_addr)
    return _direct(cpu, (hi << 8) | lo)


def indexed_indirect(cpu: CPU) -> bool:
    """(zp,X): pointer at zero-page address plus X."""
    ptr = (cpu.fetch() + cpu.x) & 0xFF
    lo = cpu.memory.read(ptr)
    hi = cpu.memory.read((ptr + 1) & 0xFF)
    return _direct(cpu, (hi << 8) | lo)


def indirect_indexed(cpu: CPU) -> bool:
    """(zp),Y: pointer at a zero-page address, then plus Y."""
    zp = cpu.fetch()
    lo = cpu.memory.read(zp)
    hi = cpu.memory.read((zp + 1) & 0xFF)
    return _indexed(cpu, (hi << 8) | lo, cpu.y)


def relative(cpu: CPU) -> bool:
    """Signed 8-bit offset from the following instruction, for branches."""
    offset = cpu.fetch()
    if offset & 0x80:
        offset -= 0x100
    target = (cpu.pc + offset) & 0xFFFF
    cpu.operand_addr = target
    crossed = (target & 0xFF00) != (cpu.pc & 0xFF00)
    cpu.page_crossed = crossed
    cpu.fetched = 0
    return crossed


_MODES: Dict[AddrMode, Callable[[CPU], bool]] = {
    AddrMode.ACC: accumulator,
    AddrMode.ABS: absolute,
    AddrMode.ABX: absolute_x,
    AddrMode.ABY: absolute_y,
    AddrMode.IMM: immediate,
    AddrMode.IMPL: implied,
    AddrMode.IND: indirect,
    AddrMode.INDX: indexed_indirect,
    AddrMode.INDY: indirect_indexed,
    AddrMode.REL: relative,
    AddrMode.ZP: zero_page,
    AddrMode.ZPX: zero_page_x,
    AddrMode.ZPY: zero_page_y,
}


def resolve(cpu: CPU, mode: AddrMode) -> bool:
    """Apply the given addressing mode; return whether a page was crossed."""
    return _MODES[AddrMode(mode)](cpu)