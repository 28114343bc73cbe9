"""Instruction semantics of the 6502, acting on an already addressed operand."""

from __future__ import annotations

import enum
from typing import Callable, Dict

from .addressing import ACCUMULATOR
from .cpu import CPU, Flag
from .memory import IRQ_VECTOR

__all__ = ["Op", "handler", "execute"]

Handler = Callable[[CPU], None]


class Op(enum.Enum):
    """Instruction mnemonics; UNK stands for an unknown opcode."""

    ADC = enum.auto()
    AND = enum.auto()
    ASL = enum.auto()
    BCC = enum.auto()
    BCS = enum.auto()
    BEQ = enum.auto()
    BIT = enum.auto()
    BMI = enum.auto()
    BNE = enum.auto()
    BPL = enum.auto()
    BRK = enum.auto()
    BVC = enum.auto()
    BVS = enum.auto()
    CLC = enum.auto()
    CLD = enum.auto()
    CLI = enum.auto()
    CLV = enum.auto()
    CMP = enum.auto()
    CPX = enum.auto()
    CPY = enum.auto()
    DEC = enum.auto()
    DEX = enum.auto()
    DEY = enum.auto()
    EOR = enum.auto()
    INC = enum.auto()
    INX = enum.auto()
    INY = enum.auto()
    JMP = enum.auto()
    JSR = enum.auto()
    LDA = enum.auto()
    LDX = enum.auto()
    LDY = enum.auto()
    LSR = enum.auto()
    NOP = enum.auto()
    ORA = enum.auto()
    PHA = enum.auto()
    PHP = enum.auto()
    PLA = enum.auto()
    PLP = enum.auto()
    ROL = enum.auto()
    ROR = enum.auto()
    RTI = enum.auto()
    RTS = enum.auto()
    SBC = enum.auto()
    SEC = enum.auto()
    SED = enum.auto()
    SEI = enum.auto()
    STA = enum.auto()
    STX = enum.auto()
    STY = enum.auto()
    TAX = enum.auto()
    TAY = enum.auto()
    TSX = enum.auto()
    TXA = enum.auto()
    TXS = enum.auto()
    TYA = enum.auto()
    UNK = enum.auto()


def _nothing(cpu: CPU) -> None:
    """NOP and unknown opcodes leave the CPU unchanged."""


def _set_carry(cpu: CPU, on: bool) -> None:
    if on:
        cpu.p |= Flag.C
    else:
        cpu.p &= ~Flag.C


# --- arithmetic -----------------------------------------------------------

def _add(cpu: CPU, value: int) -> None:
    carry = 1 if cpu.p & Flag.C else 0
    result = cpu.a + value + carry
    old = cpu.a
    cpu.a = result
    _set_carry(cpu, result > 0xFF)
    cpu.set_zn(cpu.a)
    if ((old ^ value) & 0x80) == 0 and ((old ^ cpu.a) & 0x80) != 0:
        cpu.p |= Flag.V
    else:
        cpu.p &= ~Flag.V


def _adc(cpu: CPU) -> None:
    _add(cpu, cpu.fetched)


def _sbc(cpu: CPU) -> None:
    _add(cpu, cpu.fetched ^ 0xFF)


def _compare(register: str) -> Handler:
    def compare(cpu: CPU) -> None:
        value = getattr(cpu, register)
        _set_carry(cpu, value >= cpu.fetched)
        cpu.set_zn((value - cpu.fetched) & 0xFF)
    return compare


# --- loads, stores, logic -------------------------------------------------

def _load(register: str) -> Handler:
    def load(cpu: CPU) -> None:
        setattr(cpu, register, cpu.fetched)
        cpu.set_zn(cpu.fetched)
    return load


def _store(register: str) -> Handler:
    def store(cpu: CPU) -> None:
        if cpu.operand_addr != ACCUMULATOR:
            cpu.memory.write(cpu.operand_addr, getattr(cpu, register))
    return store


def _and(cpu: CPU) -> None:
    cpu.a &= cpu.fetched
    cpu.set_zn(cpu.a)


def _ora(cpu: CPU) -> None:
    cpu.a |= cpu.fetched
    cpu.set_zn(cpu.a)


def _eor(cpu: CPU) -> None:
    cpu.a ^= cpu.fetched
    cpu.set_zn(cpu.a)


def _bit(cpu: CPU) -> None:
    if cpu.a & cpu.fetched == 0:
        cpu.p |= Flag.Z
    else:
        cpu.p &= ~Flag.Z
    cpu.p = (cpu.p & ~Flag.N) | (cpu.fetched & Flag.N)
    cpu.p = (cpu.p & ~Flag.V) | (cpu.fetched & Flag.V)


# --- shifts and rotates ---------------------------------------------------

def _operand(cpu: CPU) -> int:
    if cpu.operand_addr == ACCUMULATOR:
        return cpu.a
    return cpu.memory.read(cpu.operand_addr)


def _put_operand(cpu: CPU, value: int) -> None:
    if cpu.operand_addr == ACCUMULATOR:
        cpu.a = value
    else:
        cpu.memory.write(cpu.operand_addr, value)


def _asl(cpu: CPU) -> None:
    value = _operand(cpu)
    result = (value << 1) & 0xFF
    _set_carry(cpu, bool(value & 0x80))
    cpu.set_zn(result)
    _put_operand(cpu, result)


def _lsr(cpu: CPU) -> None:
    value = _operand(cpu)
    result = value >> 1
    _set_carry(cpu, bool(value & 0x01))
    cpu.p &= ~Flag.N
    cpu.set_zn(result)
    _put_operand(cpu, result)


def _rol(cpu: CPU) -> None:
    value = _operand(cpu)
    old_carry = 1 if cpu.p & Flag.C else 0
    result = ((value << 1) | old_carry) & 0xFF
    _set_carry(cpu, bool(value & 0x80))
    cpu.set_zn(result)
    _put_operand(cpu, result)


def _ror(cpu: CPU) -> None:
    value = _operand(cpu)
    old_carry = 0x80 if cpu.p & Flag.C else 0
    result = (value >> 1) | old_carry
    _set_carry(cpu, bool(value & 0x01))
    cpu.set_zn(result)
    _put_operand(cpu, result)


# --- increments -----------------------------------------------------------

def _inc(cpu: CPU) -> None:
    value = (cpu.memory.read(cpu.operand_addr) + 1) & 0xFF
    cpu.memory.write(cpu.operand_addr, value)
    cpu.set_zn(value)


def _dec(cpu: CPU) -> None:
    value = (cpu.memory.read(cpu.operand_addr) - 1) & 0xFF
    cpu.memory.write(cpu.operand_addr, value)
    cpu.set_zn(value)


def _step_register(register: str, delta: int) -> Handler:
    def step(cpu: CPU) -> None:
        setattr(cpu, register, getattr(cpu, register) + delta)
        cpu.set_zn(getattr(cpu, register))
    return step


# --- branches and jumps ---------------------------------------------------

def _branch(flag: Flag, when_set: bool) -> Handler:
    def branch(cpu: CPU) -> None:
        if bool(cpu.p & flag) == when_set:
            cpu.pc = cpu.operand_addr
            cpu.cycle += 1
            if cpu.page_crossed:
                cpu.cycle += 1
    return branch


def _jmp(cpu: CPU) -> None:
    cpu.pc = cpu.operand_addr


def _jsr(cpu: CPU) -> None:
    cpu.push16((cpu.pc - 1) & 0xFFFF)
    cpu.pc = cpu.operand_addr


def _rts(cpu: CPU) -> None:
    cpu.pc = cpu.pull16() + 1


def _brk(cpu: CPU) -> None:
    cpu.push16((cpu.pc + 1) & 0xFFFF)
    cpu.push(cpu.p | Flag.B)
    cpu.p |= Flag.I
    cpu.pc = cpu.read_vector(IRQ_VECTOR)


def _rti(cpu: CPU) -> None:
    cpu.p = cpu.pull()
    cpu.p &= ~Flag.B
    cpu.p &= ~Flag.U
    cpu.pc = cpu.pull16()


# --- stack ----------------------------------------------------------------

def _pha(cpu: CPU) -> None:
    cpu.push(cpu.a)


def _pla(cpu: CPU) -> None:
    cpu.a = cpu.pull()
    cpu.set_zn(cpu.a)


def _php(cpu: CPU) -> None:
    cpu.push(cpu.p | Flag.B | Flag.U)


def _plp(cpu: CPU) -> None:
    cpu.p = cpu.pull()
    cpu.p &= ~Flag.B
    cpu.p |= Flag.U


# --- transfers ------------------------------------------------------------

def _transfer(source: str, dest: str, flags: bool = True) -> Handler:
    def transfer(cpu: CPU) -> None:
        setattr(cpu, dest, getattr(cpu, source))
        if flags:
            cpu.set_zn(getattr(cpu, dest))
    return transfer


# --- status flags ---------------------------------------------------------

def _set(flag: Flag) -> Handler:
    def set_flag(cpu: CPU) -> None:
        cpu.p |= flag
    return set_flag


def _clear(flag: Flag) -> Handler:
    def clear_flag(cpu: CPU) -> None:
        cpu.p &= ~flag
    return clear_flag


_HANDLERS: Dict[Op, Handler] = {
    Op.ADC: _adc,
    Op.AND: _and,
    Op.ASL: _asl,
    Op.BCC: _branch(Flag.C, False),
    Op.BCS: _branch(Flag.C, True),
    Op.BEQ: _branch(Flag.Z, True),
    Op.BIT: _bit,
    Op.BMI: _branch(Flag.N, True),
    Op.BNE: _branch(Flag.Z, False),
    Op.BPL: _branch(Flag.N, False),
    Op.BRK: _brk,
    Op.BVC: _branch(Flag.V, False),
    Op.BVS: _branch(Flag.V, True),
    Op.CLC: _clear(Flag.C),
    Op.CLD: _clear(Flag.D),
    Op.CLI: _clear(Flag.I),
    Op.CLV: _clear(Flag.V),
    Op.CMP: _compare("a"),
    Op.CPX: _compare("x"),
    Op.CPY: _compare("y"),
    Op.DEC: _dec,
    Op.DEX: _step_register("x", -1),
    Op.DEY: _step_register("y", -1),
    Op.EOR: _eor,
    Op.INC: _inc,
    Op.INX: _step_register("x", 1),
    Op.INY: _step_register("y", 1),
    Op.JMP: _jmp,
    Op.JSR: _jsr,
    Op.LDA: _load("a"),
    Op.LDX: _load("x"),
    Op.LDY: _load("y"),
    Op.LSR: _lsr,
    Op.NOP: _nothing,
    Op.ORA: _ora,
    Op.PHA: _pha,
    Op.PHP: _php,
    Op.PLA: _pla,
    Op.PLP: _plp,
    Op.ROL: _rol,
    Op.ROR: _ror,
    Op.RTI: _rti,
    Op.RTS: _rts,
    Op.SBC: _sbc,
    Op.SEC: _set(Flag.C),
    Op.SED: _set(Flag.D),
    Op.SEI: _set(Flag.I),
    Op.STA: _store("a"),
    Op.STX: _store("x"),
    Op.STY: _store("y"),
    Op.TAX: _transfer("a", "x"),
    Op.TAY: _transfer("a", "y"),
    Op.TSX: _transfer("s", "x"),
    Op.TXA: _transfer("x", "a"),
    Op.TXS: _transfer("x", "s", flags=False),
    Op.TYA: _transfer("y", "a"),
    Op.UNK: _nothing,
}


def handler(op: Op) -> Handler:
    """Return the function that carries out the given instruction."""
    return _HANDLERS[Op(op)]


def execute(cpu: CPU, op: Op) -> None:
    """Carry out an instruction whose operand has already been addressed."""
    handler(op)(cpu)