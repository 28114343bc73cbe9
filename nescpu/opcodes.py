"""The 256-entry 6502 opcode table: mnemonic, addressing mode and base cycles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .addressing import AddrMode
from .operations import Op

__all__ = ["OpInfo", "build_table", "lookup"]

_BRANCHES = frozenset(
    {Op.BCC, Op.BCS, Op.BEQ, Op.BNE, Op.BPL, Op.BMI, Op.BVC, Op.BVS}
)

_ONE_BYTE_OPERAND = frozenset(
    {
        AddrMode.IMM,
        AddrMode.ZP,
        AddrMode.ZPX,
        AddrMode.ZPY,
        AddrMode.INDX,
        AddrMode.INDY,
        AddrMode.REL,
    }
)

_TWO_BYTE_OPERAND = frozenset(
    {AddrMode.ABS, AddrMode.ABX, AddrMode.ABY, AddrMode.IND}
)


@dataclass(frozen=True)
class OpInfo:
    """One decoded 6502 instruction."""

    op: Op
    mode: AddrMode
    cycles: int
    name: str

    def operand_size(self) -> int:
        """Number of operand bytes that follow the opcode."""
        if self.mode in _TWO_BYTE_OPERAND:
            return 2
        if self.mode in _ONE_BYTE_OPERAND:
            return 1
        return 0

    def is_branch(self) -> bool:
        """Whether this is a conditional branch instruction."""
        return self.op in _BRANCHES


_DEFAULT = OpInfo(Op.NOP, AddrMode.IMPL, 2, "NOP")

_M = AddrMode

_ENTRIES = (
    # ADC
    (0x69, Op.ADC, _M.IMM, 2), (0x65, Op.ADC, _M.ZP, 3),
    (0x6D, Op.ADC, _M.ABS, 4), (0x75, Op.ADC, _M.ZPX, 4),
    (0x7D, Op.ADC, _M.ABX, 4), (0x79, Op.ADC, _M.ABY, 4),
    (0x61, Op.ADC, _M.INDX, 6), (0x71, Op.ADC, _M.INDY, 5),
    # SBC
    (0xE9, Op.SBC, _M.IMM, 2), (0xE5, Op.SBC, _M.ZP, 3),
    (0xED, Op.SBC, _M.ABS, 4), (0xF5, Op.SBC, _M.ZPX, 4),
    (0xFD, Op.SBC, _M.ABX, 4), (0xF9, Op.SBC, _M.ABY, 4),
    (0xE1, Op.SBC, _M.INDX, 6), (0xF1, Op.SBC, _M.INDY, 5),
    # branches
    (0x90, Op.BCC, _M.REL, 2), (0xB0, Op.BCS, _M.REL, 2),
    (0xF0, Op.BEQ, _M.REL, 2), (0xD0, Op.BNE, _M.REL, 2),
    (0x10, Op.BPL, _M.REL, 2), (0x30, Op.BMI, _M.REL, 2),
    (0x50, Op.BVC, _M.REL, 2), (0x70, Op.BVS, _M.REL, 2),
    # jumps, subroutines, interrupts
    (0x4C, Op.JMP, _M.ABS, 3), (0x6C, Op.JMP, _M.IND, 5),
    (0x00, Op.BRK, _M.IMPL, 7), (0x20, Op.JSR, _M.ABS, 6),
    (0x60, Op.RTS, _M.IMPL, 6), (0x40, Op.RTI, _M.IMPL, 6),
    # LDA
    (0xA9, Op.LDA, _M.IMM, 2), (0xA5, Op.LDA, _M.ZP, 3),
    (0xAD, Op.LDA, _M.ABS, 4), (0xB5, Op.LDA, _M.ZPX, 4),
    (0xBD, Op.LDA, _M.ABX, 4), (0xB9, Op.LDA, _M.ABY, 4),
    (0xA1, Op.LDA, _M.INDX, 6), (0xB1, Op.LDA, _M.INDY, 5),
    # STA
    (0x85, Op.STA, _M.ZP, 3), (0x8D, Op.STA, _M.ABS, 4),
    (0x95, Op.STA, _M.ZPX, 4), (0x9D, Op.STA, _M.ABX, 5),
    (0x99, Op.STA, _M.ABY, 5), (0x81, Op.STA, _M.INDX, 6),
    (0x91, Op.STA, _M.INDY, 6),
    # LDX / LDY
    (0xA2, Op.LDX, _M.IMM, 2), (0xA6, Op.LDX, _M.ZP, 3),
    (0xAE, Op.LDX, _M.ABS, 4), (0xB6, Op.LDX, _M.ZPY, 4),
    (0xBE, Op.LDX, _M.ABY, 4),
    (0xA0, Op.LDY, _M.IMM, 2), (0xA4, Op.LDY, _M.ZP, 3),
    (0xAC, Op.LDY, _M.ABS, 4), (0xB4, Op.LDY, _M.ZPX, 4),
    (0xBC, Op.LDY, _M.ABX, 4),
    # STX / STY
    (0x86, Op.STX, _M.ZP, 3), (0x8E, Op.STX, _M.ABS, 4),
    (0x96, Op.STX, _M.ZPY, 4),
    (0x84, Op.STY, _M.ZP, 3), (0x8C, Op.STY, _M.ABS, 4),
    (0x94, Op.STY, _M.ZPX, 4),
    # compares
    (0xC9, Op.CMP, _M.IMM, 2), (0xC5, Op.CMP, _M.ZP, 3),
    (0xCD, Op.CMP, _M.ABS, 4), (0xD5, Op.CMP, _M.ZPX, 4),
    (0xDD, Op.CMP, _M.ABX, 4), (0xD9, Op.CMP, _M.ABY, 4),
    (0xC1, Op.CMP, _M.INDX, 6), (0xD1, Op.CMP, _M.INDY, 5),
    (0xE0, Op.CPX, _M.IMM, 2), (0xE4, Op.CPX, _M.ZP, 3),
    (0xEC, Op.CPX, _M.ABS, 4),
    (0xC0, Op.CPY, _M.IMM, 2), (0xC4, Op.CPY, _M.ZP, 3),
    (0xCC, Op.CPY, _M.ABS, 4),
    # AND
    (0x29, Op.AND, _M.IMM, 2), (0x25, Op.AND, _M.ZP, 3),
    (0x2D, Op.AND, _M.ABS, 4), (0x35, Op.AND, _M.ZPX, 4),
    (0x3D, Op.AND, _M.ABX, 4), (0x39, Op.AND, _M.ABY, 4),
    (0x21, Op.AND, _M.INDX, 6), (0x31, Op.AND, _M.INDY, 5),
    # BIT
    (0x24, Op.BIT, _M.ZP, 3), (0x2C, Op.BIT, _M.ABS, 4),
    # ORA
    (0x09, Op.ORA, _M.IMM, 2), (0x05, Op.ORA, _M.ZP, 3),
    (0x0D, Op.ORA, _M.ABS, 4), (0x15, Op.ORA, _M.ZPX, 4),
    (0x1D, Op.ORA, _M.ABX, 4), (0x19, Op.ORA, _M.ABY, 4),
    (0x01, Op.ORA, _M.INDX, 6), (0x11, Op.ORA, _M.INDY, 5),
    # EOR
    (0x49, Op.EOR, _M.IMM, 2), (0x45, Op.EOR, _M.ZP, 3),
    (0x4D, Op.EOR, _M.ABS, 4), (0x55, Op.EOR, _M.ZPX, 4),
    (0x5D, Op.EOR, _M.ABX, 4), (0x59, Op.EOR, _M.ABY, 4),
    (0x41, Op.EOR, _M.INDX, 6), (0x51, Op.EOR, _M.INDY, 5),
    # stack
    (0x48, Op.PHA, _M.IMPL, 3), (0x68, Op.PLA, _M.IMPL, 4),
    (0x08, Op.PHP, _M.IMPL, 3), (0x28, Op.PLP, _M.IMPL, 4),
    # shifts on the accumulator
    (0x0A, Op.ASL, _M.ACC, 2), (0x4A, Op.LSR, _M.ACC, 2),
    (0x2A, Op.ROL, _M.ACC, 2), (0x6A, Op.ROR, _M.ACC, 2),
    # transfers
    (0xAA, Op.TAX, _M.IMPL, 2), (0x8A, Op.TXA, _M.IMPL, 2),
    (0xA8, Op.TAY, _M.IMPL, 2), (0x98, Op.TYA, _M.IMPL, 2),
    (0xBA, Op.TSX, _M.IMPL, 2), (0x9A, Op.TXS, _M.IMPL, 2),
    # NOP
    (0xEA, Op.NOP, _M.IMPL, 2),
    # status flags
    (0x18, Op.CLC, _M.IMPL, 2), (0x38, Op.SEC, _M.IMPL, 2),
    (0x58, Op.CLI, _M.IMPL, 2), (0x78, Op.SEI, _M.IMPL, 2),
    (0xD8, Op.CLD, _M.IMPL, 2), (0xF8, Op.SED, _M.IMPL, 2),
    (0xB8, Op.CLV, _M.IMPL, 2),
    # shifts on memory
    (0x06, Op.ASL, _M.ZP, 5), (0x0E, Op.ASL, _M.ABS, 6),
    (0x16, Op.ASL, _M.ZPX, 6), (0x1E, Op.ASL, _M.ABX, 7),
    (0x46, Op.LSR, _M.ZP, 5), (0x4E, Op.LSR, _M.ABS, 6),
    (0x56, Op.LSR, _M.ZPX, 6), (0x5E, Op.LSR, _M.ABX, 7),
    (0x26, Op.ROL, _M.ZP, 5), (0x2E, Op.ROL, _M.ABS, 6),
    (0x36, Op.ROL, _M.ZPX, 6), (0x3E, Op.ROL, _M.ABX, 7),
    (0x66, Op.ROR, _M.ZP, 5), (0x6E, Op.ROR, _M.ABS, 6),
    (0x76, Op.ROR, _M.ZPX, 6), (0x7E, Op.ROR, _M.ABX, 7),
    # INC / DEC
    (0xE6, Op.INC, _M.ZP, 5), (0xEE, Op.INC, _M.ABS, 6),
    (0xF6, Op.INC, _M.ZPX, 6), (0xFE, Op.INC, _M.ABX, 7),
    (0xC6, Op.DEC, _M.ZP, 5), (0xCE, Op.DEC, _M.ABS, 6),
    (0xD6, Op.DEC, _M.ZPX, 6), (0xDE, Op.DEC, _M.ABX, 7),
    # register increments
    (0xE8, Op.INX, _M.IMPL, 2), (0xC8, Op.INY, _M.IMPL, 2),
    (0xCA, Op.DEX, _M.IMPL, 2), (0x88, Op.DEY, _M.IMPL, 2),
)


def build_table() -> Tuple[OpInfo, ...]:
    """Build the full opcode table; unlisted opcodes decode as a 2-cycle NOP."""
    table = [_DEFAULT] * 256
    for code, op, mode, cycles in _ENTRIES:
        table[code] = OpInfo(op, mode, cycles, op.name)
    return tuple(table)


_TABLE = build_table()


def lookup(opcode: int) -> OpInfo:
    """Decode one opcode byte."""
    return _TABLE[opcode & 0xFF]