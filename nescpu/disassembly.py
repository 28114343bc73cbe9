"""Disassembly of 6502 instructions and the per-instruction trace log."""

from __future__ import annotations

import os
import sys
import time
from typing import Iterator, List, Optional, TextIO, Union

from .addressing import AddrMode
from .cpu import CPU, Flag
from .memory import Memory
from .opcodes import OpInfo, lookup
from .operations import Op

__all__ = [
    "DEFAULT_LOG_PATH",
    "DebugLog",
    "format_operand",
    "disassemble_instruction",
    "disassemble_range",
    "format_operand_for_debug",
    "trace_line",
]

DEFAULT_LOG_PATH = "nes_debug.log"

_READ_OPS = frozenset(
    {Op.BIT, Op.LDA, Op.LDX, Op.LDY, Op.CMP, Op.CPX, Op.CPY, Op.AND, Op.ORA, Op.EOR}
)

_FLAG_LETTERS = (
    (Flag.N, "N"),
    (Flag.V, "V"),
    (Flag.U, "U"),
    (Flag.B, "B"),
    (Flag.D, "D"),
    (Flag.I, "I"),
    (Flag.Z, "Z"),
    (Flag.C, "C"),
)

_WORD_MODES = frozenset({AddrMode.ABS, AddrMode.ABX, AddrMode.ABY, AddrMode.IND})
_BYTE_MODES = frozenset(
    {AddrMode.ZP, AddrMode.ZPX, AddrMode.ZPY, AddrMode.INDX, AddrMode.INDY, AddrMode.REL}
)


class DebugLog:
    """A trace log file; a log that cannot be opened silently drops writes."""

    def __init__(self, path: Union[str, "os.PathLike[str]"] = DEFAULT_LOG_PATH) -> None:
        self.path = os.fspath(path)
        self._file: Optional[TextIO]
        try:
            self._file = open(self.path, "w", encoding="utf-8")
        except OSError:
            print(f"Warning: Could not open debug log file {self.path}", file=sys.stderr)
            self._file = None
            return
        self._file.write("=== NES CPU Debug Log ===\n")
        self._file.write(f"Started at: {time.ctime()}\n")
        self._file.write("PC  opcode  operand  instruction  registers  flags\n")
        self._file.write("-" * 63 + "\n")
        self._file.flush()

    @property
    def closed(self) -> bool:
        """Whether nothing more can be written."""
        return self._file is None

    def __enter__(self) -> "DebugLog":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def write(self, line: str) -> None:
        """Append one line and flush it to disk."""
        if self._file is None:
            return
        self._file.write(line + "\n")
        self._file.flush()

    def close(self) -> None:
        """Write the trailer and close the file; further calls do nothing."""
        if self._file is None:
            return
        self._file.write("\n=== Debug Log End ===\n")
        self._file.close()
        self._file = None
        print(f"Debug log saved to {self.path}")


def _signed(byte: int) -> int:
    return byte - 0x100 if byte & 0x80 else byte


def _word(memory: Memory, addr: int) -> int:
    return memory.read(addr) | (memory.read(addr + 1) << 8)


def _operand_bytes(memory: Memory, pc: int, info: OpInfo) -> List[int]:
    return [memory.read(pc + 1 + i) for i in range(info.operand_size())]


def _peek_operand_address(memory: Memory, pc: int, mode: AddrMode) -> int:
    if mode in _WORD_MODES:
        return _word(memory, pc + 1)
    if mode in _BYTE_MODES:
        return memory.read(pc + 1)
    return 0


def format_operand(cpu: CPU, info: OpInfo, addr: int) -> str:
    """Format the operand of an instruction for the disassembler.

    Operand bytes are read relative to the low byte of PC; indexed modes
    show ``addr`` with the index register taken back off.
    """
    read = cpu.memory.read
    pc = cpu.pc & 0xFF
    mode = info.mode
    if mode is AddrMode.IMM:
        return f"#${read(pc + 1):02X}"
    if mode is AddrMode.ABS:
        return f"${addr & 0xFFFF:04X}"
    if mode is AddrMode.ABX:
        return f"${(addr - cpu.x) & 0xFFFF:04X},X"
    if mode is AddrMode.ABY:
        return f"${(addr - cpu.y) & 0xFFFF:04X},Y"
    if mode is AddrMode.ZP:
        return f"${addr & 0xFF:02X}"
    if mode is AddrMode.ZPX:
        return f"${(addr - cpu.x) & 0xFF:02X},X"
    if mode is AddrMode.ZPY:
        return f"${(addr - cpu.y) & 0xFF:02X},Y"
    if mode is AddrMode.REL:
        offset = _signed(read(pc + 1))
        target = (pc + 2 + offset) & 0xFFFF
        return f"${target & 0xFF:02X}({offset:+d})"
    if mode is AddrMode.IND:
        return f"(${_word(cpu.memory, pc + 1):04X})"
    if mode is AddrMode.INDX:
        return f"(${read(pc + 1):02X},X)"
    if mode is AddrMode.INDY:
        return f"(${read(pc + 1):02X}),Y"
    if mode is AddrMode.ACC:
        return "A"
    return ""


def disassemble_instruction(cpu: CPU) -> str:
    """Disassemble the instruction at PC into one listing line."""
    pc = cpu.pc
    memory = cpu.memory
    opcode = memory.read(pc)
    info = lookup(opcode)
    addr = _peek_operand_address(memory, pc, info.mode)
    raw = _operand_bytes(memory, pc, info)
    if len(raw) == 1:
        field = f"{raw[0]:02X}    "
    elif len(raw) == 2:
        field = f"{raw[0]:02X} {raw[1]:02X} "
    else:
        field = "     "
    line = f"{pc:04X}  {opcode:02X} {field}{info.name} "
    if info.mode is not AddrMode.IMPL:
        line += format_operand(cpu, info, addr)
    return line


def disassemble_range(cpu: CPU, start_addr: int, end_addr: int) -> Iterator[str]:
    """Yield listing lines from ``start_addr`` while the address is <= ``end_addr``.

    PC is moved to each instruction in turn.
    """
    current = start_addr & 0xFFFF
    while current <= end_addr:
        cpu.pc = current
        yield disassemble_instruction(cpu)
        info = lookup(cpu.memory.read(current))
        current = (current + 1 + info.operand_size()) & 0xFFFF


def format_operand_for_debug(cpu: CPU, info: OpInfo, current_pc: int) -> str:
    """Format the operand of the instruction at ``current_pc`` for the trace."""
    memory = cpu.memory
    read = memory.read
    mode = info.mode
    if mode is AddrMode.IMPL:
        return ""
    if mode is AddrMode.ACC:
        return "A"
    if mode is AddrMode.IMM:
        return f"#${read(current_pc + 1):02X}"
    if mode is AddrMode.ABS:
        return f"${_word(memory, current_pc + 1):04X}"
    if mode is AddrMode.ABX:
        return f"${_word(memory, current_pc + 1):04X},X"
    if mode is AddrMode.ABY:
        return f"${_word(memory, current_pc + 1):04X},Y"
    if mode is AddrMode.ZP:
        return f"${read(current_pc + 1):02X}"
    if mode is AddrMode.ZPX:
        return f"${read(current_pc + 1):02X},X"
    if mode is AddrMode.ZPY:
        return f"${read(current_pc + 1):02X},Y"
    if mode is AddrMode.IND:
        return f"(${_word(memory, current_pc + 1):04X})"
    if mode is AddrMode.INDX:
        return f"(${read(current_pc + 1):02X},X)"
    if mode is AddrMode.INDY:
        return f"(${read(current_pc + 1):02X}),Y"
    if mode is AddrMode.REL:
        offset = _signed(read(current_pc + 1))
        return f"${(current_pc + 2 + offset) & 0xFFFF:04X}"
    return "???"


def trace_line(cpu: CPU, opcode: int, info: OpInfo, current_pc: int) -> str:
    """Build the trace line for an instruction and the current CPU state."""
    operand = format_operand_for_debug(cpu, info, current_pc)
    raw = _operand_bytes(cpu.memory, current_pc, info)
    if len(raw) == 1:
        field = f" {raw[0]:02X}      "
    elif len(raw) == 2:
        field = f" {raw[0]:02X} {raw[1]:02X}   "
    else:
        field = " " * 9
    parts = [f"PC:{current_pc:04X}  {opcode:02X}", field, f"{info.name:<4} ", operand]
    if info.op in _READ_OPS:
        parts.append(f" = ${cpu.fetched:02X}")
    parts.append(
        f"    A:{cpu.a:02X} X:{cpu.x:02X} Y:{cpu.y:02X} P:{cpu.p:02X} SP:{cpu.s:02X}"
    )
    flags = "".join(
        letter if cpu.p & flag else letter.lower() for flag, letter in _FLAG_LETTERS
    )
    parts.append(f" [{flags}] PPU:  0,  0 CYC:{cpu.cycle}")
    return "".join(parts)