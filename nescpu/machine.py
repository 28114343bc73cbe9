"""The fetch-decode-execute loop and the command-line entry point."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from .addressing import resolve
from .cpu import CPU
from .disassembly import DEFAULT_LOG_PATH, DebugLog, trace_line
from .memory import Memory, RomError
from .opcodes import lookup
from .operations import execute

__all__ = ["step", "run", "main"]


def step(cpu: CPU, log: Optional[DebugLog] = None) -> str:
    """Service interrupts, then run one instruction; return its trace line."""
    cpu.check_interrupts()

    current_pc = cpu.pc
    opcode = cpu.fetch()
    info = lookup(opcode)

    line = trace_line(cpu, opcode, info, current_pc)
    if log is not None:
        log.write(line)

    crossed = resolve(cpu, info.mode)
    if info.is_branch():
        # Taken branches add their own extra cycles.
        cpu.cycle += info.cycles
    else:
        cpu.cycle += info.cycles + int(crossed)
    execute(cpu, info.op)
    cpu.page_crossed = False
    return line


def run(cpu: CPU, steps: Optional[int] = None, log: Optional[DebugLog] = None) -> int:
    """Run ``steps`` instructions, or forever if None, printing each trace line.

    Returns the number of instructions run.
    """
    count = 0
    while steps is None or count < steps:
        print(step(cpu, log))
        count += 1
    return count


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nescpu", description="Run an iNES ROM on the 6502 CPU core."
    )
    parser.add_argument("rom", help="path of the iNES ROM file")
    parser.add_argument(
        "--steps", type=int, default=None, help="stop after this many instructions"
    )
    parser.add_argument(
        "--log", default=DEFAULT_LOG_PATH, help="path of the trace log file"
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Load a ROM and run it, tracing every instruction."""
    args = _parser().parse_args(argv)
    memory = Memory()
    with DebugLog(args.log) as log:
        try:
            vectors = memory.load_rom(args.rom)
        except RomError:
            print(f"failed to load rom: {args.rom}")
            return 1

        print("ROM loaded:")
        print(f"NMI vector: 0x{vectors.nmi:04X}")
        print(f"Reset vector: 0x{vectors.reset:04X}")
        print(f"IRQ vector: 0x{vectors.irq:04X}")

        cpu = CPU(memory)
        print("Running...")
        if args.steps is None:
            print("Press Ctrl+C to stop\n")
        try:
            run(cpu, args.steps, log)
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == "__main__":
    raise SystemExit(main())