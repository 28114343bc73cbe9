# nescpu

A 6502 CPU core as found in the NES. It loads iNES ROM images into a
64 KiB address space, runs them one instruction at a time, and produces
a trace line for every instruction executed, in a format close to the
well-known `nestest` logs.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Running a ROM

```
nescpu path/to/rom.nes
nescpu path/to/rom.nes --steps 1000 --log trace.log
```

The command loads the ROM, prints its NMI, RESET and IRQ vectors, and
starts the CPU at `$C000`, the entry point used by `nestest`. Each
executed instruction is printed to the console and written to the trace
log, `nes_debug.log` in the current directory unless `--log` names
another file. Without `--steps` it runs until stopped with Ctrl+C. If
the ROM cannot be loaded it prints `failed to load rom: <path>` and
exits with status 1.

## Using it from Python

```python
from nescpu.memory import Memory
from nescpu.cpu import CPU
from nescpu.disassembly import DebugLog, disassemble_range
from nescpu.machine import step, run

memory = Memory()
print(memory.load_rom("rom.nes"))   # Vectors(nmi=..., reset=..., irq=...)

cpu = CPU(memory)          # reset: PC=$C000, SP=$FD, P=I|U

with DebugLog("trace.log") as log:
    line = step(cpu, log)  # run one instruction, get its trace line
    run(cpu, 100, log)     # run and print a hundred more

for line in disassemble_range(cpu, 0xC000, 0xC010):
    print(line)
```

The pieces:

- `nescpu.memory` — `Memory`, the flat 64 KiB address space, with
  `read`, `write`, `clear`, `load_ines`, `load_rom` and `vectors`.
  Addresses wrap to 16 bits and values to 8. An image that cannot be
  opened, has a truncated header, or whose PRG-ROM does not fit raises
  `RomError`. A single 16 KiB PRG bank is mirrored to `$C000`.
- `nescpu.cpu` — `CPU` registers (`a`, `x`, `y`, `s`, `p`, `pc`,
  all wrapping to their width), the cycle counter, stack helpers
  (`push`, `push16`, `pull`, `pull16`) and interrupt handling (`reset`,
  `irq`, `nmi`, `check_interrupts`), plus the status `Flag`s. `irq`
  returns `False` when the I flag masks it.
- `nescpu.addressing` — the thirteen addressing modes (`AddrMode`), one
  function per mode, and `resolve(cpu, mode)`, which returns whether a
  page boundary was crossed.
- `nescpu.operations` — the instruction set (`Op`), `handler(op)` and
  `execute(cpu, op)`.
- `nescpu.opcodes` — the opcode table: `lookup(opcode)` returns an
  `OpInfo` with mnemonic, addressing mode and base cycle count, and
  `build_table()` builds all 256 entries. Opcodes not in the table
  decode as a two-cycle `NOP`.
- `nescpu.disassembly` — `disassemble_instruction` (one listing line
  for the instruction at PC), `disassemble_range` (a generator of
  listing lines), `format_operand`, `format_operand_for_debug`,
  `trace_line`, and the `DebugLog` file writer, which can be used as a
  context manager and quietly drops writes if its file cannot be opened.
- `nescpu.machine` — `step`, `run` and the `main` entry point behind
  the `nescpu` command.

## What it does not do

This is only the CPU. There is no PPU, APU, controller input or
cartridge mapper, so nothing is drawn, played or read from a joypad,
and ROMs that need a mapper beyond plain PRG-ROM at `$8000` will not
run correctly. The trace line always reports `PPU:  0,  0`. Decimal
mode is not emulated (SED sets the flag, but arithmetic ignores it),
and only the official opcodes are implemented.