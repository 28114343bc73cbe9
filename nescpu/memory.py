"""The 64 KiB address space of the NES CPU and iNES ROM loading."""

from __future__ import annotations

from os import PathLike
from typing import NamedTuple, Union

MEMORY_SIZE = 0x10000

PRG_START = 0x8000
PRG_MIRROR = 0xC000
PRG_BANK_SIZE = 16 * 1024
CHR_BANK_SIZE = 8 * 1024
HEADER_SIZE = 16

NMI_VECTOR = 0xFFFA
RESET_VECTOR = 0xFFFC
IRQ_VECTOR = 0xFFFE


class RomError(Exception):
    """Raised when a ROM image cannot be opened or loaded."""


class Vectors(NamedTuple):
    """The three interrupt vectors stored at the top of memory."""

    nmi: int
    reset: int
    irq: int


class Memory:
    """Flat 64 KiB memory reached through the CPU bus.

    Layout:
        $0000-$07FF  2KB RAM
        $0800-$1FFF  RAM mirrors
        $2000-$2007  PPU registers
        $2008-$3FFF  PPU register mirrors
        $4000-$4017  APU / I/O registers
        $4018-$401F  test mode
        $4020-$5FFF  expansion
        $6000-$7FFF  SRAM
        $8000-$FFFF  PRG-ROM
    """

    def __init__(self) -> None:
        self._cells = bytearray(MEMORY_SIZE)

    def __len__(self) -> int:
        return MEMORY_SIZE

    def read(self, addr: int) -> int:
        """Read one byte; the address wraps to 16 bits."""
        return self._cells[addr & 0xFFFF]

    def write(self, addr: int, data: int) -> None:
        """Write one byte; the address wraps to 16 bits, the value to 8."""
        self._cells[addr & 0xFFFF] = data & 0xFF

    def clear(self) -> None:
        """Zero the whole address space."""
        self._cells[:] = bytes(MEMORY_SIZE)

    def _word(self, addr: int) -> int:
        return self.read(addr) | (self.read(addr + 1) << 8)

    def load_ines(self, data: bytes) -> None:
        """Load an iNES image held in memory.

        PRG-ROM goes to $8000 (mirrored to $C000 when it is a single 16 KiB
        bank), CHR-ROM is skipped, and up to six bytes following it are
        written over the interrupt vectors.
        """
        image = bytes(data)
        if len(image) < HEADER_SIZE:
            raise RomError("truncated iNES header")
        header = image[:HEADER_SIZE]
        prg_size = header[4] * PRG_BANK_SIZE
        chr_size = header[5] * CHR_BANK_SIZE
        if prg_size > MEMORY_SIZE - PRG_START:
            raise RomError(f"PRG-ROM of {prg_size} bytes does not fit in memory")

        pos = HEADER_SIZE
        prg = image[pos:pos + prg_size]
        self._cells[PRG_START:PRG_START + len(prg)] = prg
        pos = min(pos + prg_size, len(image))

        if prg_size == PRG_BANK_SIZE:
            bank = self._cells[PRG_START:PRG_START + PRG_BANK_SIZE]
            self._cells[PRG_MIRROR:PRG_MIRROR + PRG_BANK_SIZE] = bank

        pos += chr_size

        vectors = image[pos:pos + 6]
        self._cells[NMI_VECTOR:NMI_VECTOR + len(vectors)] = vectors

    def load_rom(self, path: Union[str, PathLike]) -> Vectors:
        """Load an iNES file from disk and return the resulting vectors."""
        try:
            with open(path, "rb") as fh:
                data = fh.read()
        except OSError as exc:
            raise RomError(f"failed to open rom: {path}") from exc
        self.load_ines(data)
        return self.vectors()

    def vectors(self) -> Vectors:
        """Return the NMI, RESET and IRQ vectors currently in memory."""
        return Vectors(
            nmi=self._word(NMI_VECTOR),
            reset=self._word(RESET_VECTOR),
            irq=self._word(IRQ_VECTOR),
        )