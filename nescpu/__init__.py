"""A 6502 CPU core for the NES with iNES ROM loading, disassembly and tracing."""

__version__ = "0.1.0"
__all__ = ["addressing", "cpu", "disassembly", "machine", "memory", "opcodes", "operations"]