import pytest

from nescpu.memory import Memory, RomError, Vectors


def _ines(prg_banks, chr_banks=0, prg=None, tail=b""):
    header = bytes([0x4E, 0x45, 0x53, 0x1A, prg_banks, chr_banks]) + bytes(10)
    if prg is None:
        prg = bytes(i & 0xFF for i in range(prg_banks * 0x4000))
    return header + prg + bytes(chr_banks * 0x2000) + tail


def test_read_write_round_trip():
    mem = Memory()
    mem.write(0x0200, 0xAB)
    assert mem.read(0x0200) == 0xAB


def test_new_memory_is_zeroed():
    mem = Memory()
    assert all(mem.read(a) == 0 for a in range(0, 0x10000, 0x101))
    assert len(mem) == 0x10000


def test_address_and_value_wrap():
    mem = Memory()
    mem.write(0x10000 + 0x0010, 0x1FF)
    assert mem.read(0x0010) == 0xFF


def test_clear_zeroes_memory():
    mem = Memory()
    mem.write(0x8000, 0x42)
    mem.clear()
    assert mem.read(0x8000) == 0


def test_single_bank_is_mirrored():
    mem = Memory()
    mem.load_ines(_ines(1))
    for offset in (0, 1, 0x1234, 0x3FF0):
        assert mem.read(0xC000 + offset) == mem.read(0x8000 + offset)
    assert mem.read(0x8000 + 0x1234) == 0x1234 & 0xFF


def test_two_banks_fill_upper_half():
    prg = bytes([0x11]) * 0x4000 + bytes([0x22]) * 0x4000
    mem = Memory()
    mem.load_ines(_ines(2, prg=prg))
    assert mem.read(0x8000) == 0x11
    assert mem.read(0xC000) == 0x22


def test_vectors_from_prg_end():
    prg = bytearray(0x4000)
    prg[0x3FFC] = 0x00
    prg[0x3FFD] = 0xC0
    mem = Memory()
    mem.load_ines(_ines(1, prg=bytes(prg)))
    assert mem.vectors().reset == 0xC000


def test_trailing_bytes_override_vectors():
    tail = bytes([0x01, 0x80, 0x02, 0x80, 0x03, 0x80])
    mem = Memory()
    mem.load_ines(_ines(1, chr_banks=1, tail=tail))
    assert mem.vectors() == Vectors(nmi=0x8001, reset=0x8002, irq=0x8003)


def test_truncated_header_raises():
    with pytest.raises(RomError):
        Memory().load_ines(b"NES")


def test_oversized_prg_raises():
    header = bytes([0x4E, 0x45, 0x53, 0x1A, 3, 0]) + bytes(10)
    with pytest.raises(RomError):
        Memory().load_ines(header)


def test_load_rom_from_file(tmp_path):
    prg = bytearray(0x4000)
    prg[0x3FFC] = 0x00
    prg[0x3FFD] = 0xC0
    path = tmp_path / "game.nes"
    path.write_bytes(_ines(1, prg=bytes(prg)))
    mem = Memory()
    vectors = mem.load_rom(path)
    assert vectors.reset == 0xC000
    assert mem.vectors() == vectors


def test_load_missing_rom_raises(tmp_path):
    with pytest.raises(RomError):
        Memory().load_rom(tmp_path / "missing.nes")