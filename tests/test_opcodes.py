import pytest

from nescpu.addressing import AddrMode
from nescpu.opcodes import OpInfo, build_table, lookup
from nescpu.operations import Op

BRANCH_CODES = [0x90, 0xB0, 0xF0, 0xD0, 0x10, 0x30, 0x50, 0x70]


def test_table_has_256_entries():
    assert len(build_table()) == 256


def test_build_table_matches_lookup():
    table = build_table()
    assert [lookup(code) for code in range(256)] == list(table)


@pytest.mark.parametrize(
    "code, expected",
    [
        (0xA9, OpInfo(Op.LDA, AddrMode.IMM, 2, "LDA")),
        (0x6C, OpInfo(Op.JMP, AddrMode.IND, 5, "JMP")),
        (0x00, OpInfo(Op.BRK, AddrMode.IMPL, 7, "BRK")),
        (0x9D, OpInfo(Op.STA, AddrMode.ABX, 5, "STA")),
        (0x1E, OpInfo(Op.ASL, AddrMode.ABX, 7, "ASL")),
        (0x0A, OpInfo(Op.ASL, AddrMode.ACC, 2, "ASL")),
        (0xB6, OpInfo(Op.LDX, AddrMode.ZPY, 4, "LDX")),
        (0x2C, OpInfo(Op.BIT, AddrMode.ABS, 4, "BIT")),
        (0x71, OpInfo(Op.ADC, AddrMode.INDY, 5, "ADC")),
    ],
)
def test_known_opcodes(code, expected):
    assert lookup(code) == expected


def test_unlisted_opcode_is_default_nop():
    assert lookup(0x02) == OpInfo(Op.NOP, AddrMode.IMPL, 2, "NOP")
    assert lookup(0xFF) == lookup(0x02)


def test_lookup_masks_to_a_byte():
    assert lookup(0x1A9) == lookup(0xA9)


def test_names_match_mnemonics():
    assert all(info.name == info.op.name for info in build_table())


def test_lda_has_all_eight_modes():
    modes = {info.mode for info in build_table() if info.op is Op.LDA}
    assert modes == {
        AddrMode.IMM, AddrMode.ZP, AddrMode.ABS, AddrMode.ZPX,
        AddrMode.ABX, AddrMode.ABY, AddrMode.INDX, AddrMode.INDY,
    }


@pytest.mark.parametrize("code", BRANCH_CODES)
def test_branches(code):
    info = lookup(code)
    assert info.is_branch()
    assert info.mode is AddrMode.REL
    assert info.operand_size() == 1


def test_only_branch_opcodes_are_branches():
    branches = {code for code in range(256) if lookup(code).is_branch()}
    assert branches == set(BRANCH_CODES)


def test_operand_size_follows_mode():
    sizes = {
        AddrMode.IMPL: 0, AddrMode.ACC: 0,
        AddrMode.IMM: 1, AddrMode.ZP: 1, AddrMode.ZPX: 1, AddrMode.ZPY: 1,
        AddrMode.INDX: 1, AddrMode.INDY: 1, AddrMode.REL: 1,
        AddrMode.ABS: 2, AddrMode.ABX: 2, AddrMode.ABY: 2, AddrMode.IND: 2,
    }
    for info in build_table():
        assert info.operand_size() == sizes[info.mode]


def test_jsr_takes_absolute_address():
    info = lookup(0x20)
    assert info.op is Op.JSR
    assert info.operand_size() == 2
    assert not info.is_branch()


def test_opinfo_is_immutable():
    info = lookup(0xEA)
    with pytest.raises(AttributeError):
        info.cycles = 3
    assert info.cycles == 2
    assert lookup(0xEA) == OpInfo(Op.NOP, AddrMode.IMPL, 2, "NOP")