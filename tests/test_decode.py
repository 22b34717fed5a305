"""Tests for instruction decoding and disassembly."""

import pytest
from chip8vm import Op, Quirks, decode, disassemble
from chip8vm.decode import classify


class TestDecode:
    """Test operand extraction and tagging."""

    def test_fields(self):
        decoded = decode(0xD12F)

        assert int(decoded.kind) == Op.DRW
        assert decoded.opcode == 0xD
        assert decoded.x == 0x1
        assert decoded.y == 0x2
        assert decoded.n == 0xF
        assert decoded.nn == 0x2F
        assert decoded.nnn == 0x12F
        assert decoded.raw == 0xD12F

    @pytest.mark.parametrize("raw,op", [
        (0x00E0, Op.CLS),
        (0x00EE, Op.RET),
        (0x1ABC, Op.JP),
        (0x2ABC, Op.CALL),
        (0x3A12, Op.SE_IMM),
        (0x4A12, Op.SNE_IMM),
        (0x5AB0, Op.SE_REG),
        (0x6A12, Op.LD_IMM),
        (0x7A12, Op.ADD_IMM),
        (0x8AB0, Op.LD_REG),
        (0x8AB1, Op.OR),
        (0x8AB2, Op.AND),
        (0x8AB3, Op.XOR),
        (0x8AB4, Op.ADD_REG),
        (0x8AB5, Op.SUB),
        (0x8AB6, Op.SHR),
        (0x8AB7, Op.SUBN),
        (0x8ABE, Op.SHL),
        (0x9AB0, Op.SNE_REG),
        (0xAABC, Op.LD_I),
        (0xBABC, Op.JP_OFFSET),
        (0xCA12, Op.RND),
        (0xDAB5, Op.DRW),
        (0xEA9E, Op.SKP),
        (0xEAA1, Op.SKNP),
        (0xFA07, Op.LD_VX_DT),
        (0xFA0A, Op.LD_VX_K),
        (0xFA15, Op.LD_DT_VX),
        (0xFA18, Op.LD_ST_VX),
        (0xFA1E, Op.ADD_I_VX),
        (0xFA29, Op.LD_F_VX),
        (0xFA33, Op.LD_B_VX),
        (0xFA55, Op.LD_MEM_VX),
        (0xFA65, Op.LD_VX_MEM),
    ])
    def test_classify(self, raw, op):
        assert classify(raw) == op
        assert int(decode(raw).kind) == op

    @pytest.mark.parametrize("raw", [
        0x0000, 0x0FFF, 0x5AB1, 0x8AB8, 0x8ABF, 0x9ABE, 0xEA00, 0xFA00, 0xFAFF,
    ])
    def test_illegal(self, raw):
        assert classify(raw) == Op.ILLEGAL
        assert int(decode(raw).kind) == Op.ILLEGAL

    def test_every_op_is_reachable(self):
        seen = {classify(word) for word in range(0x10000)}
        assert seen == set(Op)


class TestDisassemble:
    """Test mnemonic rendering."""

    @pytest.mark.parametrize("raw,text", [
        (0x00E0, "CLS"),
        (0x00EE, "RET"),
        (0x1228, "JP 0x228"),
        (0x612A, "LD V1, 0x2A"),
        (0x8AB4, "ADD VA, VB"),
        (0xD015, "DRW V0, V1, 5"),
        (0xF355, "LD [I], V3"),
        (0xF265, "LD V2, [I]"),
        (0x0000, "DW 0x0000"),
    ])
    def test_mnemonics(self, raw, text):
        assert disassemble(raw) == text

    def test_jump_with_offset_register_follows_quirk(self):
        assert disassemble(0xB3A0) == "JP V0, 0x3A0"
        assert disassemble(0xB3A0, Quirks.modern()) == "JP V0, 0x3A0"
        assert disassemble(0xB3A0, Quirks.schip()) == "JP V3, 0x3A0"
