"""CHIP-8 instruction decoding.

Decoding happens once per instruction: the raw word is split into its operand
fields and tagged with an :class:`Op` that ``execute`` dispatches on. The tag
comes from a lookup table covering all 65536 words, built at import time from
:func:`classify`, so traced and plain-integer decoding agree by construction.
"""

import enum
from typing import Optional

import jax.numpy as jnp
import numpy as np
from chex import dataclass

from chip8vm.quirks import Quirks


class Op(enum.IntEnum):
    """Operation tags; the value is the index into the dispatch table."""
    ILLEGAL = 0
    CLS = 1          # 00E0
    RET = 2          # 00EE
    JP = 3           # 1NNN
    CALL = 4         # 2NNN
    SE_IMM = 5       # 3XNN
    SNE_IMM = 6      # 4XNN
    SE_REG = 7       # 5XY0
    LD_IMM = 8       # 6XNN
    ADD_IMM = 9      # 7XNN
    LD_REG = 10      # 8XY0
    OR = 11          # 8XY1
    AND = 12         # 8XY2
    XOR = 13         # 8XY3
    ADD_REG = 14     # 8XY4
    SUB = 15         # 8XY5
    SHR = 16         # 8XY6
    SUBN = 17        # 8XY7
    SHL = 18         # 8XYE
    SNE_REG = 19     # 9XY0
    LD_I = 20        # ANNN
    JP_OFFSET = 21   # BNNN
    RND = 22         # CXNN
    DRW = 23         # DXYN
    SKP = 24         # EX9E
    SKNP = 25        # EXA1
    LD_VX_DT = 26    # FX07
    LD_VX_K = 27     # FX0A
    LD_DT_VX = 28    # FX15
    LD_ST_VX = 29    # FX18
    ADD_I_VX = 30    # FX1E
    LD_F_VX = 31     # FX29
    LD_B_VX = 32     # FX33
    LD_MEM_VX = 33   # FX55
    LD_VX_MEM = 34   # FX65


_FAMILY_OPS = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_IMM,
    0x4: Op.SNE_IMM,
    0x6: Op.LD_IMM,
    0x7: Op.ADD_IMM,
    0xA: Op.LD_I,
    0xB: Op.JP_OFFSET,
    0xC: Op.RND,
    0xD: Op.DRW,
}

_SYSTEM_OPS = {0x00E0: Op.CLS, 0x00EE: Op.RET}

_ALU_OPS = {
    0x0: Op.LD_REG,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_REG,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

_KEY_OPS = {0x9E: Op.SKP, 0xA1: Op.SKNP}

_MISC_OPS = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I_VX,
    0x29: Op.LD_F_VX,
    0x33: Op.LD_B_VX,
    0x55: Op.LD_MEM_VX,
    0x65: Op.LD_VX_MEM,
}


def classify(instruction: int) -> Op:
    """Tag a raw 16-bit word with its operation, ``Op.ILLEGAL`` if none."""
    family = (instruction & 0xF000) >> 12
    n = instruction & 0x000F
    nn = instruction & 0x00FF

    if family == 0x0:
        return _SYSTEM_OPS.get(instruction, Op.ILLEGAL)
    if family == 0x5:
        return Op.SE_REG if n == 0 else Op.ILLEGAL
    if family == 0x9:
        return Op.SNE_REG if n == 0 else Op.ILLEGAL
    if family == 0x8:
        return _ALU_OPS.get(n, Op.ILLEGAL)
    if family == 0xE:
        return _KEY_OPS.get(nn, Op.ILLEGAL)
    if family == 0xF:
        return _MISC_OPS.get(nn, Op.ILLEGAL)
    return _FAMILY_OPS[family]


_OP_TABLE = jnp.asarray(
    np.array([classify(word) for word in range(0x10000)], dtype=np.uint8)
)


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    kind: int    # Op tag
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


def decode(instruction) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    instruction = jnp.asarray(instruction).astype(jnp.uint16)
    return DecodedInstruction(
        raw=instruction,
        kind=_OP_TABLE[instruction].astype(jnp.int32),
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )


_MNEMONICS = {
    Op.ILLEGAL: "DW 0x{raw:04X}",
    Op.CLS: "CLS",
    Op.RET: "RET",
    Op.JP: "JP 0x{nnn:03X}",
    Op.CALL: "CALL 0x{nnn:03X}",
    Op.SE_IMM: "SE V{x:X}, 0x{nn:02X}",
    Op.SNE_IMM: "SNE V{x:X}, 0x{nn:02X}",
    Op.SE_REG: "SE V{x:X}, V{y:X}",
    Op.LD_IMM: "LD V{x:X}, 0x{nn:02X}",
    Op.ADD_IMM: "ADD V{x:X}, 0x{nn:02X}",
    Op.LD_REG: "LD V{x:X}, V{y:X}",
    Op.OR: "OR V{x:X}, V{y:X}",
    Op.AND: "AND V{x:X}, V{y:X}",
    Op.XOR: "XOR V{x:X}, V{y:X}",
    Op.ADD_REG: "ADD V{x:X}, V{y:X}",
    Op.SUB: "SUB V{x:X}, V{y:X}",
    Op.SHR: "SHR V{x:X}, V{y:X}",
    Op.SUBN: "SUBN V{x:X}, V{y:X}",
    Op.SHL: "SHL V{x:X}, V{y:X}",
    Op.SNE_REG: "SNE V{x:X}, V{y:X}",
    Op.LD_I: "LD I, 0x{nnn:03X}",
    Op.JP_OFFSET: "JP V0, 0x{nnn:03X}",
    Op.RND: "RND V{x:X}, 0x{nn:02X}",
    Op.DRW: "DRW V{x:X}, V{y:X}, {n}",
    Op.SKP: "SKP V{x:X}",
    Op.SKNP: "SKNP V{x:X}",
    Op.LD_VX_DT: "LD V{x:X}, DT",
    Op.LD_VX_K: "LD V{x:X}, K",
    Op.LD_DT_VX: "LD DT, V{x:X}",
    Op.LD_ST_VX: "LD ST, V{x:X}",
    Op.ADD_I_VX: "ADD I, V{x:X}",
    Op.LD_F_VX: "LD F, V{x:X}",
    Op.LD_B_VX: "LD B, V{x:X}",
    Op.LD_MEM_VX: "LD [I], V{x:X}",
    Op.LD_VX_MEM: "LD V{x:X}, [I]",
}


def disassemble(instruction: int, quirks: Optional[Quirks] = None) -> str:
    """Render a raw word as an assembler mnemonic, e.g. ``"LD V1, 0x2A"``.

    ``quirks`` only changes the BNNN form: with ``jump_uses_vx`` it reads
    ``JP VX, 0xXNN`` instead of ``JP V0, 0xNNN``.
    """
    instruction = int(instruction)
    op = classify(instruction)
    template = _MNEMONICS[op]
    if op == Op.JP_OFFSET and quirks is not None and quirks.jump_uses_vx:
        template = "JP V{x:X}, 0x{nnn:03X}"
    return template.format(
        raw=instruction,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF,
    )
