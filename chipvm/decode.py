"""CHIP-8 instruction decoding."""

import enum

from chex import dataclass


class Op(enum.Enum):
    """Closed set of instruction variants."""
    CLS = "CLS"                # 00E0
    RET = "RET"                # 00EE
    SYS = "SYS"                # 0NNN
    JP = "JP"                  # 1NNN
    CALL = "CALL"              # 2NNN
    SE_IMM = "SE Vx, kk"       # 3XKK
    SNE_IMM = "SNE Vx, kk"     # 4XKK
    SE_REG = "SE Vx, Vy"       # 5XY0
    LD_IMM = "LD Vx, kk"       # 6XKK
    ADD_IMM = "ADD Vx, kk"     # 7XKK
    LD_REG = "LD Vx, Vy"       # 8XY0
    OR = "OR"                  # 8XY1
    AND = "AND"                # 8XY2
    XOR = "XOR"                # 8XY3
    ADD_REG = "ADD Vx, Vy"     # 8XY4
    SUB = "SUB"                # 8XY5
    SHR = "SHR"                # 8XY6
    SUBN = "SUBN"              # 8XY7
    SHL = "SHL"                # 8XYE
    SNE_REG = "SNE Vx, Vy"     # 9XY0
    LD_I = "LD I, nnn"         # ANNN
    JP_V0 = "JP V0, nnn"       # BNNN
    RND = "RND"                # CXKK
    DRW = "DRW"                # DXYN
    SKP = "SKP"                # EX9E
    SKNP = "SKNP"              # EXA1
    LD_VX_DT = "LD Vx, DT"     # FX07
    LD_VX_K = "LD Vx, K"       # FX0A
    LD_DT_VX = "LD DT, Vx"     # FX15
    LD_ST_VX = "LD ST, Vx"     # FX18
    ADD_I = "ADD I, Vx"        # FX1E
    LD_F = "LD F, Vx"          # FX29
    LD_B = "LD B, Vx"          # FX33
    LD_MEM_VX = "LD [I], Vx"   # FX55
    LD_VX_MEM = "LD Vx, [I]"   # FX65
    # Super-CHIP, decoded for diagnostics only
    SCD = "SCD"                # 00CN
    SCR = "SCR"                # 00FB
    SCL = "SCL"                # 00FC
    EXIT = "EXIT"              # 00FD
    LOW = "LOW"                # 00FE
    HIGH = "HIGH"              # 00FF
    LD_HF = "LD HF, Vx"        # FX30
    LD_R_VX = "LD R, Vx"       # FX75
    LD_VX_R = "LD Vx, R"       # FX85
    UNKNOWN = "UNKNOWN"


SUPER_CHIP_OPS = frozenset({
    Op.SCD, Op.SCR, Op.SCL, Op.EXIT, Op.LOW, Op.HIGH, Op.LD_HF, Op.LD_R_VX, Op.LD_VX_R,
})


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction: variant tag plus extracted operands."""
    op: Op
    raw: int
    x: int = 0    # Second nibble (VX register)
    y: int = 0    # Third nibble (VY register)
    n: int = 0    # Fourth nibble (4-bit immediate)
    nn: int = 0   # Last byte (8-bit immediate)
    nnn: int = 0  # Last 12 bits (12-bit address)

    @property
    def mnemonic(self) -> str:
        return self.op.value

    @property
    def is_known(self) -> bool:
        return self.op is not Op.UNKNOWN and self.op not in SUPER_CHIP_OPS


def class_nibble(opcode: int) -> int:
    """Top 4 bits, the instruction class."""
    return (opcode & 0xF000) >> 12


def nnn(opcode: int) -> int:
    """Low 12 bits, an address."""
    return opcode & 0x0FFF


def kk(opcode: int) -> int:
    """Low byte, an 8-bit immediate."""
    return opcode & 0x00FF


def n(opcode: int) -> int:
    """Low nibble."""
    return opcode & 0x000F


def x(opcode: int) -> int:
    """Bits 8-11, the X register index."""
    return (opcode & 0x0F00) >> 8


def y(opcode: int) -> int:
    """Bits 4-7, the Y register index."""
    return (opcode & 0x00F0) >> 4


_SYSTEM_OPS = {
    0xE0: Op.CLS,
    0xEE: Op.RET,
    0xFB: Op.SCR,
    0xFC: Op.SCL,
    0xFD: Op.EXIT,
    0xFE: Op.LOW,
    0xFF: Op.HIGH,
}

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

_KEY_OPS = {
    0x9E: Op.SKP,
    0xA1: Op.SKNP,
}

_MISC_OPS = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I,
    0x29: Op.LD_F,
    0x30: Op.LD_HF,
    0x33: Op.LD_B,
    0x55: Op.LD_MEM_VX,
    0x65: Op.LD_VX_MEM,
    0x75: Op.LD_R_VX,
    0x85: Op.LD_VX_R,
}

# Classes whose variant is fixed by the top nibble alone
_FIXED_OPS = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_IMM,
    0x4: Op.SNE_IMM,
    0x6: Op.LD_IMM,
    0x7: Op.ADD_IMM,
    0xA: Op.LD_I,
    0xB: Op.JP_V0,
    0xC: Op.RND,
    0xD: Op.DRW,
}


def _classify(opcode: int) -> Op:
    """Pick the variant for a 16-bit opcode."""
    family = class_nibble(opcode)

    if family in _FIXED_OPS:
        return _FIXED_OPS[family]
    if family == 0x0:
        if (kk(opcode) & 0xF0) == 0xC0:
            return Op.SCD
        return _SYSTEM_OPS.get(kk(opcode), Op.SYS)
    if family == 0x5:
        return Op.SE_REG if n(opcode) == 0 else Op.UNKNOWN
    if family == 0x9:
        return Op.SNE_REG if n(opcode) == 0 else Op.UNKNOWN
    if family == 0x8:
        return _ALU_OPS.get(n(opcode), Op.UNKNOWN)
    if family == 0xE:
        return _KEY_OPS.get(kk(opcode), Op.UNKNOWN)
    # 0xF
    return _MISC_OPS.get(kk(opcode), Op.UNKNOWN)


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into its variant and operands.

    Total over 16-bit words: patterns that match no variant decode to
    ``Op.UNKNOWN`` with the raw opcode preserved.
    """
    instruction = int(instruction) & 0xFFFF
    return DecodedInstruction(
        op=_classify(instruction),
        raw=instruction,
        x=x(instruction),
        y=y(instruction),
        n=n(instruction),
        nn=kk(instruction),
        nnn=nnn(instruction),
    )
