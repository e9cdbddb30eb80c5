"""
CHIP-8 Opcode Decoder
=====================

Decodes a 16-bit opcode into an Instruction: an Op tag plus the operand
fields every instruction format draws from.

Opcode fields (nibbles written a b c d):

    a     Instruction family (high nibble)
    x     Register index, nibble b
    y     Register index, nibble c
    n     4-bit immediate, nibble d
    nn    8-bit immediate, low byte
    nnn   12-bit address, low three nibbles

Some instructions key off the high nibble alone (1nnn, 6xnn), others off
the high and low nibbles together (8xy4, Fx33). Anything that matches no
known pattern decodes to Op.UNKNOWN, which the CPU executes as a no-op.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass
from enum import Enum, auto


class Op(Enum):
    """Instruction tags, one per entry in the opcode catalog."""
    CLS = auto()         # 00E0
    RET = auto()         # 00EE
    SYS = auto()         # 0nnn (legacy machine-code call, ignored)
    JP = auto()          # 1nnn
    CALL = auto()        # 2nnn
    SE_BYTE = auto()     # 3xnn
    SNE_BYTE = auto()    # 4xnn
    SE_REG = auto()      # 5xy0
    LD_BYTE = auto()     # 6xnn
    ADD_BYTE = auto()    # 7xnn
    LD_REG = auto()      # 8xy0
    OR = auto()          # 8xy1
    AND = auto()         # 8xy2
    XOR = auto()         # 8xy3
    ADD_REG = auto()     # 8xy4
    SUB = auto()         # 8xy5
    SHR = auto()         # 8xy6
    SUBN = auto()        # 8xy7
    SHL = auto()         # 8xyE
    SNE_REG = auto()     # 9xy0
    LD_I = auto()        # Annn
    JP_V0 = auto()       # Bnnn
    RND = auto()         # Cxnn
    DRW = auto()         # Dxyn
    SKP = auto()         # Ex9E
    SKNP = auto()        # ExA1
    LD_VX_DT = auto()    # Fx07
    LD_VX_K = auto()     # Fx0A
    LD_DT_VX = auto()    # Fx15
    LD_ST_VX = auto()    # Fx18
    ADD_I = auto()       # Fx1E
    LD_F = auto()        # Fx29
    LD_B = auto()        # Fx33
    LD_I_VX = auto()     # Fx55
    LD_VX_I = auto()     # Fx65
    UNKNOWN = auto()


# Low-nibble dispatch for the 8xyN arithmetic family
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

# Low-byte dispatch for the Fxnn family
_MISC_OPS = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I,
    0x29: Op.LD_F,
    0x33: Op.LD_B,
    0x55: Op.LD_I_VX,
    0x65: Op.LD_VX_I,
}


@dataclass(frozen=True)
class Instruction:
    """
    A decoded instruction.

    Attributes:
        op: Instruction tag
        opcode: The raw 16-bit opcode
    """
    op: Op
    opcode: int

    @property
    def x(self) -> int:
        """Register index from nibble b."""
        return (self.opcode >> 8) & 0x0F

    @property
    def y(self) -> int:
        """Register index from nibble c."""
        return (self.opcode >> 4) & 0x0F

    @property
    def n(self) -> int:
        """4-bit immediate from nibble d."""
        return self.opcode & 0x0F

    @property
    def nn(self) -> int:
        """8-bit immediate from the low byte."""
        return self.opcode & 0xFF

    @property
    def nnn(self) -> int:
        """12-bit address from the low three nibbles."""
        return self.opcode & 0x0FFF

    def __str__(self) -> str:
        return f"{self.opcode:04X} {self.op.name}"


def decode(opcode: int) -> Instruction:
    """
    Decode a 16-bit opcode.

    Args:
        opcode: Big-endian instruction word

    Returns:
        Instruction tagged with the matching Op, or Op.UNKNOWN
    """
    opcode &= 0xFFFF
    family = opcode >> 12
    low = opcode & 0x0F
    low_byte = opcode & 0xFF

    match family:
        case 0x0:
            if opcode == 0x00E0:
                op = Op.CLS
            elif opcode == 0x00EE:
                op = Op.RET
            else:
                op = Op.SYS
        case 0x1:
            op = Op.JP
        case 0x2:
            op = Op.CALL
        case 0x3:
            op = Op.SE_BYTE
        case 0x4:
            op = Op.SNE_BYTE
        case 0x5:
            op = Op.SE_REG if low == 0 else Op.UNKNOWN
        case 0x6:
            op = Op.LD_BYTE
        case 0x7:
            op = Op.ADD_BYTE
        case 0x8:
            op = _ALU_OPS.get(low, Op.UNKNOWN)
        case 0x9:
            op = Op.SNE_REG if low == 0 else Op.UNKNOWN
        case 0xA:
            op = Op.LD_I
        case 0xB:
            op = Op.JP_V0
        case 0xC:
            op = Op.RND
        case 0xD:
            op = Op.DRW
        case 0xE:
            if low_byte == 0x9E:
                op = Op.SKP
            elif low_byte == 0xA1:
                op = Op.SKNP
            else:
                op = Op.UNKNOWN
        case _:
            op = _MISC_OPS.get(low_byte, Op.UNKNOWN)

    return Instruction(op, opcode)
