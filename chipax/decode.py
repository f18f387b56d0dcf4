"""CHIP-8 instruction decoding."""

import enum

import jax.numpy as jnp
from chex import dataclass


class Op(enum.IntEnum):
    """Instruction variants, in dispatch table order."""
    CLS = 0
    RET = 1
    JP = 2
    CALL = 3
    SE_BYTE = 4
    SNE_BYTE = 5
    SE_REG = 6
    LD_BYTE = 7
    ADD_BYTE = 8
    LD_REG = 9
    OR = 10
    AND = 11
    XOR = 12
    ADD_REG = 13
    SUB = 14
    SHR = 15
    SUBN = 16
    SHL = 17
    SNE_REG = 18
    LD_I = 19
    JP_V0 = 20
    RND = 21
    DRW = 22
    SKP = 23
    SKNP = 24
    LD_VX_DT = 25
    LD_VX_K = 26
    LD_DT_VX = 27
    LD_ST_VX = 28
    ADD_I_VX = 29
    LD_F_VX = 30
    LD_B_VX = 31
    LD_I_VX = 32
    LD_VX_I = 33
    UNKNOWN = 34


# (variant, mask, pattern, assembly template)
OPCODE_TABLE = (
    (Op.CLS,      0xFFFF, 0x00E0, "CLS"),
    (Op.RET,      0xFFFF, 0x00EE, "RET"),
    (Op.JP,       0xF000, 0x1000, "JP {nnn:03X}"),
    (Op.CALL,     0xF000, 0x2000, "CALL {nnn:03X}"),
    (Op.SE_BYTE,  0xF000, 0x3000, "SE V{x:X}, {kk:02X}"),
    (Op.SNE_BYTE, 0xF000, 0x4000, "SNE V{x:X}, {kk:02X}"),
    (Op.SE_REG,   0xF00F, 0x5000, "SE V{x:X}, V{y:X}"),
    (Op.LD_BYTE,  0xF000, 0x6000, "LD V{x:X}, {kk:02X}"),
    (Op.ADD_BYTE, 0xF000, 0x7000, "ADD V{x:X}, {kk:02X}"),
    (Op.LD_REG,   0xF00F, 0x8000, "LD V{x:X}, V{y:X}"),
    (Op.OR,       0xF00F, 0x8001, "OR V{x:X}, V{y:X}"),
    (Op.AND,      0xF00F, 0x8002, "AND V{x:X}, V{y:X}"),
    (Op.XOR,      0xF00F, 0x8003, "XOR V{x:X}, V{y:X}"),
    (Op.ADD_REG,  0xF00F, 0x8004, "ADD V{x:X}, V{y:X}"),
    (Op.SUB,      0xF00F, 0x8005, "SUB V{x:X}, V{y:X}"),
    (Op.SHR,      0xF00F, 0x8006, "SHR V{x:X}"),
    (Op.SUBN,     0xF00F, 0x8007, "SUBN V{x:X}, V{y:X}"),
    (Op.SHL,      0xF00F, 0x800E, "SHL V{x:X}"),
    (Op.SNE_REG,  0xF00F, 0x9000, "SNE V{x:X}, V{y:X}"),
    (Op.LD_I,     0xF000, 0xA000, "LD I, {nnn:03X}"),
    (Op.JP_V0,    0xF000, 0xB000, "JP V0, {nnn:03X}"),
    (Op.RND,      0xF000, 0xC000, "RND V{x:X}, {kk:02X}"),
    (Op.DRW,      0xF000, 0xD000, "DRW V{x:X}, V{y:X}, {n:X}"),
    (Op.SKP,      0xF0FF, 0xE09E, "SKP V{x:X}"),
    (Op.SKNP,     0xF0FF, 0xE0A1, "SKNP V{x:X}"),
    (Op.LD_VX_DT, 0xF0FF, 0xF007, "LD V{x:X}, DT"),
    (Op.LD_VX_K,  0xF0FF, 0xF00A, "LD V{x:X}, K"),
    (Op.LD_DT_VX, 0xF0FF, 0xF015, "LD DT, V{x:X}"),
    (Op.LD_ST_VX, 0xF0FF, 0xF018, "LD ST, V{x:X}"),
    (Op.ADD_I_VX, 0xF0FF, 0xF01E, "ADD I, V{x:X}"),
    (Op.LD_F_VX,  0xF0FF, 0xF029, "LD F, V{x:X}"),
    (Op.LD_B_VX,  0xF0FF, 0xF033, "LD B, V{x:X}"),
    (Op.LD_I_VX,  0xF0FF, 0xF055, "LD [I], V{x:X}"),
    (Op.LD_VX_I,  0xF0FF, 0xF065, "LD V{x:X}, [I]"),
)

_OPS = jnp.array([int(entry[0]) for entry in OPCODE_TABLE], dtype=jnp.int32)
_MASKS = jnp.array([entry[1] for entry in OPCODE_TABLE], dtype=jnp.int32)
_PATTERNS = jnp.array([entry[2] for entry in OPCODE_TABLE], dtype=jnp.int32)
_TEMPLATES = {entry[0]: entry[3] for entry in OPCODE_TABLE}


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    op: int      # Op variant
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    kk: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


def classify(instruction) -> jnp.ndarray:
    """Return the Op variant of a 16-bit instruction, Op.UNKNOWN if none matches."""
    raw = jnp.asarray(instruction, dtype=jnp.int32)
    matches = (raw & _MASKS) == _PATTERNS
    return jnp.where(jnp.any(matches), _OPS[jnp.argmax(matches)], int(Op.UNKNOWN))


def decode(instruction) -> DecodedInstruction:
    """Decode 16-bit instruction into its variant and operand fields."""
    raw = jnp.asarray(instruction, dtype=jnp.int32) & 0xFFFF
    return DecodedInstruction(
        raw=raw,
        op=classify(raw),
        x=(raw & 0x0F00) >> 8,
        y=(raw & 0x00F0) >> 4,
        n=raw & 0x000F,
        kk=raw & 0x00FF,
        nnn=raw & 0x0FFF
    )


def disassemble(instruction: int) -> str:
    """Human-readable assembly for a concrete instruction word."""
    instruction = int(instruction) & 0xFFFF
    op = Op(int(classify(instruction)))
    if op == Op.UNKNOWN:
        return f"DW {instruction:04X}"
    return _TEMPLATES[op].format(
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        kk=instruction & 0x00FF,
        nnn=instruction & 0x0FFF,
    )
