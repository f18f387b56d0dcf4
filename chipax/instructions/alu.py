"""CHIP-8 ALU operations (8xxx).

Each operation maps (VX, VY) as int32 to (result, flag). A flag of None leaves
VF alone; otherwise VF is written after VX, so VF as destination ends up
holding the flag.
"""

import jax.numpy as jnp
from chipax.state import EmulatorState
from chipax.decode import DecodedInstruction
from chipax.constants import FLAG_REGISTER
from chipax.instructions.memory import set_register


def alu_set(vx, vy):
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx, vy):
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx, vy):
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx, vy):
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx, vy):
    """8XY4 - Add: VX += VY, VF = carry."""
    result = vx + vy
    return result & 0xFF, result > 0xFF


def alu_sub_xy(vx, vy):
    """8XY5 - Subtract: VX -= VY, VF = 1 when VX > VY beforehand."""
    return (vx - vy) & 0xFF, vx > vy


def alu_shift_right(vx, vy):
    """8XY6 - Shift right: VX >>= 1, VF = old bit 7 of VX."""
    return vx >> 1, vx >= 0x80


def alu_sub_yx(vx, vy):
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when VY > VX beforehand."""
    return (vy - vx) & 0xFF, vy > vx


def alu_shift_left(vx, vy):
    """8XYE - Shift left: VX <<= 1, VF = old bit 7 of VX."""
    return (vx << 1) & 0xFF, vx >= 0x80


def make_alu_instruction(operation):
    """Wrap an ALU operation as an instruction handler."""
    def alu_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        vx = jnp.astype(state.V[instruction.x], jnp.int32)
        vy = jnp.astype(state.V[instruction.y], jnp.int32)
        result, flag = operation(vx, vy)

        new_V = set_register(state.V, instruction.x, result)
        if flag is not None:
            new_V = set_register(new_V, FLAG_REGISTER, jnp.astype(flag, jnp.int32))
        return state.replace(V=new_V)

    alu_instruction.__doc__ = operation.__doc__
    return alu_instruction


execute_alu_set = make_alu_instruction(alu_set)
execute_alu_or = make_alu_instruction(alu_or)
execute_alu_and = make_alu_instruction(alu_and)
execute_alu_xor = make_alu_instruction(alu_xor)
execute_alu_add = make_alu_instruction(alu_add)
execute_alu_sub_xy = make_alu_instruction(alu_sub_xy)
execute_alu_shift_right = make_alu_instruction(alu_shift_right)
execute_alu_sub_yx = make_alu_instruction(alu_sub_yx)
execute_alu_shift_left = make_alu_instruction(alu_shift_left)
