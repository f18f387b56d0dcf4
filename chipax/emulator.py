"""Main CHIP-8 emulator execution engine."""

import jax
import jax.lax
import jax.numpy as jnp
from chipax.state import EmulatorState
from chipax.decode import Op, decode
from chipax.constants import ADDRESS_MASK, RUNNING, NO_FAULT
from chipax.instructions.system import execute_clear_screen, execute_return, execute_unknown
from chipax.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from chipax.instructions.alu import (
    execute_alu_set, execute_alu_or, execute_alu_and, execute_alu_xor, execute_alu_add,
    execute_alu_sub_xy, execute_alu_shift_right, execute_alu_sub_yx, execute_alu_shift_left
)
from chipax.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipax.instructions.display import execute_display
from chipax.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)

HANDLERS = {
    Op.CLS: execute_clear_screen,
    Op.RET: execute_return,
    Op.JP: execute_jump,
    Op.CALL: execute_call,
    Op.SE_BYTE: execute_skip_if_equal_immediate,
    Op.SNE_BYTE: execute_skip_if_not_equal_immediate,
    Op.SE_REG: execute_skip_if_equal_register,
    Op.LD_BYTE: execute_set,
    Op.ADD_BYTE: execute_add,
    Op.LD_REG: execute_alu_set,
    Op.OR: execute_alu_or,
    Op.AND: execute_alu_and,
    Op.XOR: execute_alu_xor,
    Op.ADD_REG: execute_alu_add,
    Op.SUB: execute_alu_sub_xy,
    Op.SHR: execute_alu_shift_right,
    Op.SUBN: execute_alu_sub_yx,
    Op.SHL: execute_alu_shift_left,
    Op.SNE_REG: execute_skip_if_not_equal_register,
    Op.LD_I: execute_set_index,
    Op.JP_V0: execute_jump_with_offset,
    Op.RND: execute_random,
    Op.DRW: execute_display,
    Op.SKP: execute_skip_if_key,
    Op.SKNP: execute_skip_if_not_key,
    Op.LD_VX_DT: execute_get_delay_timer,
    Op.LD_VX_K: execute_wait_for_key,
    Op.LD_DT_VX: execute_set_delay_timer,
    Op.LD_ST_VX: execute_set_sound_timer,
    Op.ADD_I_VX: execute_add_to_index,
    Op.LD_F_VX: execute_font_character,
    Op.LD_B_VX: execute_bcd_conversion,
    Op.LD_I_VX: execute_store_registers,
    Op.LD_VX_I: execute_load_registers,
    Op.UNKNOWN: execute_unknown,
}
_BRANCHES = [HANDLERS[op] for op in Op]


def execute(state: EmulatorState, instruction) -> EmulatorState:
    """Advance PC past the instruction, then apply it."""
    decoded_instruction = decode(instruction)
    state = state.replace(pc=(state.pc + 2) & ADDRESS_MASK)
    return jax.lax.switch(decoded_instruction.op, _BRANCHES, state, decoded_instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def read_opcode(state: EmulatorState, address) -> jnp.ndarray:
    """Big-endian instruction word stored at address."""
    address = jnp.astype(address, jnp.int32)
    return _pack_u16(state.memory[address & ADDRESS_MASK], state.memory[(address + 1) & ADDRESS_MASK])


def fetch(state: EmulatorState) -> jnp.ndarray:
    """Fetch the instruction at PC without moving PC."""
    return read_opcode(state, state.pc)


def is_running(state: EmulatorState) -> jnp.ndarray:
    """Instructions and timers advance only in this condition."""
    return (state.mode == RUNNING) & (state.fault == NO_FAULT)


def step(state: EmulatorState) -> EmulatorState:
    """Fetch and execute one instruction if the machine is running."""
    return jax.lax.cond(
        is_running(state),
        lambda s: execute(s, fetch(s)),
        lambda s: s,
        state
    )
