"""CHIP-8 system instructions (00E0, 00EE) and fault recording."""

import jax
import jax.lax
import jax.numpy as jnp
from chipax.state import EmulatorState
from chipax.decode import DecodedInstruction
from chipax.constants import (
    ADDRESS_MASK, FAULT_STACK_UNDERFLOW, FAULT_UNKNOWN_OPCODE
)
from chipax.stack import pop, is_empty
from chipax import display


def record_fault(state: EmulatorState, code: int, instruction: DecodedInstruction) -> EmulatorState:
    """Latch a fatal fault; PC has already moved past the faulting instruction."""
    return state.replace(
        fault=jnp.astype(code, jnp.uint8),
        fault_opcode=jnp.astype(instruction.raw, jnp.uint16),
        fault_pc=jnp.astype((state.pc - 2) & ADDRESS_MASK, jnp.uint16),
    )


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=display.clear(state.display))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    def _return(state):
        stack, address = pop(state.stack)
        return state.replace(stack=stack, pc=address)

    return jax.lax.cond(
        is_empty(state.stack),
        lambda s: record_fault(s, FAULT_STACK_UNDERFLOW, instruction),
        _return,
        state
    )


def execute_unknown(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Any instruction word outside the CHIP-8 set."""
    return record_fault(state, FAULT_UNKNOWN_OPCODE, instruction)
