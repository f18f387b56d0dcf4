"""CHIP-8 memory and register operations."""

import jax
import jax.numpy as jnp
from chipax.state import EmulatorState
from chipax.decode import DecodedInstruction


def set_register(V: jnp.ndarray, x, value) -> jnp.ndarray:
    """Store value in VX, keeping only the low byte."""
    return V.at[x].set(jnp.astype(jnp.asarray(value) & 0xFF, jnp.uint8))


def execute_set(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """6XKK - Set VX = KK."""
    return state.replace(V=set_register(state.V, instruction.x, instruction.kk))


def execute_add(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """7XKK - Add KK to VX, wrapping without touching VF."""
    total = jnp.astype(state.V[instruction.x], jnp.int32) + instruction.kk
    return state.replace(V=set_register(state.V, instruction.x, total))


def execute_set_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """ANNN - Set I = NNN."""
    return state.replace(I=jnp.astype(instruction.nnn, jnp.uint16))


def execute_random(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """CXKK - Set VX = random & KK."""
    key, subkey = jax.random.split(state.rng)
    random_value = jax.random.randint(subkey, shape=(), minval=0, maxval=256, dtype=jnp.int32)
    return state.replace(V=set_register(state.V, instruction.x, random_value & instruction.kk), rng=key)
