"""CHIP-8 hex keypad state.

Front ends report physical key events here; the interpreter only reads the
keypad. A key press that arrives while the machine waits inside FX0A moves it
to RESUME_PENDING so the next tick can finish the instruction.
"""

import jax.numpy as jnp

from chipax.state import EmulatorState
from chipax.constants import AWAITING_KEY, RESUME_PENDING


def press_key(state: EmulatorState, code) -> EmulatorState:
    """Mark key as held and record it as the most recent press."""
    code = jnp.asarray(code) & 0xF
    mode = jnp.where(state.mode == AWAITING_KEY, RESUME_PENDING, state.mode)
    return state.replace(
        keypad=state.keypad.at[code].set(True),
        latest_key=jnp.astype(code, jnp.uint8),
        mode=jnp.astype(mode, jnp.uint8),
    )


def release_key(state: EmulatorState, code) -> EmulatorState:
    """Mark key as released."""
    return state.replace(keypad=state.keypad.at[jnp.asarray(code) & 0xF].set(False))


def is_key_pressed(state: EmulatorState, code) -> jnp.ndarray:
    """Whether key code (low nibble) is currently held."""
    return state.keypad[jnp.asarray(code) & 0xF]
