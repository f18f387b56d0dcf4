"""Tick scheduling: timers, pause and the FX0A key wait.

One tick is the unit of work a front end invokes at TICK_RATE: finish a
pending key wait, run ``speed`` instructions, then decrement the timers.
Suspension is carried in ``state.mode`` so no call ever blocks:

    RUNNING --FX0A--> AWAITING_KEY --press_key--> RESUME_PENDING --tick--> RUNNING
    RUNNING <--toggle_pause--> PAUSED
"""

from functools import partial

import jax
import jax.lax
import jax.numpy as jnp

from chipax.state import EmulatorState
from chipax.constants import RUNNING, PAUSED, RESUME_PENDING, DEFAULT_SPEED
from chipax.emulator import step, read_opcode, is_running
from chipax.instructions.memory import set_register
from chipax.logging import scan_with_progress


def resume_from_key_wait(state: EmulatorState) -> EmulatorState:
    """Complete an FX0A whose key has arrived: VX = latest key, back to RUNNING."""
    def _resume(state):
        instruction = read_opcode(state, jnp.astype(state.pc, jnp.int32) - 2)
        x = (jnp.astype(instruction, jnp.int32) & 0x0F00) >> 8
        return state.replace(
            V=set_register(state.V, x, state.latest_key),
            mode=jnp.astype(RUNNING, jnp.uint8),
        )

    return jax.lax.cond(state.mode == RESUME_PENDING, _resume, lambda s: s, state)


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Count both timers down by one, frozen unless running."""
    def _tick(state):
        return state.replace(
            delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
            sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
        )

    return jax.lax.cond(is_running(state), _tick, lambda s: s, state)


def run_one_tick(state: EmulatorState, speed: int = DEFAULT_SPEED) -> EmulatorState:
    """Run up to ``speed`` instructions followed by one timer decrement."""
    state = resume_from_key_wait(state)
    state = jax.lax.fori_loop(0, speed, lambda _, s: step(s), state)
    return tick_timers(state)


def toggle_pause(state: EmulatorState) -> EmulatorState:
    """Flip between RUNNING and PAUSED; no effect while waiting on a key."""
    mode = jnp.where(
        state.mode == RUNNING, PAUSED,
        jnp.where(state.mode == PAUSED, RUNNING, state.mode)
    )
    return state.replace(mode=jnp.astype(mode, jnp.uint8))


def sound_active(state: EmulatorState) -> jnp.ndarray:
    """The buzzer sounds while the sound timer is non-zero."""
    return state.sound_timer > 0


@partial(jax.jit, static_argnums=(1, 2, 3))
def run_ticks(state: EmulatorState, num_ticks: int, speed: int = DEFAULT_SPEED, show_progress: bool = False):
    """Run several ticks, collecting the display after each.

    Returns:
        Tuple of the final state and a (num_ticks, 64, 32) stack of frames.
    """
    def _tick(state, _):
        state = run_one_tick(state, speed)
        return state, state.display

    if show_progress:
        _tick = scan_with_progress(num_ticks, desc=f"Running {num_ticks:,} ticks")(_tick)

    return jax.lax.scan(_tick, state, jnp.arange(num_ticks))
