"""CHIP-8 display operations."""

import jax
import jax.lax
import jax.numpy as jnp
from chipax.state import EmulatorState
from chipax.decode import DecodedInstruction
from chipax.constants import ADDRESS_MASK, FLAG_REGISTER
from chipax import display

SPRITE_WIDTH = 8


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - XOR an N-row sprite from memory at I onto the screen at (VX, VY).

    VF is set to 1 when any lit pixel is turned off.
    """
    origin_x = jnp.astype(state.V[instruction.x], jnp.int32)
    origin_y = jnp.astype(state.V[instruction.y], jnp.int32)
    base = jnp.astype(state.I, jnp.int32)

    def draw_pixel(i, carry):
        screen, collision = carry
        row = i // SPRITE_WIDTH
        col = i % SPRITE_WIDTH
        sprite_byte = jnp.astype(state.memory[(base + row) & ADDRESS_MASK], jnp.int32)
        bit_set = ((sprite_byte >> (SPRITE_WIDTH - 1 - col)) & 1) == 1

        def toggle(carry):
            screen, collision = carry
            screen, erased = display.set_pixel(screen, origin_x + col, origin_y + row)
            return screen, collision | erased

        return jax.lax.cond(bit_set, toggle, lambda c: c, (screen, collision))

    screen, collision = jax.lax.fori_loop(
        0, instruction.n * SPRITE_WIDTH, draw_pixel, (state.display, jnp.zeros((), dtype=jnp.bool_))
    )

    return state.replace(
        display=screen,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8))
    )
