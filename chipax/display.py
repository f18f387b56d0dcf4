"""CHIP-8 display buffer.

The 64x32 monochrome screen is a boolean array indexed ``[x, y]``. Instructions
only touch it through :func:`set_pixel` and :func:`clear`; turning it into
actual pixels is the job of :mod:`chipax.rendering` or a front end.
"""

import jax.numpy as jnp

from chipax.constants import SCREEN_WIDTH, SCREEN_HEIGHT


def set_pixel(display: jnp.ndarray, x, y) -> tuple[jnp.ndarray, jnp.ndarray]:
    """Toggle the pixel at (x, y), wrapping both coordinates.

    Negative coordinates wrap too: x = -1 lands on column 63.

    Returns:
        The new display and whether the toggle turned a lit pixel off.
    """
    wrapped_x = jnp.mod(x, SCREEN_WIDTH)
    wrapped_y = jnp.mod(y, SCREEN_HEIGHT)
    erased = display[wrapped_x, wrapped_y]
    return display.at[wrapped_x, wrapped_y].set(~erased), erased


def clear(display: jnp.ndarray) -> jnp.ndarray:
    """Reset every pixel to unlit."""
    return jnp.zeros_like(display)
