"""CHIP-8 stack operations."""

import jax.numpy as jnp
from chipax.constants import ADDRESS_MASK
from chipax.state import StackState


def is_empty(stack: StackState) -> jnp.ndarray:
    return stack.pointer <= 0


def is_full(stack: StackState) -> jnp.ndarray:
    return stack.pointer >= stack.data.shape[0]


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack. Caller checks is_full first."""
    masked_address = jnp.astype(address & ADDRESS_MASK, jnp.uint16)
    new_data = stack.data.at[stack.pointer].set(masked_address)
    return stack.replace(data=new_data, pointer=stack.pointer + 1)


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack. Caller checks is_empty first."""
    new_pointer = stack.pointer - 1
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
