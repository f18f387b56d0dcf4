"""CHIP-8 emulator state structures."""

import jax
import jax.numpy as jnp
from flax.struct import PyTreeNode, field

from chipax.constants import (
    MEMORY_SIZE, PROGRAM_START, FONT_START, FONT_DATA, SCREEN_WIDTH, SCREEN_HEIGHT,
    STACK_SIZE, NUM_REGISTERS, NUM_KEYS, RUNNING, NO_FAULT
)
from chipax.errors import ProgramTooLargeError


class StackState(PyTreeNode):
    """Fixed-capacity call stack of return addresses."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.int32))


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state."""
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_))
    stack: StackState = StackState()
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    latest_key: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    mode: jnp.ndarray = field(default_factory=lambda: jnp.astype(RUNNING, jnp.uint8))
    fault: jnp.ndarray = field(default_factory=lambda: jnp.astype(NO_FAULT, jnp.uint8))
    fault_opcode: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    fault_pc: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))


def load_glyphs(state: EmulatorState) -> EmulatorState:
    """Write the built-in hex digit glyphs to low memory."""
    font = jnp.array(FONT_DATA, dtype=jnp.uint8)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(font))


def create_state(rng: jax.random.PRNGKey = jax.random.PRNGKey(0), stack_size: int = STACK_SIZE) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    state = EmulatorState(rng, stack=StackState(data=jnp.zeros(stack_size, dtype=jnp.uint16)))
    return load_glyphs(state)


def load_program(state: EmulatorState, program: bytes) -> EmulatorState:
    """Copy raw CHIP-8 machine code into memory starting at 0x200.

    Raises:
        ProgramTooLargeError: If the program does not fit in memory. Nothing is
            truncated.
    """
    capacity = MEMORY_SIZE - PROGRAM_START
    if len(program) > capacity:
        raise ProgramTooLargeError(len(program), capacity)
    if not program:
        return state
    rom_array = jnp.array(list(program), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(program)].set(rom_array)
    return state.replace(memory=new_memory)


def read_rom(filename: str) -> bytes:
    """Raw bytes of a ROM file."""
    with open(filename, "rb") as f:
        return f.read()


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    return load_program(state, read_rom(filename))
