"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chipax import create_state, load_program, Chip8, Chip8Config
from chipax.logging import EmulatorLogger


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def quiet_logger():
    return EmulatorLogger(log_level="CRITICAL")


@pytest.fixture
def machine(quiet_logger):
    """Chip8 machine at speed 1 so each tick runs exactly one instruction."""
    return Chip8(Chip8Config(speed=1), logger=quiet_logger)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def assemble(*instructions):
    """Pack 16-bit instruction words into big-endian program bytes."""
    return b"".join(instruction.to_bytes(2, "big") for instruction in instructions)


def program_state(*instructions):
    """Fresh state with the given instructions loaded at 0x200."""
    return load_program(create_state(), assemble(*instructions))
