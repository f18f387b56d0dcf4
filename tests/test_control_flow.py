"""Tests for control flow instructions."""

import pytest
import jax.numpy as jnp
from chipax import execute, press_key, PROGRAM_START


class TestPCAdvance:
    """PC moves past the instruction before it takes effect."""

    def test_ordinary_instruction_advances_pc(self, fresh_state):
        state = execute(fresh_state, 0x6001)
        assert state.pc == PROGRAM_START + 2

    def test_pc_wraps_at_end_of_memory(self, fresh_state):
        state = fresh_state.replace(pc=jnp.uint16(0xFFE))
        state = execute(state, 0x6001)
        assert state.pc == 0x000


class TestJump:
    """Test jump instructions."""

    def test_execute_jump(self, fresh_state):
        """1NNN - Jump to address."""
        state = execute(fresh_state, 0x1001)
        assert state.pc == 1

    def test_jump_with_offset(self, fresh_state):
        """BNNN - Jump to NNN + V0."""
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0xB250)
        assert state.pc == 0x260

    def test_jump_with_offset_ignores_vx(self, fresh_state):
        """BNNN - Only V0 is added, whatever the second nibble."""
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0x6230)  # V2 = 0x30
        state = execute(state, 0xB250)
        assert state.pc == 0x260

    def test_jump_with_offset_wraps(self, fresh_state):
        """BNNN - Target is masked to 12 bits."""
        state = execute(fresh_state, 0x60FF)  # V0 = 0xFF
        state = execute(state, 0xBFFF)
        assert state.pc == (0xFFF + 0xFF) & 0xFFF


class TestSkipInstructions:
    """Test all skip instruction variants."""

    def test_skip_if_equal_immediate_true(self, fresh_state):
        """3XKK - Should skip when VX == KK."""
        state = fresh_state.replace(V=fresh_state.V.at[5].set(0x42))

        state = execute(state, 0x3542)
        assert state.pc == PROGRAM_START + 4

    def test_skip_if_equal_immediate_false(self, fresh_state):
        """3XKK - Should not skip when VX != KK."""
        state = fresh_state.replace(V=fresh_state.V.at[5].set(0x41))

        state = execute(state, 0x3542)
        assert state.pc == PROGRAM_START + 2

    def test_skip_if_not_equal_immediate_true(self, fresh_state):
        """4XKK - Should skip when VX != KK."""
        state = fresh_state.replace(V=fresh_state.V.at[3].set(0x10))

        state = execute(state, 0x4320)
        assert state.pc == PROGRAM_START + 4

    def test_skip_if_not_equal_immediate_false(self, fresh_state):
        """4XKK - Should not skip when VX == KK."""
        state = fresh_state.replace(V=fresh_state.V.at[3].set(0x20))

        state = execute(state, 0x4320)
        assert state.pc == PROGRAM_START + 2

    def test_skip_if_equal_register_true(self, fresh_state):
        """5XY0 - Should skip when VX == VY."""
        state = fresh_state.replace(V=fresh_state.V.at[1].set(0x55).at[2].set(0x55))

        state = execute(state, 0x5120)
        assert state.pc == PROGRAM_START + 4

    def test_skip_if_equal_register_false(self, fresh_state):
        """5XY0 - Should not skip when VX != VY."""
        state = fresh_state.replace(V=fresh_state.V.at[1].set(0x55).at[2].set(0x44))

        state = execute(state, 0x5120)
        assert state.pc == PROGRAM_START + 2

    def test_skip_if_not_equal_register_true(self, fresh_state):
        """9XY0 - Should skip when VX != VY."""
        state = fresh_state.replace(V=fresh_state.V.at[7].set(0xAA).at[8].set(0xBB))

        state = execute(state, 0x9780)
        assert state.pc == PROGRAM_START + 4

    def test_skip_if_not_equal_register_false(self, fresh_state):
        """9XY0 - Should not skip when VX == VY."""
        state = fresh_state.replace(V=fresh_state.V.at[7].set(0xCC).at[8].set(0xCC))

        state = execute(state, 0x9780)
        assert state.pc == PROGRAM_START + 2

    def test_skip_with_zero_values(self, fresh_state):
        """3XKK - V0 == 0 on a fresh machine."""
        state = execute(fresh_state, 0x3000)
        assert state.pc == PROGRAM_START + 4

    @pytest.mark.parametrize("instruction", [0x5121, 0x912F])
    def test_register_skips_need_zero_low_nibble(self, fresh_state, instruction):
        """5XY1 and 9XYF are not instructions."""
        from chipax import FAULT_UNKNOWN_OPCODE

        state = execute(fresh_state, instruction)
        assert state.fault == FAULT_UNKNOWN_OPCODE


class TestKeySkips:
    """EX9E / EXA1 consult the keypad."""

    def test_skip_if_key_pressed(self, fresh_state):
        state = execute(fresh_state, 0x6005)  # V0 = 5
        state = press_key(state, 5)

        state = execute(state, 0xE09E)
        assert state.pc == PROGRAM_START + 6

    def test_no_skip_if_key_not_pressed(self, fresh_state):
        state = execute(fresh_state, 0x6005)

        state = execute(state, 0xE09E)
        assert state.pc == PROGRAM_START + 4

    def test_skip_if_key_not_pressed(self, fresh_state):
        state = execute(fresh_state, 0x6005)

        state = execute(state, 0xE0A1)
        assert state.pc == PROGRAM_START + 6

    def test_no_skip_if_not_pressed_key_is_held(self, fresh_state):
        state = execute(fresh_state, 0x6005)
        state = press_key(state, 5)

        state = execute(state, 0xE0A1)
        assert state.pc == PROGRAM_START + 4

    def test_other_key_does_not_count(self, fresh_state):
        state = execute(fresh_state, 0x6005)
        state = press_key(state, 6)

        state = execute(state, 0xE09E)
        assert state.pc == PROGRAM_START + 4
