"""Tests for the stateful Chip8 machine used by front ends."""

import numpy as np
import pytest
from chipax import (
    Chip8, Chip8Config, ExecutionFault, StackUnderflowError, StackOverflowError, UnknownOpcodeError,
    ProgramTooLargeError, PROGRAM_START
)
from conftest import assemble


class TestLoading:
    def test_load_program(self, machine):
        machine.load_program_to_memory(assemble(0x6A42))
        assert int(machine.state.memory[0x200]) == 0x6A
        assert int(machine.state.memory[0x201]) == 0x42

    def test_program_too_large(self, machine):
        with pytest.raises(ProgramTooLargeError):
            machine.load_program_to_memory(bytes(4000))
        assert int(machine.state.memory[0x200]) == 0

    def test_load_rom(self, machine, tmp_path):
        rom = tmp_path / "add.ch8"
        rom.write_bytes(assemble(0x7005, 0x7005))
        machine.load_rom(str(rom))
        machine.run_one_tick()
        machine.run_one_tick()
        assert int(machine.state.V[0]) == 10

    def test_reload_replaces_previous_program(self, machine):
        machine.load_program_to_memory(assemble(0x6A42, 0x7A01, 0x7A01))
        machine.run_one_tick()

        machine.load_program_to_memory(assemble(0x00E0))

        assert machine.state.memory[0x200:0x206].tolist() == [0x00, 0xE0, 0, 0, 0, 0]
        assert int(machine.state.V[0xA]) == 0
        assert int(machine.state.pc) == PROGRAM_START
        machine.reset()
        assert int(machine.state.memory[0x202]) == 0

    def test_load_sprites_is_repeatable(self, machine):
        before = np.asarray(machine.state.memory)
        machine.load_sprites_to_memory()
        machine.load_sprites_to_memory()
        np.testing.assert_array_equal(np.asarray(machine.state.memory), before)


class TestRunning:
    def test_tick_runs_speed_instructions(self, quiet_logger):
        machine = Chip8(Chip8Config(speed=3), logger=quiet_logger)
        machine.load_program_to_memory(assemble(0x7001, 0x7001, 0x7001, 0x7001))
        machine.run_one_tick()
        assert int(machine.state.V[0]) == 3

    def test_set_speed(self, machine):
        machine.load_program_to_memory(assemble(0x7001, 0x7001, 0x7001))
        machine.set_speed(2)
        machine.run_one_tick()
        assert machine.speed == 2
        assert int(machine.state.V[0]) == 2

    def test_set_speed_rejects_zero(self, machine):
        with pytest.raises(ValueError):
            machine.set_speed(0)
        assert machine.speed == 1

    def test_display_property(self, machine):
        machine.load_program_to_memory(assemble(0xA000, 0xD005))
        machine.run_one_tick()
        machine.run_one_tick()
        frame = machine.display
        assert isinstance(frame, np.ndarray)
        assert frame.shape == (64, 32)
        assert frame[0, 0] and frame[3, 0] and not frame[4, 0]

    def test_sound_active(self, machine):
        machine.load_program_to_memory(assemble(0x6002, 0xF018, 0x1204))
        machine.run_one_tick()
        assert not machine.sound_active
        machine.run_one_tick()  # ST = 2, then one timer tick
        assert machine.sound_active
        machine.run_one_tick()
        assert not machine.sound_active


class TestFaults:
    def test_return_on_empty_stack(self, machine):
        machine.load_program_to_memory(assemble(0x00EE))
        with pytest.raises(StackUnderflowError) as excinfo:
            machine.run_one_tick()
        assert excinfo.value.opcode == 0x00EE
        assert excinfo.value.pc == PROGRAM_START

    def test_unknown_opcode(self, machine):
        machine.load_program_to_memory(assemble(0x7001, 0x5121))
        machine.run_one_tick()
        with pytest.raises(UnknownOpcodeError) as excinfo:
            machine.run_one_tick()
        assert excinfo.value.opcode == 0x5121
        assert excinfo.value.pc == 0x202
        assert "0x5121" in str(excinfo.value)

    def test_stack_overflow(self, quiet_logger):
        machine = Chip8(Chip8Config(speed=5, stack_size=4), logger=quiet_logger)
        machine.load_program_to_memory(assemble(0x2200))  # calls itself forever
        with pytest.raises(StackOverflowError):
            machine.run_one_tick()

    def test_stack_holds_exactly_stack_size_calls(self, quiet_logger):
        # 0x200..0x206 call one level deeper each, then 0x208 returns all the way
        program = assemble(0x2202, 0x2204, 0x2206, 0x2208, 0x00EE)

        machine = Chip8(Chip8Config(speed=4, stack_size=4), logger=quiet_logger)
        machine.load_program_to_memory(program)
        machine.run_one_tick()
        assert int(machine.state.stack.pointer) == 4

        machine = Chip8(Chip8Config(speed=4, stack_size=3), logger=quiet_logger)
        machine.load_program_to_memory(program)
        with pytest.raises(StackOverflowError) as excinfo:
            machine.run_one_tick()
        assert excinfo.value.pc == 0x206

    def test_fault_stays_latched_until_reset(self, machine):
        machine.load_program_to_memory(assemble(0x00EE))
        with pytest.raises(ExecutionFault):
            machine.run_one_tick()
        with pytest.raises(StackUnderflowError):
            machine.run_one_tick()

        machine.reset()
        assert int(machine.state.fault) == 0
        assert int(machine.state.pc) == PROGRAM_START
        assert int(machine.state.memory[0x201]) == 0xEE

    def test_reset_restores_power_on_state(self, machine):
        machine.load_program_to_memory(assemble(0x6A42, 0xA123))
        machine.run_one_tick()
        machine.run_one_tick()
        machine.reset()
        assert int(machine.state.V[0xA]) == 0
        assert int(machine.state.I) == 0
        assert int(machine.state.memory[0x200]) == 0x6A


class TestInput:
    def test_press_and_release(self, machine):
        machine.press_key(0xE)
        assert bool(machine.state.keypad[0xE])
        machine.release_key(0xE)
        assert not bool(machine.state.keypad[0xE])

    @pytest.mark.parametrize("code", [-1, 16, 255])
    def test_invalid_key_code(self, machine, code):
        with pytest.raises(ValueError):
            machine.press_key(code)
        with pytest.raises(ValueError):
            machine.release_key(code)

    def test_wait_for_key(self, machine):
        machine.load_program_to_memory(assemble(0xF30A, 0x1202))
        machine.run_one_tick()
        assert machine.awaiting_key

        machine.run_one_tick()
        assert machine.awaiting_key

        machine.press_key(0x9)
        machine.run_one_tick()
        assert not machine.awaiting_key
        assert int(machine.state.V[3]) == 0x9


class TestPause:
    def test_toggle_pause(self, machine):
        machine.load_program_to_memory(assemble(0x7001, 0x7001))
        assert machine.toggle_pause() is True
        machine.run_one_tick()
        assert int(machine.state.V[0]) == 0

        assert machine.toggle_pause() is False
        machine.run_one_tick()
        assert int(machine.state.V[0]) == 1

    def test_pause_while_waiting_for_key(self, machine):
        machine.load_program_to_memory(assemble(0xF00A))
        machine.run_one_tick()
        assert machine.toggle_pause() is False
        assert machine.awaiting_key


class TestConfig:
    def test_defaults(self):
        config = Chip8Config()
        assert config.speed == 10
        assert config.tick_rate == 60
        assert config.instruction_frequency == 600

    @pytest.mark.parametrize("field", ["speed", "tick_rate", "stack_size"])
    def test_rejects_non_positive(self, field):
        with pytest.raises(ValueError):
            Chip8Config(**{field: 0})
