"""Stateful CHIP-8 machine for front ends.

The core functions in :mod:`chipax.coordinator` are pure; :class:`Chip8`
holds the current state value and is the only thing that replaces it. A front
end calls :meth:`Chip8.run_one_tick` once per frame at ``config.tick_rate``.
"""

from typing import Optional

import jax
import numpy as np

from chipax import coordinator, keyboard
from chipax.config import Chip8Config
from chipax.constants import NUM_KEYS, PAUSED, AWAITING_KEY, RESUME_PENDING
from chipax.errors import ExecutionFault, raise_for_fault
from chipax.logging import EmulatorLogger
from chipax.state import EmulatorState, create_state, load_glyphs, load_program, read_rom

_run_one_tick = jax.jit(coordinator.run_one_tick, static_argnums=1)


class Chip8:
    """Driver-facing CHIP-8 machine.

    Example::

        machine = Chip8(Chip8Config(speed=12))
        machine.load_rom("pong.ch8")
        while True:
            machine.run_one_tick()
            draw(machine.display)
    """

    def __init__(self, config: Optional[Chip8Config] = None, logger: Optional[EmulatorLogger] = None):
        self.config = config or Chip8Config()
        self.logger = logger or EmulatorLogger()
        self.speed = self.config.speed
        self._program = b""
        self.state: EmulatorState = self._fresh_state()

    def _fresh_state(self) -> EmulatorState:
        return create_state(jax.random.PRNGKey(self.config.seed), stack_size=self.config.stack_size)

    def reset(self):
        """Restart from power-on state, reloading the last program."""
        self.state = load_program(self._fresh_state(), self._program)
        self.logger.log_reset()

    def load_sprites_to_memory(self):
        """Write the hex digit glyphs to low memory. Safe to repeat."""
        self.state = load_glyphs(self.state)

    def load_program_to_memory(self, program: bytes, source: str = "program"):
        """Power the machine on with raw machine code at 0x200.

        Registers, screen, timers and memory past the program start from
        power-on values, so nothing of a previously loaded program survives.

        Raises:
            ProgramTooLargeError: If the program does not fit.
        """
        program = bytes(program)
        self.state = load_program(self._fresh_state(), program)
        self._program = program
        self.logger.log_rom_loaded(source, len(program))

    def load_rom(self, filename: str):
        """Load a ROM file at 0x200."""
        self.load_program_to_memory(read_rom(filename), source=filename)

    def run_one_tick(self):
        """Execute up to ``speed`` instructions, then one timer tick.

        Raises:
            ExecutionFault: If the program faults. The fault stays latched
                until :meth:`reset`.
        """
        self.state = _run_one_tick(self.state, self.speed)
        try:
            raise_for_fault(self.state)
        except ExecutionFault as error:
            self.logger.log_fault(error)
            raise

    def toggle_pause(self) -> bool:
        """Pause or resume; returns whether the machine is now paused."""
        self.state = coordinator.toggle_pause(self.state)
        self.logger.log_pause(self.paused)
        return self.paused

    def set_speed(self, speed: int):
        if speed < 1:
            raise ValueError(f"speed must be at least 1, got {speed}")
        self.speed = speed
        self.logger.log_speed(speed)

    def press_key(self, code: int):
        self.state = keyboard.press_key(self.state, _check_key(code))

    def release_key(self, code: int):
        self.state = keyboard.release_key(self.state, _check_key(code))

    @property
    def paused(self) -> bool:
        return int(self.state.mode) == PAUSED

    @property
    def awaiting_key(self) -> bool:
        return int(self.state.mode) in (AWAITING_KEY, RESUME_PENDING)

    @property
    def sound_active(self) -> bool:
        return bool(coordinator.sound_active(self.state))

    @property
    def display(self) -> np.ndarray:
        """Current (64, 32) boolean frame."""
        return np.asarray(self.state.display)


def _check_key(code: int) -> int:
    if not 0 <= code < NUM_KEYS:
        raise ValueError(f"Key code must be in 0..15, got {code}")
    return code
