"""Machine configuration."""

import dataclasses

from chipax.constants import DEFAULT_SPEED, TICK_RATE, STACK_SIZE


@dataclasses.dataclass(frozen=True)
class Chip8Config:
    """Settings for a :class:`chipax.machine.Chip8`.

    Attributes:
        speed: Instructions executed per tick
        tick_rate: Ticks per second the front end aims for
        seed: Seed of the PRNG behind CXKK
        stack_size: Call stack capacity. The stack is a fixed buffer of this
            many return addresses; a CALL beyond it faults with
            StackOverflowError instead of growing the stack.
    """
    speed: int = DEFAULT_SPEED
    tick_rate: int = TICK_RATE
    seed: int = 0
    stack_size: int = STACK_SIZE

    def __post_init__(self):
        if self.speed < 1:
            raise ValueError(f"speed must be at least 1, got {self.speed}")
        if self.tick_rate < 1:
            raise ValueError(f"tick_rate must be at least 1, got {self.tick_rate}")
        if self.stack_size < 1:
            raise ValueError(f"stack_size must be at least 1, got {self.stack_size}")

    @property
    def instruction_frequency(self) -> int:
        """Instructions per second at the target tick rate."""
        return self.speed * self.tick_rate
