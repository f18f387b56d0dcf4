"""CHIP-8 emulator package."""

from chipax.state import EmulatorState, create_state, load_glyphs, load_program, load_rom
from chipax.emulator import execute, fetch, step
from chipax.decode import Op, DecodedInstruction, decode, disassemble
from chipax.coordinator import run_one_tick, run_ticks, toggle_pause, tick_timers, resume_from_key_wait
from chipax.keyboard import press_key, release_key, is_key_pressed
from chipax.errors import (
    Chip8Error, ProgramTooLargeError, ExecutionFault,
    StackUnderflowError, StackOverflowError, UnknownOpcodeError,
)
from chipax.config import Chip8Config
from chipax.machine import Chip8
from chipax.constants import *

__all__ = [
    "EmulatorState",
    "create_state",
    "load_glyphs",
    "load_program",
    "load_rom",
    "fetch",
    "execute",
    "step",
    "Op",
    "DecodedInstruction",
    "decode",
    "disassemble",
    "run_one_tick",
    "run_ticks",
    "toggle_pause",
    "tick_timers",
    "resume_from_key_wait",
    "press_key",
    "release_key",
    "is_key_pressed",
    "Chip8Error",
    "ProgramTooLargeError",
    "ExecutionFault",
    "StackUnderflowError",
    "StackOverflowError",
    "UnknownOpcodeError",
    "Chip8Config",
    "Chip8",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "RUNNING",
    "PAUSED",
    "AWAITING_KEY",
    "RESUME_PENDING",
]
