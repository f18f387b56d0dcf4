"""CHIP-8 error types."""

from chipax.constants import (
    NO_FAULT, FAULT_STACK_UNDERFLOW, FAULT_STACK_OVERFLOW, FAULT_UNKNOWN_OPCODE
)


class Chip8Error(Exception):
    """Base class for all chipax errors."""


class ProgramTooLargeError(Chip8Error, ValueError):
    """Program does not fit between PROGRAM_START and the end of memory."""

    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(f"Program is {size} bytes, only {capacity} bytes fit in memory")


class ExecutionFault(Chip8Error):
    """Fatal fault raised while executing a program.

    Attributes:
        opcode: Instruction that faulted
        pc: Address the faulting instruction was fetched from
    """

    reason = "execution fault"

    def __init__(self, opcode: int, pc: int):
        self.opcode = opcode
        self.pc = pc
        super().__init__(f"{self.reason}: opcode 0x{opcode:04X} at 0x{pc:03X}")


class StackUnderflowError(ExecutionFault):
    reason = "return with empty call stack"


class StackOverflowError(ExecutionFault):
    reason = "call stack capacity exceeded"


class UnknownOpcodeError(ExecutionFault):
    reason = "unknown opcode"


_FAULT_ERRORS = {
    FAULT_STACK_UNDERFLOW: StackUnderflowError,
    FAULT_STACK_OVERFLOW: StackOverflowError,
    FAULT_UNKNOWN_OPCODE: UnknownOpcodeError,
}


def raise_for_fault(state) -> None:
    """Raise the ExecutionFault recorded in state, if any."""
    fault = int(state.fault)
    if fault == NO_FAULT:
        return
    error_cls = _FAULT_ERRORS.get(fault, ExecutionFault)
    raise error_cls(int(state.fault_opcode), int(state.fault_pc))
