"""
CHIP-8 error hierarchy.

Every failure the core reports derives from :class:`Chip8Error`, so a host
can catch them all with a single except clause:

    Chip8Error (base)
    ├── ExecutionError - the CPU halted while executing
    │   ├── IllegalOpcode - instruction word with no defined meaning
    │   ├── StackOverflow - CALL with 16 return addresses already stacked
    │   ├── StackUnderflow - RET with an empty stack
    │   └── AddressError - access outside 0x000-0xFFF
    └── CapacityError - ROM does not fit between the entry point and 0xFFF

``AddressError`` is also raised directly by the host-side ``read_byte`` and
``write_byte`` helpers. None of these errors is recoverable in place; the
host reloads the machine to continue.
"""

from typing import Optional

from chip8vm.faults import Fault


class Chip8Error(Exception):
    """Base exception for all CHIP-8 core errors."""
    pass


class ExecutionError(Chip8Error):
    """A fault that halted the CPU.

    Attributes:
        pc: Address of the faulting instruction, when known
    """

    fault = Fault.NONE

    def __init__(self, message: str, pc: Optional[int] = None):
        self.pc = pc
        if pc is not None:
            message = f"{message} (at PC=0x{pc:03X})"
        super().__init__(message)


class IllegalOpcode(ExecutionError):
    """Instruction word that decodes to no known operation."""

    fault = Fault.ILLEGAL_OPCODE

    def __init__(self, opcode: int, pc: Optional[int] = None):
        self.opcode = opcode
        super().__init__(f"Illegal opcode 0x{opcode:04X}", pc)


class StackOverflow(ExecutionError):
    fault = Fault.STACK_OVERFLOW

    def __init__(self, pc: Optional[int] = None):
        super().__init__("Stack overflow: CALL with a full return stack", pc)


class StackUnderflow(ExecutionError):
    fault = Fault.STACK_UNDERFLOW

    def __init__(self, pc: Optional[int] = None):
        super().__init__("Stack underflow: RET with an empty return stack", pc)


class AddressError(ExecutionError):
    """Memory access outside the addressable range."""

    fault = Fault.ADDRESS_ERROR

    def __init__(self, address: int, pc: Optional[int] = None):
        self.address = address
        super().__init__(f"Address 0x{address:X} is outside memory (0x000-0xFFF)", pc)


class CapacityError(Chip8Error):
    """ROM image larger than the program area."""

    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(
            f"ROM of {size} bytes does not fit in {capacity} bytes of program memory"
        )


def error_from_fault(fault: int, info: int, pc: Optional[int] = None) -> ExecutionError:
    """Build the exception matching a recorded fault code."""
    fault = Fault(fault)
    if fault == Fault.ILLEGAL_OPCODE:
        return IllegalOpcode(info, pc)
    if fault == Fault.STACK_OVERFLOW:
        return StackOverflow(pc)
    if fault == Fault.STACK_UNDERFLOW:
        return StackUnderflow(pc)
    if fault == Fault.ADDRESS_ERROR:
        return AddressError(info, pc)
    raise ValueError(f"Fault code {fault!r} does not describe an error")
