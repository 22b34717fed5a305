"""CHIP-8 system instructions (0x0xxx) and the illegal-opcode handler."""

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.faults import Fault, guard, set_fault
from chip8vm.stack import is_empty, pop


def execute_illegal(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Unknown bit pattern: halt with the raw word as fault payload."""
    return set_fault(state, Fault.ILLEGAL_OPCODE, instruction.raw)


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display))


def _return(state: EmulatorState) -> EmulatorState:
    stack, address = pop(state.stack)
    return state.replace(stack=stack, pc=address)


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    return guard(~is_empty(state.stack), Fault.STACK_UNDERFLOW, state.pc, _return, state)
