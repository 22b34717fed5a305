"""Fault codes recorded in the emulator state.

Jit-compiled execution cannot raise, so a failing instruction records one of
these codes in ``state.fault`` instead. A nonzero fault is the Halted state:
``step`` leaves such a state untouched until the host reloads the machine.
"""

import enum

import jax
import jax.numpy as jnp

from chip8vm.state import EmulatorState


class Fault(enum.IntEnum):
    NONE = 0
    ILLEGAL_OPCODE = 1
    STACK_OVERFLOW = 2
    STACK_UNDERFLOW = 3
    ADDRESS_ERROR = 4


def set_fault(state: EmulatorState, fault: Fault, info) -> EmulatorState:
    """Record ``fault`` with its opcode or address payload."""
    return state.replace(
        fault=jnp.asarray(int(fault), dtype=jnp.uint8),
        fault_info=jnp.asarray(info).astype(jnp.uint16),
    )


def guard(condition, fault: Fault, info, action, state: EmulatorState, *operands) -> EmulatorState:
    """Run ``action(state, *operands)`` when ``condition`` holds, else fault.

    The faulting branch returns the state unchanged apart from the fault
    fields, so a rejected instruction has no partial side effects.
    """
    return jax.lax.cond(
        condition,
        action,
        lambda s, *_: set_fault(s, fault, info),
        state, *operands
    )


def is_halted(state: EmulatorState):
    """Whether ``state`` carries a fault (works on traced values)."""
    return state.fault != 0
